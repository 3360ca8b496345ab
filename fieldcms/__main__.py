"""
Enable running fieldcms as a module: python -m fieldcms
"""

import sys

from fieldcms.cli import main

if __name__ == "__main__":
    sys.exit(main())
