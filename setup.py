#!/usr/bin/env python3

# flake8: noqa: E501

from pathlib import Path

from setuptools import find_packages, setup


def get_version():
    """Read version from fieldcms/__init__.py"""
    try:
        with open("fieldcms/__init__.py") as f:
            for line in f:
                if line.startswith("__version__"):
                    return line.split("=")[1].strip().strip('"').strip("'")
    except OSError:
        pass
    return "1.0.0"


def _collect_package_files(*directories: str):
    """Collect package data files relative to the fieldcms package."""
    collected = []
    package_root = Path("fieldcms")
    for directory in directories:
        root = Path(directory)
        if not root.exists():
            continue
        for path in root.rglob("*"):
            if path.is_file():
                try:
                    relative = path.relative_to(package_root)
                except ValueError:
                    # Skip files outside package root
                    continue
                collected.append(str(relative))
    return collected


base_deps = [
    "jinja2>=3.1.2",
    "markupsafe>=2.1.3",
    "pydantic>=2.5.0",
    "toml>=0.10.2",
    "beautifulsoup4>=4.12.3",
    "atomicwrites>=1.4.1",
]

# Optional extras
extras_require = {
    "dev": [
        "pytest>=7.4.0",
        "black>=23.0.0",
        "isort>=5.12.0",
        "flake8>=6.0.0",
    ],
}

# Read long description
try:
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()
except OSError:
    long_description = "Declarative custom fields for content records, taxonomy terms and settings pages."

setup(
    name="fieldcms",
    version=get_version(),
    description="Declarative custom fields for content records, taxonomy terms and settings pages.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["fieldcms", "fieldcms.*"]),
    include_package_data=True,
    package_data={
        "fieldcms": _collect_package_files("fieldcms/templates"),
    },
    python_requires=">=3.11,<3.14",
    install_requires=base_deps,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "fieldcms=fieldcms.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content :: Content Management System",
    ],
    keywords="cms custom-fields forms metabox settings taxonomy",
)
