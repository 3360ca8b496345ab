#!/usr/bin/env python3
"""
fieldcms CLI - validate, inspect and preview field registration documents
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from fieldcms import __version__
from fieldcms.config import load_document
from fieldcms.errors import FieldCMSError, SchemaError
from fieldcms.fields.types import ContextKind
from fieldcms.manager import FieldManager
from fieldcms.schema.validator import SchemaValidator
from fieldcms.storage.backends import InMemoryStorage, JsonFileStorage

SECTION_TITLES = {
    "record_types": "Record type",
    "taxonomies": "Taxonomy",
    "settings_pages": "Settings page",
}


def build_manager(document_path: str, storage_path: Optional[str] = None) -> FieldManager:
    """Create a manager backed by a JSON storage file (or memory) and register the document."""
    storage = JsonFileStorage(storage_path) if storage_path else InMemoryStorage()
    manager = FieldManager(storage=storage)
    manager.register_from_file(document_path)
    return manager


def print_namespace(title: str, namespace: str, details: Dict[str, Any]) -> None:
    print(f"{title}: {namespace}")
    definition = details.get("definition")
    if definition is None:
        print("  (fields attached to an existing host definition)")
    top_level = details.get("top_level") or []
    if top_level:
        print("  Top-level fields:")
        for field in top_level:
            marker = " *" if field.get("required") else ""
            print(f"    - {field['name']} ({field['type']}){marker}")
    nested = details.get("nested") or []
    if nested:
        print("  Nested fields:")
        for name in nested:
            print(f"    - {name}")
    for item in details.get("invalid_containers") or []:
        print(f"  Warning: container must be wrapped in a metabox: {item}")


def cmd_validate(args) -> int:
    try:
        document = load_document(args.file)
    except FieldCMSError as e:
        print(f"Error: {e}")
        return 1

    result = SchemaValidator(extra_types=args.extra_type or None).validate(document)
    if not result.valid:
        print(result.error_message())
        return 1

    print(f"{args.file} is valid.")
    return 0


def cmd_describe(args) -> int:
    try:
        manager = build_manager(args.file)
    except SchemaError as e:
        print(str(e))
        return 1
    except FieldCMSError as e:
        print(f"Error: {e}")
        return 1

    summary = manager.describe()
    if args.namespace:
        summary = {
            section: {name: details for name, details in entries.items() if name == args.namespace}
            for section, entries in summary.items()
        }
        if not any(summary.values()):
            print(f"Error: Namespace '{args.namespace}' not found.")
            return 1

    if args.json:
        print(json.dumps(summary, indent=2, default=str))
        return 0

    for section, entries in summary.items():
        for namespace, details in entries.items():
            print_namespace(SECTION_TITLES[section], namespace, details)
    return 0


def render_namespace(manager: FieldManager, namespace: str, context_id: Optional[str]) -> Optional[str]:
    kind = manager.find_namespace(namespace)
    if kind is None:
        return None

    if kind is ContextKind.RECORD:
        record_id = int(context_id) if context_id is not None else None
        boxes: List[str] = []
        for box in manager.records.metaboxes(namespace):
            boxes.append(f"<!-- {box.title} ({box.context}, {box.priority}) -->")
            boxes.append(str(manager.records.render_metabox(namespace, box.id, record_id)))
        return "\n".join(boxes)
    if kind is ContextKind.TERM:
        term_id = int(context_id) if context_id is not None else None
        return str(manager.taxonomies.render_term_fields(namespace, term_id))
    return str(manager.settings.render_page(namespace))


def cmd_render(args) -> int:
    try:
        manager = build_manager(args.file, args.storage)
    except SchemaError as e:
        print(str(e))
        return 1
    except (FieldCMSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    try:
        markup = render_namespace(manager, args.namespace, args.context_id)
    except ValueError as e:
        print(f"Error: Invalid context id '{args.context_id}': {e}")
        return 1
    if markup is None:
        print(f"Error: Namespace '{args.namespace}' not found.")
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8") as handle:
            handle.write(markup + "\n")
        print(f"Wrote {args.namespace} markup to {args.output}")
    else:
        print(markup)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="fieldcms",
        description="fieldcms - declarative fields for records, terms and settings pages",
    )
    parser.add_argument("--version", "-v", action="version", version=f"fieldcms {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Check a registration document against the schema",
        description="Validate a JSON or TOML registration document without registering it",
    )
    validate_parser.add_argument("file", help="Path to a .json or .toml document")
    validate_parser.add_argument(
        "--extra-type",
        action="append",
        help="Additional field type tag to accept (may be repeated)",
    )
    validate_parser.set_defaults(func=cmd_validate)

    # Describe command
    describe_parser = subparsers.add_parser(
        "describe",
        help="List registered namespaces and their fields",
        description="Register a document and print each namespace's top-level and nested fields",
    )
    describe_parser.add_argument("file", help="Path to a .json or .toml document")
    describe_parser.add_argument("--namespace", "-n", help="Only show this namespace")
    describe_parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    describe_parser.set_defaults(func=cmd_describe)

    # Render command
    render_parser = subparsers.add_parser(
        "render",
        help="Render a namespace's form markup",
        description="Render the edit form markup for a record type, taxonomy or settings page",
        epilog="""
Examples:
  fieldcms render fields.json --namespace product
  fieldcms render fields.json --namespace product --storage store.json --context-id 42
  fieldcms render fields.toml --namespace shop_settings --output settings.html
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    render_parser.add_argument("file", help="Path to a .json or .toml document")
    render_parser.add_argument("--namespace", "-n", required=True, help="Record type, taxonomy or settings page id")
    render_parser.add_argument("--storage", help="JSON storage file to read current values from")
    render_parser.add_argument("--context-id", help="Record or term id whose values should be shown")
    render_parser.add_argument("--output", "-o", help="Write markup to this file instead of stdout")
    render_parser.set_defaults(func=cmd_render)

    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
