"""
Command-line interface for checking and browsing lexicon documents.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from conlang_editor.exceptions import ParseError
from conlang_editor.models import ValidationResult
from conlang_editor.serialization import LexiconDocument, load_document
from conlang_editor.validator import validate_etymology


def main(argv: list[str] | None = None) -> int:
    """Main entry point for conlang-ety CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    return args.func(args)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="conlang-ety",
        description="Etymology and alphabet tool for conlang lexicon documents",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s (conlang-editor)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug output to stderr",
    )

    subparsers = parser.add_subparsers(title="commands", dest="command")

    # check command
    check_parser = subparsers.add_parser(
        "check",
        help="Validate etymology and alphabet of a lexicon document",
    )
    check_parser.add_argument(
        "file",
        type=Path,
        help="YAML lexicon document",
    )
    check_parser.add_argument(
        "--errors-only",
        action="store_true",
        help="Hide warnings",
    )
    check_parser.set_defaults(func=cmd_check)

    # roots command
    roots_parser = subparsers.add_parser(
        "roots",
        help="List etymological roots in alphabetical order",
    )
    roots_parser.add_argument(
        "file",
        type=Path,
        help="YAML lexicon document",
    )
    roots_parser.set_defaults(func=cmd_roots)

    # sort command
    sort_parser = subparsers.add_parser(
        "sort",
        help="List entries in the lexicon's alphabetical order",
    )
    sort_parser.add_argument(
        "file",
        type=Path,
        help="YAML lexicon document",
    )
    sort_parser.add_argument(
        "--ids",
        action="store_true",
        help="Prefix each entry with its id",
    )
    sort_parser.set_defaults(func=cmd_sort)

    return parser


def cmd_check(args: argparse.Namespace) -> int:
    """Handle check command."""
    print(f"\nChecking {args.file}...")
    document = _load(args.file)
    if document is None:
        return 1

    print(f"  Entries:   {len(document.lexicon)}")
    print(f"  Relations: {document.graph.relation_count}")
    print(f"  Alphabet:  {len(document.table)} cluster(s)")

    results = validate_etymology(
        document.graph,
        document.lexicon,
        table=document.table,
        words=document.lexicon.values(),
    )
    errors = [r for r in results if r.severity == "ERROR"]
    warnings = [r for r in results if r.severity == "WARNING"]

    print("\nValidation Results:")
    _print_results(errors if args.errors_only else results)

    if errors:
        print(f"\nFound {len(errors)} error(s), {len(warnings)} warning(s)")
        return 1
    print("\nValidation passed!")
    return 0


def cmd_roots(args: argparse.Namespace) -> int:
    """Handle roots command."""
    document = _load(args.file)
    if document is None:
        return 1

    roots = document.graph.get_all_roots()
    if not roots:
        print("No etymological roots found.")
        return 0

    for root in roots:
        if root.is_external:
            print(f"  {root.display}  [{root.external.language or 'external'}]")
        else:
            print(f"  {root.display}")
    return 0


def cmd_sort(args: argparse.Namespace) -> int:
    """Handle sort command."""
    document = _load(args.file)
    if document is None:
        return 1

    lexicon = document.lexicon
    if not document.table.is_usable and len(document.table):
        print(
            "[WARN] Alphabet does not cover all characters; "
            "using plain string order",
            file=sys.stderr,
        )

    for entry_id in document.collator.sorted(lexicon.ids(), key=lexicon.resolve):
        if args.ids:
            print(f"{entry_id:<6} {lexicon.resolve(entry_id)}")
        else:
            print(lexicon.resolve(entry_id))
    return 0


def _load(path: Path) -> LexiconDocument | None:
    """Load a document, printing the problem and returning None on failure."""
    try:
        return load_document(path)
    except ParseError as e:
        print(f"\n  [PARSE ERROR] {e}")
        if e.line:
            print(f"               Line: {e.line}")
    except FileNotFoundError as e:
        print(f"\n  [ERROR] {e}")
    return None


def _print_results(results: list[ValidationResult]) -> None:
    """Print validation errors and warnings."""
    if not results:
        print("  No problems found.")
    for result in results:
        tag = "[ERROR]" if result.severity == "ERROR" else "[WARN] "
        print(f"  {tag} {result.rule_id} {result.entity_type} "
              f"{result.entity_id}: {result.message}")
        if result.details:
            for key, value in result.details.items():
                print(f"          {key}: {value}")


if __name__ == "__main__":
    sys.exit(main())
