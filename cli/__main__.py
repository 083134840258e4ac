#!/usr/bin/env python3
"""
menuimport CLI - Bulk import and management of menu categories.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    categories     Manage categories
    subcategories  Manage subcategories
    imports        Import category files and view import history
    migrate        Database migrations

Examples:
    python -m cli migrate apply
    python -m cli imports run menu.xlsx --uploaded-by alex
    python -m cli imports list
    python -m cli categories list
    python -m cli subcategories list --category Beverages
"""

import sys
import argparse
from cli import categories, subcategories, imports, migrate
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="menuimport - Bulk import of menu categories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    categories.setup_parser(subparsers)
    subcategories.setup_parser(subparsers)
    imports.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            # migrate works on the raw database, everything else on services
            if args.command == "migrate":
                args.func(args, DatabaseManager(config))
            else:
                args.func(args, Services(config))
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
