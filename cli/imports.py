#!/usr/bin/env python3

import argparse
import sys
import sqlite3
from pathlib import Path
from ingestion import DecodeError, get_allowed_extensions
from services.imports import ImportRejectedError
from logger import get_logger

logger = get_logger()


def cmd_run(args, services):
    """Import categories and subcategories from a CSV or Excel file.

    Args:
        args: Parsed command-line arguments with file, uploaded_by and dry_run
        services: Services container with the imports service
    """
    path = Path(args.file)

    logger.info(f"Import file: {path}")
    logger.info(f"Uploaded by: {args.uploaded_by}")
    if args.dry_run:
        logger.info("Dry run: nothing will be written")
    logger.info("-" * 80)

    try:
        result = services.imports.import_file(
            path, uploaded_by=args.uploaded_by, dry_run=args.dry_run
        )
    except (ImportRejectedError, DecodeError) as e:
        logger.error(f"Import rejected: {e}")
        sys.exit(1)
    except sqlite3.Error as e:
        logger.error(f"Storage error during import: {e}")
        logger.error("The import may be partially applied; it is safe to run it again.")
        sys.exit(1)

    logger.info("")
    logger.info(f"Categories created:       {result.categories_created}")
    logger.info(f"Categories matched:       {result.categories_matched}")
    logger.info(f"Subcategories created:    {result.subcategories_created}")
    logger.info(f"Subcategories duplicated: {result.subcategories_duplicate}")

    if result.errors:
        logger.info(f"\n{len(result.errors)} row(s) could not be imported:")
        for error in result.errors:
            logger.info(f"  {error}")

    if not result.success:
        logger.error(result.message)
        sys.exit(1)

    logger.info(f"\n✓ {result.message}")


def cmd_list(args, services):
    """List previous imports, newest first."""
    data_imports = services.data_imports.find_all()

    if not data_imports:
        logger.info("No imports found.")
        return

    logger.info("\nImports:")
    logger.info("=" * 80)
    for data_import in data_imports:
        logger.info(
            f"ID: {data_import.id}  {data_import.created_at.isoformat(sep=' ')}  "
            f"by {data_import.uploaded_by} ({data_import.file_format})"
        )
        if data_import.filename:
            logger.info(f"  Archive: {data_import.filename}")
        logger.info(
            f"  Categories: {data_import.categories_created} created, "
            f"{data_import.categories_matched} matched"
        )
        logger.info(
            f"  Subcategories: {data_import.subcategories_created} created, "
            f"{data_import.subcategories_duplicate} duplicate"
        )
        if data_import.error_count:
            logger.info(f"  Rejected rows: {data_import.error_count}")
        logger.info("-" * 80)

    logger.info(f"\nTotal imports: {len(data_imports)}")


def setup_parser(subparsers):
    """Setup imports subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "imports",
        help="Import category files",
        description="Bulk import categories and subcategories from CSV or Excel",
    )

    imports_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available import commands",
        dest="subcommand",
        required=True,
    )

    run_parser = imports_subparsers.add_parser(
        "run",
        help="Import a CSV or Excel file",
        epilog=f"""
Accepted file types: {', '.join(get_allowed_extensions())}

File layout (first row is the header):
  CategoryName,SubCategoryName[,CategoryDescription,CategoryDisplayOrder,
                               SubCategoryDescription,SubCategoryDisplayOrder]

Examples:
  python -m cli imports run menu.xlsx --uploaded-by alex
  python -m cli imports run menu.csv --dry-run
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    run_parser.add_argument("file", help="Path to the .csv, .xlsx or .xls file")
    run_parser.add_argument(
        "--uploaded-by",
        default="Unknown",
        help="Name recorded in the import history",
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Reconcile and report without writing anything",
    )
    run_parser.set_defaults(func=cmd_run)

    list_parser = imports_subparsers.add_parser("list", help="List previous imports")
    list_parser.set_defaults(func=cmd_list)
