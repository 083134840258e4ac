#!/usr/bin/env python3

import sys
from logger import get_logger

logger = get_logger()


def _find_category_or_exit(services, name):
    category = services.categories.find_by_name(name)
    if not category:
        logger.error(f"Category '{name}' not found.")
        logger.info("Use 'python -m cli categories list' to see available categories.")
        sys.exit(1)
    return category


def cmd_list(args, services):
    """List subcategories, optionally for a single category."""
    if args.category:
        category = _find_category_or_exit(services, args.category)
        subcategories = services.subcategories.find_by_category(category.id)
        category_names = {category.id: category.name}
    else:
        subcategories = services.subcategories.find_all()
        category_names = {c.id: c.name for c in services.categories.find_all()}

    if not subcategories:
        logger.info("No subcategories found.")
        return

    logger.info("\nSubcategories:")
    logger.info("=" * 80)
    for subcategory in subcategories:
        parent = category_names.get(subcategory.category_id, "Unknown")
        order = (
            f" [order {subcategory.display_order}]"
            if subcategory.display_order is not None
            else ""
        )
        logger.info(f"{subcategory.id:>5}  {parent} / {subcategory.name}{order}")
        if subcategory.description:
            logger.info(f"       {subcategory.description}")

    logger.info(f"\nTotal subcategories: {len(subcategories)}")


def cmd_create(args, services):
    """Create a subcategory under an existing category."""
    category = _find_category_or_exit(services, args.category)

    if services.subcategories.find_by_name(category.id, args.name):
        logger.error(f"'{category.name}' already has a subcategory named '{args.name}'.")
        sys.exit(1)

    try:
        subcategory = services.subcategories.create(
            category.id, args.name.strip(), args.description, args.order
        )
        logger.info(f"✓ Subcategory created successfully with ID: {subcategory.id}")
        logger.info(f"  {category.name} / {subcategory.name}")
    except Exception as e:
        logger.error(f"Error creating subcategory: {e}")
        sys.exit(1)


def cmd_delete(args, services):
    """Delete a subcategory by ID."""
    subcategory = services.subcategories.find(args.subcategory_id)
    if not subcategory:
        logger.error(f"Subcategory with ID {args.subcategory_id} not found.")
        sys.exit(1)

    try:
        if services.subcategories.delete(subcategory.id):
            logger.info(f"✓ Subcategory '{subcategory.name}' deleted successfully.")
        else:
            logger.error("Failed to delete subcategory.")
            sys.exit(1)
    except Exception as e:
        logger.error(f"Error deleting subcategory: {e}")
        sys.exit(1)


def setup_parser(subparsers):
    """Setup subcategories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "subcategories",
        help="Manage subcategories",
        description="Create, list, and delete subcategories",
    )

    subcategories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available subcategory commands",
        dest="subcommand",
        required=True,
    )

    list_parser = subcategories_subparsers.add_parser(
        "list", help="List subcategories"
    )
    list_parser.add_argument(
        "--category",
        help="Only list subcategories of this category (case-insensitive)",
    )
    list_parser.set_defaults(func=cmd_list)

    create_parser = subcategories_subparsers.add_parser(
        "create", help="Create a subcategory"
    )
    create_parser.add_argument("--category", required=True, help="Parent category name")
    create_parser.add_argument("--name", required=True, help="Subcategory name")
    create_parser.add_argument("--description", help="Optional description")
    create_parser.add_argument("--order", type=int, help="Optional display order")
    create_parser.set_defaults(func=cmd_create)

    delete_parser = subcategories_subparsers.add_parser(
        "delete", help="Delete a subcategory by ID"
    )
    delete_parser.add_argument(
        "subcategory_id", type=int, help="ID of the subcategory to delete"
    )
    delete_parser.set_defaults(func=cmd_delete)
