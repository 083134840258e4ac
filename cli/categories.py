#!/usr/bin/env python3

import sys
from logger import get_logger

logger = get_logger()


def _read_display_order(prompt):
    """Prompt for an optional whole-number display order."""
    value = input(prompt).strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        logger.error("Display order must be a number.")
        sys.exit(1)


def cmd_list(args, services):
    """List all categories with their subcategories."""
    categories = services.categories.find_all()

    if not categories:
        logger.info("No categories found.")
        return

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for category in categories:
        logger.info(f"ID: {category.id}")
        logger.info(f"Name: {category.name}")
        if category.description:
            logger.info(f"Description: {category.description}")
        if category.display_order is not None:
            logger.info(f"Display order: {category.display_order}")

        subcategories = services.subcategories.find_by_category(category.id)
        if subcategories:
            names = ", ".join(s.name for s in subcategories)
            logger.info(f"Subcategories ({len(subcategories)}): {names}")
        logger.info("-" * 80)

    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_create(args, services):
    """Interactively create a new category."""
    print("\nCreate New Category")
    print("=" * 80)

    name = input("Category name (e.g., Beverages): ").strip()
    if not name:
        logger.error("Category name cannot be empty.")
        sys.exit(1)

    existing = services.categories.find_by_name(name)
    if existing:
        logger.error(f"Category '{existing.name}' already exists (ID: {existing.id}).")
        sys.exit(1)

    description = input("Description (optional, press Enter to skip): ").strip()
    if not description:
        description = None

    display_order = _read_display_order(
        "Display order (optional, press Enter to skip): "
    )

    try:
        category = services.categories.create(name, description, display_order)

        logger.info(f"\n✓ Category created successfully with ID: {category.id}")
        logger.info(f"  Name: {category.name}")
        if category.description:
            logger.info(f"  Description: {category.description}")
        if category.display_order is not None:
            logger.info(f"  Display order: {category.display_order}")

    except Exception as e:
        logger.error(f"Error creating category: {e}")
        sys.exit(1)


def cmd_delete(args, services):
    """Delete a category, and its subcategories, by ID."""
    category_id = args.category_id

    category = services.categories.find(category_id)
    if not category:
        logger.error(f"Category with ID {category_id} not found.")
        sys.exit(1)

    subcategories = services.subcategories.find_by_category(category_id)

    logger.info("\nCategory to delete:")
    logger.info(f"  ID: {category.id}")
    logger.info(f"  Name: {category.name}")
    if subcategories:
        logger.info(f"  Subcategories also deleted: {len(subcategories)}")

    confirm = (
        input("\nAre you sure you want to delete this category? (yes/no): ")
        .strip()
        .lower()
    )
    if confirm != "yes":
        logger.info("Deletion cancelled.")
        return

    try:
        if services.categories.delete(category_id):
            logger.info(f"✓ Category '{category.name}' deleted successfully.")
        else:
            logger.error("Failed to delete category.")
            sys.exit(1)
    except Exception as e:
        logger.error(f"Error deleting category: {e}")
        sys.exit(1)


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Create, list, and delete menu categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser(
        "list", help="List all categories and their subcategories"
    )
    list_parser.set_defaults(func=cmd_list)

    create_parser = categories_subparsers.add_parser(
        "create", help="Create a new category interactively"
    )
    create_parser.set_defaults(func=cmd_create)

    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a category (and its subcategories) by ID"
    )
    delete_parser.add_argument(
        "category_id",
        type=int,
        help="ID of the category to delete",
    )
    delete_parser.set_defaults(func=cmd_delete)
