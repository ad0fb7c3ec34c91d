#!/usr/bin/env python3

import sys
import json
from config import get_seed_dir
from errors import PennywiseError
from logger import get_logger
from models.category import DEFAULT_COLOR

logger = get_logger()


def cmd_list(args, services):
    """List all categories in the database."""
    categories = services.categories.find_all()

    if not categories:
        logger.info("No categories found.")
        return

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for category in categories:
        logger.info(f"ID: {category.id}")
        logger.info(f"Name: {category.name}")
        logger.info(f"Type: {category.type}")
        logger.info(f"Color: {category.color}")
        logger.info("-" * 80)

    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_create(args, services):
    """Interactively create a new category."""
    print("\nCreate New Category")
    print("=" * 80)

    name = input("Category name (e.g., Groceries): ").strip()
    if not name:
        logger.error("Category name cannot be empty.")
        sys.exit(1)

    type = input("Type [expense/income] (default expense): ").strip().lower()
    if not type:
        type = "expense"

    color = input(f"Color (default {DEFAULT_COLOR}): ").strip()
    if not color:
        color = DEFAULT_COLOR

    try:
        category = services.categories.create(name, type, color)
    except PennywiseError as e:
        logger.error(f"Error creating category: {e}")
        sys.exit(1)

    logger.info(f"\n✓ Category created successfully with ID: {category.id}")
    logger.info(f"  Name: {category.name}")
    logger.info(f"  Type: {category.type}")
    logger.info(f"  Color: {category.color}")


def cmd_rename(args, services):
    """Rename a category."""
    try:
        category = services.categories.rename(args.category_id, args.name)
    except PennywiseError as e:
        logger.error(f"Error renaming category: {e}")
        sys.exit(1)

    logger.info(f"✓ Category {category.id} renamed to '{category.name}'.")


def cmd_recolor(args, services):
    """Change the display color of a category."""
    try:
        category = services.categories.recolor(args.category_id, args.color)
    except PennywiseError as e:
        logger.error(f"Error recoloring category: {e}")
        sys.exit(1)

    logger.info(f"✓ Category '{category.name}' color set to {category.color}.")


def cmd_delete(args, services):
    """Delete a category by ID."""
    category_id = args.category_id

    category = services.categories.find(category_id)
    if not category:
        logger.error(f"Category with ID {category_id} not found.")
        sys.exit(1)

    logger.info("\nCategory to delete:")
    logger.info(f"  ID: {category.id}")
    logger.info(f"  Name: {category.name}")
    logger.info("  Transactions in this category will become uncategorized.")

    confirm = (
        input("\nAre you sure you want to delete this category? (yes/no): ")
        .strip()
        .lower()
    )
    if confirm != "yes":
        logger.info("Deletion cancelled.")
        return

    if services.categories.delete(category_id):
        logger.info(f"✓ Category '{category.name}' deleted successfully.")
    else:
        logger.error("Failed to delete category.")
        sys.exit(1)


def cmd_seed(args, services):
    """Seed categories from JSON file."""
    seed_file = get_seed_dir() / "categories.json"

    if not seed_file.exists():
        logger.error(f"Seed file not found: {seed_file}")
        sys.exit(1)

    logger.info("\nSeeding categories from db/seed/categories.json")
    logger.info("=" * 80)

    try:
        created, skipped = services.categories.seed(seed_file)
    except json.JSONDecodeError as e:
        logger.error(f"Error parsing JSON file: {e}")
        sys.exit(1)
    except PennywiseError as e:
        logger.error(f"Error seeding categories: {e}")
        sys.exit(1)

    for name in created:
        logger.info(f"✓ Created '{name}'")
    for name in skipped:
        logger.info(f"⊘ Skipped '{name}' (already exists)")

    logger.info("=" * 80)
    logger.info("\nSeeding complete!")
    logger.info(f"Created: {len(created)}")
    logger.info(f"Skipped: {len(skipped)}")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Create, list, rename, recolor and delete transaction categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    # categories list
    list_parser = categories_subparsers.add_parser("list", help="List all categories")
    list_parser.set_defaults(func=cmd_list)

    # categories create
    create_parser = categories_subparsers.add_parser(
        "create", help="Create a new category interactively"
    )
    create_parser.set_defaults(func=cmd_create)

    # categories rename
    rename_parser = categories_subparsers.add_parser("rename", help="Rename a category")
    rename_parser.add_argument("category_id", type=int, help="ID of the category")
    rename_parser.add_argument("name", help="New name")
    rename_parser.set_defaults(func=cmd_rename)

    # categories recolor
    recolor_parser = categories_subparsers.add_parser(
        "recolor", help="Change a category's color"
    )
    recolor_parser.add_argument("category_id", type=int, help="ID of the category")
    recolor_parser.add_argument("color", help="Hex color, e.g. #FF8800")
    recolor_parser.set_defaults(func=cmd_recolor)

    # categories delete
    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a category by ID"
    )
    delete_parser.add_argument(
        "category_id",
        type=int,
        help="ID of the category to delete",
    )
    delete_parser.set_defaults(func=cmd_delete)

    # categories seed
    seed_parser = categories_subparsers.add_parser(
        "seed", help="Seed categories from JSON file"
    )
    seed_parser.set_defaults(func=cmd_seed)
