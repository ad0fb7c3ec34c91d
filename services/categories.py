"""Category service for database operations."""

import json
import re
import sqlite3
from pathlib import Path
from typing import List, Optional

from errors import NotFound, ValidationError
from logger import get_logger
from models.category import CATEGORY_TYPES, DEFAULT_COLOR, Category

logger = get_logger()

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_MAX_NAME_LENGTH = 100


def validate_name(name: str) -> str:
    """Trim and check a category name.

    Raises:
        ValidationError: If the name is empty or longer than 100 characters.
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Category name is required and cannot be empty.")
    name = name.strip()
    if len(name) > _MAX_NAME_LENGTH:
        raise ValidationError(
            f"Category name cannot exceed {_MAX_NAME_LENGTH} characters."
        )
    return name


def validate_color(color: str) -> str:
    """Check that a color is a #RGB or #RRGGBB hex string.

    Raises:
        ValidationError: If the color is not a hex color.
    """
    if not isinstance(color, str) or not _HEX_COLOR.match(color):
        raise ValidationError(f"Invalid color {color!r}. Use a hex color like #FF8800.")
    return color.upper()


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db_manager):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[Category]:
        """Get all categories from the database.

        Returns:
            List of Category objects, ordered by name.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, type, color FROM categories ORDER BY name"
            )
            return [self._row_to_category(row) for row in cursor.fetchall()]

    def find(self, category_id: int) -> Optional[Category]:
        """Get a single category by ID.

        Args:
            category_id: The category ID to find.

        Returns:
            Category object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, type, color FROM categories WHERE id = ?",
                (category_id,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_category(row)
            return None

    def find_by_name(self, name: str) -> Optional[Category]:
        """Get a single category by name (case-sensitive).

        Args:
            name: The category name to find.

        Returns:
            Category object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, type, color FROM categories WHERE name = ?",
                (name,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_category(row)
            return None

    def create(
        self,
        name: str,
        type: str = "expense",
        color: str = DEFAULT_COLOR,
    ) -> Category:
        """Create a new category.

        Args:
            name: Category name (must be unique).
            type: "expense" or "income".
            color: Hex display color.

        Returns:
            The created Category object with id populated.

        Raises:
            ValidationError: If any field is invalid or the name is taken.
        """
        name = validate_name(name)
        color = validate_color(color)
        if type not in CATEGORY_TYPES:
            raise ValidationError(
                f"Category type must be one of {', '.join(CATEGORY_TYPES)}, got {type!r}"
            )

        with self.db_manager.connect() as conn:
            try:
                cursor = conn.execute(
                    "INSERT INTO categories (name, type, color) VALUES (?, ?, ?)",
                    (name, type, color),
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                if "UNIQUE" not in str(e):
                    raise
                raise ValidationError(f"Category '{name}' already exists.")

            logger.debug(f"Created category {cursor.lastrowid} ({name}, {type})")
            return Category(id=cursor.lastrowid, name=name, type=type, color=color)

    def rename(self, category_id: int, name: str) -> Category:
        """Rename a category.

        Raises:
            ValidationError: If the name is invalid or already used by another category.
            NotFound: If the category does not exist.
        """
        name = validate_name(name)

        with self.db_manager.connect() as conn:
            try:
                cursor = conn.execute(
                    "UPDATE categories SET name = ? WHERE id = ?",
                    (name, category_id),
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                if "UNIQUE" not in str(e):
                    raise
                raise ValidationError(f"Category '{name}' already exists.")

            if cursor.rowcount == 0:
                raise NotFound("Category", category_id)

        return self.find(category_id)

    def recolor(self, category_id: int, color: str) -> Category:
        """Change the display color of a category.

        Raises:
            ValidationError: If the color is not a hex color.
            NotFound: If the category does not exist.
        """
        color = validate_color(color)

        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "UPDATE categories SET color = ? WHERE id = ?",
                (color, category_id),
            )
            conn.commit()

            if cursor.rowcount == 0:
                raise NotFound("Category", category_id)

        return self.find(category_id)

    def delete(self, category_id: int) -> bool:
        """Delete a category by ID.

        Transactions that referenced it become uncategorized and its budgets
        are removed.

        Args:
            category_id: The category ID to delete.

        Returns:
            True if category was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            conn.commit()
            return cursor.rowcount > 0

    def get_type(self, uow, category_id: int) -> str:
        """Get a category's type inside an open unit of work.

        Args:
            uow: The caller's UnitOfWork.
            category_id: The category ID to classify.

        Returns:
            "expense" or "income".

        Raises:
            NotFound: If the category does not exist.
        """
        row = uow.execute(
            "SELECT type FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        if row is None:
            raise NotFound("Category", category_id)
        return row[0]

    def seed(self, seed_file: Path) -> tuple:
        """Create categories listed in a JSON seed file.

        Categories whose name already exists are skipped.

        Args:
            seed_file: Path to a JSON list of {"name", "type", "color"} objects.

        Returns:
            Tuple of (created, skipped) lists of category names.
        """
        with open(seed_file, "r") as f:
            categories_data = json.load(f)

        created = []
        skipped = []
        for category_data in categories_data:
            name = category_data.get("name")
            if not name:
                logger.warning("Skipping category with no name")
                continue

            if self.find_by_name(name):
                skipped.append(name)
                continue

            self.create(
                name,
                category_data.get("type", "expense"),
                category_data.get("color", DEFAULT_COLOR),
            )
            created.append(name)

        return created, skipped

    def _row_to_category(self, row: tuple) -> Category:
        return Category(id=row[0], name=row[1], type=row[2], color=row[3])
