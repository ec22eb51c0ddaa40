"""Category taxonomy — loads, validates, and queries the listing categories.

The taxonomy is a two-level structure: categories → subcategories.
A category may have no subcategories at all (e.g. "Other").

Usage:
    taxonomy = CategoryTaxonomy.from_config_dir(Path("config"))
    furniture = taxonomy.by_name("Furniture")
    taxonomy.subcategories_of(furniture.category_id)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from listingflow.models.catalog import DEFAULT_ICON, Category


class CategoryTaxonomy:
    """Loads and validates the category taxonomy from config.

    Declaration order is preserved: it is the order categories are
    rendered on the selection screen.
    """

    TAXONOMY_FILENAME = "category_taxonomy.json"

    def __init__(self, taxonomy_data: dict[str, Any]) -> None:
        self._data = taxonomy_data
        self._validate()
        self._categories: dict[str, Category] = {}
        for entry in taxonomy_data["categories"]:
            category = Category(
                category_id=str(entry["id"]),
                name=entry["name"],
                subcategories=tuple(entry.get("subcategories", [])),
                icon=entry.get("icon") or DEFAULT_ICON,
            )
            self._categories[category.category_id] = category

    @classmethod
    def from_config_dir(cls, config_dir: Path) -> CategoryTaxonomy:
        """Load taxonomy from the config directory.

        Raises:
            FileNotFoundError: If category_taxonomy.json does not exist.
            ValueError: If the taxonomy is structurally invalid.
        """
        path = config_dir / cls.TAXONOMY_FILENAME
        if not path.exists():
            raise FileNotFoundError(f"Category taxonomy not found: {path}")
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return cls(data)

    def _validate(self) -> None:
        """Validate taxonomy structure.

        Raises:
            ValueError: If the taxonomy is structurally invalid.
        """
        if "version" not in self._data:
            raise ValueError("Category taxonomy missing 'version' field")
        if "categories" not in self._data:
            raise ValueError("Category taxonomy missing 'categories' field")
        entries = self._data["categories"]
        if not isinstance(entries, list):
            raise ValueError("Category taxonomy 'categories' must be a list")

        seen_ids: set[str] = set()
        seen_names: set[str] = set()
        for entry in entries:
            if not isinstance(entry, dict):
                raise ValueError(
                    f"Category entry must be a dict, got {type(entry).__name__}"
                )
            raw_id = entry.get("id")
            if raw_id is None or not str(raw_id).strip():
                raise ValueError(f"Invalid category id: {raw_id!r}")
            category_id = str(raw_id)
            if category_id in seen_ids:
                raise ValueError(f"Duplicate category id: '{category_id}'")
            seen_ids.add(category_id)

            name = entry.get("name")
            if not isinstance(name, str) or not name.strip():
                raise ValueError(f"Invalid name for category '{category_id}': {name!r}")
            if name in seen_names:
                raise ValueError(f"Duplicate category name: '{name}'")
            seen_names.add(name)

            subcategories = entry.get("subcategories", [])
            if not isinstance(subcategories, list):
                raise ValueError(
                    f"Category '{name}' subcategories must be a list"
                )
            for sub in subcategories:
                if not isinstance(sub, str) or not sub.strip():
                    raise ValueError(
                        f"Invalid subcategory in category '{name}': {sub!r}"
                    )
            if len(subcategories) != len(set(subcategories)):
                raise ValueError(f"Category '{name}' has duplicate subcategories")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def categories(self) -> list[Category]:
        """Return all categories in declaration order."""
        return list(self._categories.values())

    def category_ids(self) -> list[str]:
        return list(self._categories.keys())

    def get(self, category_id: str) -> Optional[Category]:
        return self._categories.get(category_id)

    def by_name(self, name: str) -> Optional[Category]:
        """Look up a category by its display name (case-insensitive)."""
        wanted = name.casefold()
        for category in self._categories.values():
            if category.name.casefold() == wanted:
                return category
        return None

    def subcategories_of(self, category_id: str) -> list[str]:
        """Return subcategory names of a category, in taxonomy order.

        Raises:
            KeyError: If the category does not exist.
        """
        category = self._categories.get(category_id)
        if category is None:
            raise KeyError(f"Unknown category: {category_id}")
        return list(category.subcategories)

    def owners_of(self, subcategory: str) -> list[Category]:
        """Return every category listing the given subcategory name."""
        return [
            c for c in self._categories.values() if subcategory in c.subcategories
        ]

    def icon_for(self, name: str) -> str:
        """Icon name for a category display name, with a generic fallback."""
        category = self.by_name(name)
        if category is None:
            return DEFAULT_ICON
        return category.icon

    def category_count(self) -> int:
        return len(self._categories)

    def subcategory_count(self) -> int:
        return sum(len(c.subcategories) for c in self._categories.values())

    @property
    def version(self) -> str:
        """Return the taxonomy version."""
        return self._data.get("version", "unknown")
