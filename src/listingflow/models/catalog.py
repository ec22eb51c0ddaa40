"""Catalog models — the two-level category taxonomy.

Categories are static reference data. They are loaded once per session
and never mutated while a listing is being created.
"""

from __future__ import annotations

from dataclasses import dataclass, field


DEFAULT_ICON = "help-circle"


@dataclass(frozen=True)
class Category:
    """A top-level listing category with its ordered subcategories.

    Subcategory names are plain strings. They are not qualified by the
    parent, so two categories may in principle share a name.
    """
    category_id: str
    name: str
    subcategories: tuple[str, ...] = field(default_factory=tuple)
    icon: str = DEFAULT_ICON

    @property
    def has_subcategories(self) -> bool:
        return len(self.subcategories) > 0
