"""Selection state for the category step."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class SelectionState:
    """Snapshot of the category/subcategory multi-select.

    Immutable: transitions return a new state.

    expanded_category_id: the one category whose panel is open, if any.
    selected_category_ids: categories chosen directly or by opening them.
    selected_subcategory_names: chosen subcategories, owner-agnostic.
    """
    expanded_category_id: Optional[str] = None
    selected_category_ids: frozenset[str] = field(default_factory=frozenset)
    selected_subcategory_names: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not self.selected_category_ids and not self.selected_subcategory_names
