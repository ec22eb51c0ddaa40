"""Category selector — accordion expand/collapse coupled to multi-select.

Interaction rules:
- At most one category panel is open. Opening a second category closes
  the first.
- Opening a category selects it, even before any subcategory is chosen.
- Collapsing the tapped category deselects it unless one of its
  subcategories is selected.
- Subcategory taps only flip that name in the subcategory set.

The expansion/selection coupling lives in one pure transition function,
toggle_category_expansion(), so the invariant holds atomically and can be
tested without any animation or timing. Animation progress is tracked
separately by ExpandAnimations and never feeds back into selection.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional

from listingflow.catalog.taxonomy import CategoryTaxonomy
from listingflow.models.catalog import Category
from listingflow.models.selection import SelectionState


def toggle_category_expansion(
    state: SelectionState,
    category_id: str,
    subcategory_names: Iterable[str],
) -> SelectionState:
    """Return the state after tapping a category header.

    Only the tapped category is subject to auto-deselect. A category
    closed implicitly because another one opened keeps its selection.
    An empty subcategory list means the tapped category is always
    deselected on collapse.
    """
    was_expanded = state.expanded_category_id == category_id
    selected = set(state.selected_category_ids)

    if was_expanded and not any(
        name in state.selected_subcategory_names for name in subcategory_names
    ):
        selected.discard(category_id)
    else:
        selected.add(category_id)

    return replace(
        state,
        expanded_category_id=None if was_expanded else category_id,
        selected_category_ids=frozenset(selected),
    )


def toggle_subcategory(state: SelectionState, name: str) -> SelectionState:
    """Return the state with name flipped in the subcategory set."""
    names = set(state.selected_subcategory_names)
    if name in names:
        names.remove(name)
    else:
        names.add(name)
    return replace(state, selected_subcategory_names=frozenset(names))


def is_category_selected(state: SelectionState, category: Category) -> bool:
    """Highlight predicate: chosen directly or through any subcategory."""
    if category.category_id in state.selected_category_ids:
        return True
    return any(
        name in state.selected_subcategory_names for name in category.subcategories
    )


@dataclass
class ExpandProgress:
    """Animated open fraction of one category panel."""
    value: float = 0.0
    target: float = 0.0

    @property
    def settled(self) -> bool:
        return self.value == self.target


class ExpandAnimations:
    """Per-category expand progress keyed by category id.

    Entries are created lazily at 0 (collapsed) on first reference.
    Progress moves linearly toward its target; a full sweep takes
    duration_ms. Purely visual.
    """

    def __init__(self, row_height: float = 50, duration_ms: float = 300) -> None:
        self._row_height = row_height
        self._duration_ms = duration_ms
        self._progress: dict[str, ExpandProgress] = {}

    def progress(self, category_id: str) -> ExpandProgress:
        entry = self._progress.get(category_id)
        if entry is None:
            entry = ExpandProgress()
            self._progress[category_id] = entry
        return entry

    def animate_to(self, category_id: str, target: float) -> None:
        if not 0.0 <= target <= 1.0:
            raise ValueError(f"Animation target must be in [0, 1], got {target}")
        self.progress(category_id).target = target

    def advance(self, elapsed_ms: float) -> None:
        """Step every animation forward by elapsed_ms."""
        if elapsed_ms < 0:
            raise ValueError(f"elapsed_ms must be non-negative, got {elapsed_ms}")
        step = elapsed_ms / self._duration_ms
        for entry in self._progress.values():
            if entry.value < entry.target:
                entry.value = min(entry.target, entry.value + step)
            elif entry.value > entry.target:
                entry.value = max(entry.target, entry.value - step)

    def finish(self) -> None:
        """Jump every animation to its target."""
        for entry in self._progress.values():
            entry.value = entry.target

    def height_of(self, category_id: str, subcategory_count: int) -> float:
        """Current panel height: header label row plus one row per subcategory."""
        full_height = (subcategory_count + 1) * self._row_height
        return self.progress(category_id).value * full_height

    def is_animating(self) -> bool:
        return any(not entry.settled for entry in self._progress.values())

    def tracked_ids(self) -> list[str]:
        return list(self._progress.keys())


class CategorySelector:
    """Owns the taxonomy, the selection state and panel animations.

    Usage:
        selector = CategorySelector(taxonomy)
        selector.toggle_category_expansion("3")
        selector.toggle_subcategory("Tables")
        selector.is_category_selected(taxonomy.get("3"))   # True
    """

    def __init__(
        self,
        taxonomy: CategoryTaxonomy,
        animations: Optional[ExpandAnimations] = None,
    ) -> None:
        self._taxonomy = taxonomy
        self._state = SelectionState()
        self._animations = animations or ExpandAnimations()

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def animations(self) -> ExpandAnimations:
        return self._animations

    @property
    def taxonomy(self) -> CategoryTaxonomy:
        return self._taxonomy

    def toggle_category_expansion(
        self,
        category_id: str,
        subcategory_names: Optional[Iterable[str]] = None,
    ) -> list[str]:
        """Tap a category header. Returns errors (empty = OK).

        If subcategory_names is omitted it is taken from the taxonomy.
        Unknown ids are rejected without touching state.
        """
        if subcategory_names is None:
            category = self._taxonomy.get(category_id)
            if category is None:
                return [f"Unknown category: {category_id}"]
            subcategory_names = category.subcategories

        previous = self._state.expanded_category_id
        if previous is not None and previous != category_id:
            self._animations.animate_to(previous, 0.0)

        self._state = toggle_category_expansion(
            self._state, category_id, list(subcategory_names),
        )
        opened = self._state.expanded_category_id == category_id
        self._animations.animate_to(category_id, 1.0 if opened else 0.0)
        return []

    def toggle_subcategory(self, name: str) -> list[str]:
        """Tap a subcategory row. Returns errors (empty = OK)."""
        if not name:
            return ["Subcategory name must not be empty"]
        self._state = toggle_subcategory(self._state, name)
        return []

    def is_category_selected(self, category: Category) -> bool:
        return is_category_selected(self._state, category)

    def is_subcategory_selected(self, name: str) -> bool:
        return name in self._state.selected_subcategory_names

    def is_expanded(self, category_id: str) -> bool:
        return self._state.expanded_category_id == category_id

    def highlighted_categories(self) -> list[Category]:
        """Categories rendered as selected, in taxonomy order."""
        return [
            c for c in self._taxonomy.categories() if self.is_category_selected(c)
        ]

    def panel_height(self, category_id: str) -> float:
        category = self._taxonomy.get(category_id)
        count = len(category.subcategories) if category is not None else 0
        return self._animations.height_of(category_id, count)

    def selected_category_ids(self) -> list[str]:
        """Selected ids in taxonomy order, unknown ids last in sorted order."""
        known = [
            cid for cid in self._taxonomy.category_ids()
            if cid in self._state.selected_category_ids
        ]
        extra = sorted(self._state.selected_category_ids - set(known))
        return known + extra

    def selected_subcategory_names(self) -> list[str]:
        """Selected subcategories in taxonomy order, unknown names last."""
        ordered: list[str] = []
        for category in self._taxonomy.categories():
            for name in category.subcategories:
                if name in self._state.selected_subcategory_names and name not in ordered:
                    ordered.append(name)
        extra = sorted(self._state.selected_subcategory_names - set(ordered))
        return ordered + extra

    def restore(self, state: SelectionState) -> None:
        """Put back a previously captured state. Animations are left alone."""
        self._state = state

    def reset(self) -> None:
        """Start over with an empty selection (screen remount)."""
        self._state = SelectionState()
        for category_id in self._animations.tracked_ids():
            self._animations.animate_to(category_id, 0.0)
        self._animations.finish()
