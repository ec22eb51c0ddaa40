"""Category/subcategory multi-select."""

from listingflow.selection.category_selector import (
    CategorySelector,
    ExpandAnimations,
    is_category_selected,
    toggle_category_expansion,
    toggle_subcategory,
)

__all__ = [
    "CategorySelector",
    "ExpandAnimations",
    "is_category_selected",
    "toggle_category_expansion",
    "toggle_subcategory",
]
