"""Unit tests for the category taxonomy loader and validator."""

import json
from pathlib import Path
from typing import Any

import pytest

from listingflow.catalog.taxonomy import CategoryTaxonomy


CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"


@pytest.fixture
def taxonomy() -> CategoryTaxonomy:
    """Load from the real config file."""
    return CategoryTaxonomy.from_config_dir(CONFIG_DIR)


def _data(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "version": "test",
        "categories": [
            {"id": "a", "name": "Alpha", "subcategories": ["a1", "a2"]},
            {"id": "b", "name": "Beta", "subcategories": []},
        ],
    }
    data.update(overrides)
    return data


class TestTaxonomyLoading:
    def test_loads_from_config_dir(self, taxonomy: CategoryTaxonomy) -> None:
        assert taxonomy.category_count() == 7
        assert taxonomy.subcategory_count() == 18

    def test_version(self, taxonomy: CategoryTaxonomy) -> None:
        assert taxonomy.version == "1.0"

    def test_declaration_order_preserved(self, taxonomy: CategoryTaxonomy) -> None:
        names = [c.name for c in taxonomy.categories()]
        assert names == [
            "Decor/Art", "Clothing", "Furniture", "Electronics",
            "Books & Media", "Hobbies", "Other",
        ]

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Category taxonomy not found"):
            CategoryTaxonomy.from_config_dir(tmp_path)

    def test_loads_written_file(self, tmp_path: Path) -> None:
        (tmp_path / "category_taxonomy.json").write_text(json.dumps(_data()))
        taxonomy = CategoryTaxonomy.from_config_dir(tmp_path)
        assert taxonomy.category_ids() == ["a", "b"]


class TestTaxonomyValidation:
    def test_missing_version(self) -> None:
        data = _data()
        del data["version"]
        with pytest.raises(ValueError, match="version"):
            CategoryTaxonomy(data)

    def test_missing_categories(self) -> None:
        with pytest.raises(ValueError, match="categories"):
            CategoryTaxonomy({"version": "x"})

    def test_duplicate_id(self) -> None:
        data = _data(categories=[
            {"id": "a", "name": "Alpha", "subcategories": []},
            {"id": "a", "name": "Other", "subcategories": []},
        ])
        with pytest.raises(ValueError, match="Duplicate category id"):
            CategoryTaxonomy(data)

    def test_duplicate_name(self) -> None:
        data = _data(categories=[
            {"id": "a", "name": "Alpha", "subcategories": []},
            {"id": "b", "name": "Alpha", "subcategories": []},
        ])
        with pytest.raises(ValueError, match="Duplicate category name"):
            CategoryTaxonomy(data)

    def test_blank_subcategory(self) -> None:
        data = _data(categories=[{"id": "a", "name": "Alpha", "subcategories": [" "]}])
        with pytest.raises(ValueError, match="Invalid subcategory"):
            CategoryTaxonomy(data)

    def test_duplicate_subcategory(self) -> None:
        data = _data(categories=[{"id": "a", "name": "Alpha", "subcategories": ["x", "x"]}])
        with pytest.raises(ValueError, match="duplicate subcategories"):
            CategoryTaxonomy(data)

    def test_empty_subcategory_list_allowed(self) -> None:
        taxonomy = CategoryTaxonomy(_data())
        assert taxonomy.subcategories_of("b") == []

    def test_integer_ids_normalised_to_strings(self) -> None:
        data = _data(categories=[{"id": 1, "name": "Alpha", "subcategories": []}])
        assert CategoryTaxonomy(data).category_ids() == ["1"]


class TestTaxonomyQueries:
    def test_by_name_case_insensitive(self, taxonomy: CategoryTaxonomy) -> None:
        furniture = taxonomy.by_name("furniture")
        assert furniture is not None
        assert furniture.category_id == "3"
        assert furniture.subcategories == ("Sofas", "Tables", "Chairs")

    def test_by_name_unknown(self, taxonomy: CategoryTaxonomy) -> None:
        assert taxonomy.by_name("Vehicles") is None

    def test_subcategories_unknown_raises(self, taxonomy: CategoryTaxonomy) -> None:
        with pytest.raises(KeyError):
            taxonomy.subcategories_of("99")

    def test_owners_of(self, taxonomy: CategoryTaxonomy) -> None:
        owners = taxonomy.owners_of("Tables")
        assert [c.name for c in owners] == ["Furniture"]
        assert taxonomy.owners_of("Nothing") == []

    def test_icons(self, taxonomy: CategoryTaxonomy) -> None:
        assert taxonomy.icon_for("Furniture") == "sofa"
        assert taxonomy.icon_for("Other") == "dots-horizontal"
        assert taxonomy.icon_for("Unknown") == "help-circle"

    def test_other_has_no_subcategories(self, taxonomy: CategoryTaxonomy) -> None:
        other = taxonomy.by_name("Other")
        assert other is not None
        assert not other.has_subcategories
