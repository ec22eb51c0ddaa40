"""Tests for workflow settings resolution."""

import json
from pathlib import Path

import pytest

from listingflow.policy.resolver import PolicyResolver


CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"


class TestPolicyResolver:
    def test_loads_real_config(self) -> None:
        resolver = PolicyResolver.from_config_dir(CONFIG_DIR)
        assert resolver.row_height() == 50
        assert resolver.animation_duration_ms() == 300
        assert resolver.require_category_before_details() is True
        assert resolver.version == "1.0"

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        resolver = PolicyResolver.from_config_dir(tmp_path)
        assert resolver.row_height() == 50
        assert resolver.message("published") == "Your listing has been published!"

    def test_partial_override(self) -> None:
        resolver = PolicyResolver({"row_height": 60, "messages": {"published": "Live!"}})
        assert resolver.row_height() == 60
        assert resolver.animation_duration_ms() == 300
        assert resolver.message("published") == "Live!"
        assert resolver.message("no_category").startswith("Please select")

    def test_message_formatting(self) -> None:
        resolver = PolicyResolver()
        assert resolver.message("missing_fields", fields="City") == (
            "Please fill in the following fields: City"
        )

    def test_unknown_message(self) -> None:
        with pytest.raises(KeyError):
            PolicyResolver().message("nope")

    def test_invalid_row_height(self) -> None:
        with pytest.raises(ValueError, match="row_height"):
            PolicyResolver({"row_height": 0})

    def test_invalid_duration(self) -> None:
        with pytest.raises(ValueError, match="animation_duration_ms"):
            PolicyResolver({"animation_duration_ms": "fast"})

    def test_invalid_flag(self) -> None:
        with pytest.raises(ValueError, match="require_category_before_details"):
            PolicyResolver({"require_category_before_details": "yes"})

    def test_malformed_json(self, tmp_path: Path) -> None:
        (tmp_path / "workflow_settings.json").write_text("{not json")
        with pytest.raises(ValueError, match="Invalid workflow settings JSON"):
            PolicyResolver.from_config_dir(tmp_path)

    def test_non_object_json(self, tmp_path: Path) -> None:
        (tmp_path / "workflow_settings.json").write_text(json.dumps([1, 2]))
        with pytest.raises(ValueError, match="JSON object"):
            PolicyResolver.from_config_dir(tmp_path)
