"""Tests for the listingflow CLI — proves commands dispatch correctly."""

import json
from pathlib import Path

import pytest

from listingflow.cli import build_parser, main


CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"


class TestCLIParsing:
    def test_categories_command(self) -> None:
        args = build_parser().parse_args(["categories"])
        assert args.command == "categories"

    def test_select_command(self) -> None:
        args = build_parser().parse_args([
            "select", "--category", "Furniture", "--sub", "Tables", "--sub", "Chairs",
        ])
        assert args.category == ["Furniture"]
        assert args.sub == ["Tables", "Chairs"]

    def test_dates_requires_tap(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["dates"])


class TestCLIExecution:
    def test_no_command_shows_help(self) -> None:
        assert main([]) == 0

    def test_categories_runs(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["--config", str(CONFIG_DIR), "categories"]) == 0
        listing = json.loads(capsys.readouterr().out)
        assert len(listing) == 7
        assert listing[2]["name"] == "Furniture"

    def test_select_runs(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = main([
            "--config", str(CONFIG_DIR), "select", "--category", "Furniture", "--sub", "Tables",
        ])
        assert code == 0
        selection = json.loads(capsys.readouterr().out)
        assert selection["selected_category_ids"] == ["3"]
        assert selection["selected_subcategory_names"] == ["Tables"]

    def test_select_unknown_category(self) -> None:
        assert main(["--config", str(CONFIG_DIR), "select", "--category", "Boats"]) == 1

    def test_dates_runs(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = main([
            "--config", str(CONFIG_DIR), "dates", "--tap", "2025-01-10", "--tap", "2025-01-15",
        ])
        assert code == 0
        availability = json.loads(capsys.readouterr().out)
        assert len(availability["marked_dates"]) == 6

    def test_dates_rejected_tap(self) -> None:
        code = main([
            "--config", str(CONFIG_DIR), "dates", "--tap", "2025-01-10", "--tap", "2025-01-05",
        ])
        assert code == 1

    def test_validate_incomplete(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        draft = tmp_path / "draft.json"
        draft.write_text(json.dumps({
            "address": {"street": "1 Main St", "city": "", "state": "IL", "zip_code": "62701"},
            "start_date": "2025-01-10",
            "end_date": "2025-01-15",
            "start_time": "09:00",
            "end_time": "17:00",
        }))
        assert main(["--config", str(CONFIG_DIR), "validate", "--draft", str(draft)]) == 1
        assert json.loads(capsys.readouterr().out)["missing_fields"] == ["City"]

    def test_validate_missing_file(self, tmp_path: Path) -> None:
        code = main([
            "--config", str(CONFIG_DIR), "validate", "--draft", str(tmp_path / "none.json"),
        ])
        assert code == 1

    def test_status_runs(self) -> None:
        assert main(["--config", str(CONFIG_DIR), "status"]) == 0

    def test_config_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("LISTINGFLOW_CONFIG_DIR", str(CONFIG_DIR))
        assert main(["categories"]) == 0
        assert len(json.loads(capsys.readouterr().out)) == 7
