"""listingflow CLI — drive the create-listing workflow from a terminal.

Usage:
    python -m listingflow.cli categories
    python -m listingflow.cli select --category Furniture --sub Tables
    python -m listingflow.cli dates --tap 2025-01-10 --tap 2025-01-15
    python -m listingflow.cli validate --draft draft.json
    python -m listingflow.cli status

The config directory defaults to config/ at the repository root and can
be overridden with --config or LISTINGFLOW_CONFIG_DIR (a .env file in the
working directory is honoured).
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from listingflow.catalog.taxonomy import CategoryTaxonomy
from listingflow.drafts.validator import ListingDraftValidator
from listingflow.interfaces import CollectingAlertSink, InMemorySubmitter, RecordingNavigator
from listingflow.models.draft import AddressDraft, ListingDraft
from listingflow.policy.resolver import PolicyResolver
from listingflow.service import ListingWorkflowService


DEFAULT_CONFIG = Path(__file__).resolve().parents[2] / "config"
CONFIG_ENV_VAR = "LISTINGFLOW_CONFIG_DIR"


def _default_config_dir() -> Path:
    load_dotenv()
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override) if override else DEFAULT_CONFIG


def _make_service(config_dir: Path) -> tuple[ListingWorkflowService, CollectingAlertSink]:
    """Create a service wired to in-memory collaborators."""
    taxonomy = CategoryTaxonomy.from_config_dir(config_dir)
    resolver = PolicyResolver.from_config_dir(config_dir)
    alerts = CollectingAlertSink()
    service = ListingWorkflowService(
        taxonomy,
        resolver,
        navigator=RecordingNavigator(),
        submitter=InMemorySubmitter(),
        alerts=alerts,
        actor_id="cli",
    )
    return service, alerts


def _print_alerts(alerts: CollectingAlertSink) -> None:
    for title, message in alerts.alerts:
        print(f"{title}: {message}", file=sys.stderr)


def _parse_optional_date(value: Any) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _parse_optional_time(value: Any) -> Optional[time]:
    return time.fromisoformat(value) if value else None


def _load_draft(path: Path) -> ListingDraft:
    """Read a draft JSON file in the to_payload() layout."""
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    raw_address = data.get("address")
    address = None
    if isinstance(raw_address, dict):
        address = AddressDraft(
            street=raw_address.get("street") or "",
            city=raw_address.get("city") or "",
            state=raw_address.get("state") or "",
            zip_code=raw_address.get("zip_code") or "",
        )
    return ListingDraft(
        title=data.get("title") or "",
        description=data.get("description") or "",
        address=address,
        start_date=_parse_optional_date(data.get("start_date")),
        end_date=_parse_optional_date(data.get("end_date")),
        start_time=_parse_optional_time(data.get("start_time")),
        end_time=_parse_optional_time(data.get("end_time")),
        category_ids=list(data.get("category_ids") or []),
        subcategory_names=list(data.get("subcategory_names") or []),
    )


def cmd_categories(args: argparse.Namespace) -> int:
    taxonomy = CategoryTaxonomy.from_config_dir(args.config)
    listing = [
        {
            "id": c.category_id,
            "name": c.name,
            "icon": c.icon,
            "subcategories": list(c.subcategories),
        }
        for c in taxonomy.categories()
    ]
    print(json.dumps(listing, indent=2))
    return 0


def cmd_select(args: argparse.Namespace) -> int:
    """Tap the given categories, then the given subcategories."""
    service, alerts = _make_service(args.config)
    taxonomy = service.selector.taxonomy
    for name in args.category or []:
        category = taxonomy.by_name(name) or taxonomy.get(name)
        if category is None:
            print(f"Unknown category: {name}", file=sys.stderr)
            return 1
        service.toggle_category(category.category_id)
    for name in args.sub or []:
        service.toggle_subcategory(name)
    _print_alerts(alerts)
    print(json.dumps(service.status()["selection"], indent=2))
    return 0


def cmd_dates(args: argparse.Namespace) -> int:
    """Replay day taps against a fresh picker and show the range."""
    service, alerts = _make_service(args.config)
    # The details step is only reachable with a selection.
    first = service.selector.taxonomy.categories()[0]
    service.toggle_category(first.category_id)
    result = service.continue_to_details()
    if not result.success:
        _print_alerts(alerts)
        return 1

    rejected = 0
    for raw in args.tap:
        if not service.tap_day(date.fromisoformat(raw)).success:
            rejected += 1
    _print_alerts(alerts)
    print(json.dumps(service.status()["availability"], indent=2))
    return 1 if rejected else 0


def cmd_validate(args: argparse.Namespace) -> int:
    try:
        draft = _load_draft(args.draft)
    except (OSError, ValueError) as e:
        print(f"Failed: {e}", file=sys.stderr)
        return 1
    missing = ListingDraftValidator.validate(draft)
    print(json.dumps({"valid": not missing, "missing_fields": missing}, indent=2))
    return 0 if not missing else 1


def cmd_status(args: argparse.Namespace) -> int:
    service, _ = _make_service(args.config)
    status = service.status()
    status["taxonomy_version"] = service.selector.taxonomy.version
    status["generated_at"] = datetime.now().isoformat(timespec="seconds")
    print(json.dumps(status, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="listingflow",
        description="listingflow: create-listing workflow CLI",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to config directory (default: ${CONFIG_ENV_VAR} or config/)",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("categories", help="List the category taxonomy")

    p_select = sub.add_parser("select", help="Simulate category and subcategory taps")
    p_select.add_argument("--category", action="append", help="Category name or id (repeatable)")
    p_select.add_argument("--sub", action="append", help="Subcategory name (repeatable)")

    p_dates = sub.add_parser("dates", help="Simulate calendar day taps")
    p_dates.add_argument(
        "--tap", action="append", required=True, help="Day as YYYY-MM-DD (repeatable)",
    )

    p_validate = sub.add_parser("validate", help="Check a draft JSON file for missing fields")
    p_validate.add_argument("--draft", type=Path, required=True, help="Draft JSON file")

    sub.add_parser("status", help="Show a fresh workflow status")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.config is None:
        args.config = _default_config_dir()

    commands = {
        "categories": cmd_categories,
        "select": cmd_select,
        "dates": cmd_dates,
        "validate": cmd_validate,
        "status": cmd_status,
    }

    handler = commands.get(args.command)
    if handler is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    return handler(args)


if __name__ == "__main__":
    raise SystemExit(main())
