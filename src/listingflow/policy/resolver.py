"""Policy resolver — workflow settings and user-facing message templates.

Settings live in config/workflow_settings.json. The file is optional:
any key it omits falls back to the built-in default. Keys it does
provide are type-checked and rejected if malformed.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


DEFAULT_MESSAGES: dict[str, str] = {
    "invalid_end_date": "End date cannot be before the start date.",
    "invalid_end_time": "End time cannot be before the start time.",
    "missing_fields": "Please fill in the following fields: {fields}",
    "no_category": "Please select at least one category to continue.",
    "location_denied": "Permission to access location was denied.",
    "location_failed": "Could not determine your current address.",
    "published": "Your listing has been published!",
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "version": "builtin",
    "row_height": 50,
    "animation_duration_ms": 300,
    "require_category_before_details": True,
    "messages": DEFAULT_MESSAGES,
}


class PolicyResolver:
    """Resolves workflow settings with defaults.

    Usage:
        resolver = PolicyResolver.from_config_dir(Path("config"))
        resolver.row_height()                  # 50
        resolver.message("invalid_end_time")
    """

    SETTINGS_FILENAME = "workflow_settings.json"

    def __init__(self, settings: dict[str, Any] | None = None) -> None:
        merged = dict(DEFAULT_SETTINGS)
        messages = dict(DEFAULT_MESSAGES)
        if settings:
            merged.update({k: v for k, v in settings.items() if k != "messages"})
            messages.update(settings.get("messages") or {})
        merged["messages"] = messages
        self._settings = merged
        self._validate()

    @classmethod
    def from_config_dir(cls, config_dir: Path) -> PolicyResolver:
        """Load settings from a config directory.

        A missing settings file yields the built-in defaults.

        Raises:
            ValueError: If the settings file is malformed.
        """
        path = config_dir / cls.SETTINGS_FILENAME
        if not path.exists():
            return cls()
        with path.open("r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid workflow settings JSON in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Workflow settings must be a JSON object: {path}")
        return cls(data)

    def _validate(self) -> None:
        row_height = self._settings["row_height"]
        if isinstance(row_height, bool) or not isinstance(row_height, (int, float)) or row_height <= 0:
            raise ValueError(f"row_height must be a positive number, got {row_height!r}")
        duration = self._settings["animation_duration_ms"]
        if isinstance(duration, bool) or not isinstance(duration, (int, float)) or duration <= 0:
            raise ValueError(
                f"animation_duration_ms must be a positive number, got {duration!r}"
            )
        if not isinstance(self._settings["require_category_before_details"], bool):
            raise ValueError("require_category_before_details must be a boolean")
        for key, template in self._settings["messages"].items():
            if not isinstance(template, str) or not template.strip():
                raise ValueError(f"Message '{key}' must be a non-empty string")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def row_height(self) -> float:
        """Rendered height of one subcategory row."""
        return self._settings["row_height"]

    def animation_duration_ms(self) -> float:
        """Duration of a full expand or collapse animation."""
        return self._settings["animation_duration_ms"]

    def require_category_before_details(self) -> bool:
        return self._settings["require_category_before_details"]

    def message(self, key: str, **params: Any) -> str:
        """Return a user-facing message, formatted with params.

        Raises:
            KeyError: If no template exists for key.
        """
        template = self._settings["messages"].get(key)
        if template is None:
            raise KeyError(f"Unknown message key: {key}")
        return template.format(**params) if params else template

    @property
    def version(self) -> str:
        return self._settings.get("version", "unknown")
