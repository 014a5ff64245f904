"""Persistent JSON config helpers.

Stores the hidden-file preference, sort criteria, debounce delay and the
recent-servers list. All access is defensive: malformed or missing config
falls back safely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from .file_model import SortCriteria, SortField
from .watch import DEFAULT_DEBOUNCE_SECONDS

logger = logging.getLogger(__name__)

APP_NAME = "freefinder"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
MAX_RECENT_SERVERS = 10
MAX_DEBOUNCE_SECONDS = 5.0


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Write failures are logged and otherwise ignored so a read-only config
    directory never breaks browsing.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError):
        logger.debug("could not write config to %s", CONFIG_PATH, exc_info=True)


def load_show_hidden() -> bool:
    """Return persisted hidden-file visibility preference.

    Only explicit boolean values are accepted; any other type falls back to
    ``False``.
    """
    value = load_config().get("show_hidden")
    return bool(value) if isinstance(value, bool) else False


def save_show_hidden(show_hidden: bool) -> None:
    config = load_config()
    config["show_hidden"] = bool(show_hidden)
    save_config(config)


def load_sort_criteria() -> SortCriteria:
    config = load_config()
    raw_field = config.get("sort_field")
    field = SortField.parse(raw_field) if isinstance(raw_field, str) else None
    ascending = config.get("sort_ascending")
    return SortCriteria(
        field=field or SortField.NAME,
        ascending=ascending if isinstance(ascending, bool) else True,
    )


def save_sort_criteria(criteria: SortCriteria) -> None:
    config = load_config()
    config["sort_field"] = criteria.field.value
    config["sort_ascending"] = bool(criteria.ascending)
    save_config(config)


def load_debounce_seconds() -> float:
    """Return the change-debounce delay, constrained to ``(0, 5]`` seconds."""
    value = load_config().get("debounce_seconds")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_DEBOUNCE_SECONDS
    if value <= 0 or value > MAX_DEBOUNCE_SECONDS:
        return DEFAULT_DEBOUNCE_SECONDS
    return float(value)


def load_recent_servers() -> list[str]:
    """Return saved server addresses, most recent first.

    Non-string and blank entries are dropped and the list is capped.
    """
    value = load_config().get("recent_servers")
    if not isinstance(value, list):
        return []
    servers: list[str] = []
    seen: set[str] = set()
    for item in value:
        if not isinstance(item, str):
            continue
        stripped = item.strip()
        if not stripped or stripped.lower() in seen:
            continue
        seen.add(stripped.lower())
        servers.append(stripped)
    return servers[:MAX_RECENT_SERVERS]


def remember_recent_server(address: str) -> list[str]:
    """Move ``address`` to the front of the recent-servers list and persist it."""
    stripped = address.strip()
    if not stripped:
        return load_recent_servers()
    servers = [stripped]
    servers.extend(item for item in load_recent_servers() if item.lower() != stripped.lower())
    servers = servers[:MAX_RECENT_SERVERS]
    config = load_config()
    config["recent_servers"] = servers
    save_config(config)
    return servers


def clear_recent_servers() -> None:
    config = load_config()
    config["recent_servers"] = []
    save_config(config)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "MAX_RECENT_SERVERS",
    "load_config",
    "save_config",
    "load_show_hidden",
    "save_show_hidden",
    "load_sort_criteria",
    "save_sort_criteria",
    "load_debounce_seconds",
    "load_recent_servers",
    "remember_recent_server",
    "clear_recent_servers",
]
