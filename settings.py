"""Yacht preferences, kept in ~/.yacht_settings.json.

Three switches survive between sessions: dark mode, the label language and
whether candidate scores are shown. A game in progress is never written out.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

LANGUAGES = ("en", "ja")

DEFAULTS = {
    "dark_mode": False,
    "language": "en",
    "show_candidates": True,
}

SETTINGS_FILENAME = ".yacht_settings.json"


def settings_path(path=None) -> Path:
    """Resolve where preferences live; None means the home directory."""
    if path is None:
        return Path.home() / SETTINGS_FILENAME
    return Path(path)


def is_valid(key: str, value) -> bool:
    """Whether a stored value is usable for the given preference."""
    if key == "language":
        return value in LANGUAGES
    return isinstance(value, bool)


def load_settings(path=None) -> dict:
    """Read preferences, falling back per key to DEFAULTS.

    A missing or unreadable file yields a copy of DEFAULTS. Keys that are
    not preferences are dropped; values of the wrong kind (an unknown
    language, a non-boolean switch) keep their default.
    """
    path = settings_path(path)
    try:
        stored = json.loads(path.read_text())
    except FileNotFoundError:
        return dict(DEFAULTS)
    except (json.JSONDecodeError, OSError):
        logger.warning("Ignoring unreadable settings file %s", path, exc_info=True)
        return dict(DEFAULTS)

    if not isinstance(stored, dict):
        logger.warning("Ignoring settings file %s: not a JSON object", path)
        return dict(DEFAULTS)

    return {
        key: stored[key] if key in stored and is_valid(key, stored[key]) else default
        for key, default in DEFAULTS.items()
    }


def save_settings(settings: dict, path=None) -> None:
    """Write the known preferences; a failed write is logged, never raised."""
    path = settings_path(path)
    known = {key: settings.get(key, default) for key, default in DEFAULTS.items()}
    try:
        path.write_text(json.dumps(known, indent=2))
    except OSError:
        logger.warning("Could not save settings to %s", path, exc_info=True)
