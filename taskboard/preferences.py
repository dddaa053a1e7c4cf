"""Theme preference persistence.

The theme ("light" or "dark") is the only client state kept between
sessions. It lives in a small JSON file; a missing or unreadable file means
the default theme.
"""

import json
import logging
from pathlib import Path

from taskboard.models.constants import DEFAULT_THEME, THEME_DARK, THEME_LIGHT, THEMES

logger = logging.getLogger(__name__)

THEME_KEY = "theme"


def load_theme(path: Path) -> str:
    """Stored theme, or the default when none (valid) is stored."""
    if not path.exists():
        return DEFAULT_THEME
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable preferences file {path}: {type(e).__name__}: {str(e)}")
        return DEFAULT_THEME

    theme = data.get(THEME_KEY) if isinstance(data, dict) else None
    return theme if theme in THEMES else DEFAULT_THEME


def save_theme(path: Path, theme: str) -> str:
    """Persist ``theme``, keeping any other keys already in the file."""
    if theme not in THEMES:
        raise ValueError(f"Unknown theme {theme!r}; expected one of {', '.join(THEMES)}")

    data = {}
    if path.exists():
        try:
            with open(path, "r") as f:
                loaded = json.load(f)
            if isinstance(loaded, dict):
                data = loaded
        except (OSError, ValueError):
            data = {}

    data[THEME_KEY] = theme
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
    logger.debug(f"Saved theme {theme!r} to {path}")
    return theme


def toggle_theme(path: Path) -> str:
    """Switch between light and dark and persist the result."""
    current = load_theme(path)
    return save_theme(path, THEME_LIGHT if current == THEME_DARK else THEME_DARK)
