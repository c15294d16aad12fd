"""Reading ruleset files from disk."""
from __future__ import annotations

import json
from pathlib import Path

from .errors import DataLoadError


def load_json(path: Path) -> object:
    """Return the parsed content of one ruleset file."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(path, "missing") from exc
    except OSError as exc:
        raise DataLoadError(path, f"unreadable ({exc.strerror})") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(path, f"not valid JSON at line {exc.lineno}, column {exc.colno}") from exc
