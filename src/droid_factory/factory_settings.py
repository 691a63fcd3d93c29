"""Read Factory's own settings file (~/.factory/settings.json)."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

from .config import FACTORY_DIR_NAME

SETTINGS_FILE = "settings.json"

_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT = re.compile(r"(^|\n)\s*//[^\n]*")


@dataclass(frozen=True)
class CustomDroidsSetting:
    path: Path
    enabled: bool = False
    missing: bool = False
    error: str | None = None


def default_settings_path() -> Path:
    return Path.home() / FACTORY_DIR_NAME / SETTINGS_FILE


def strip_json_comments(text: str) -> str:
    """Remove ``/* */`` blocks and whole-line ``//`` comments."""
    return _LINE_COMMENT.sub(r"\1", _BLOCK_COMMENT.sub("", text))


def read_custom_droids_setting(path: Path | None = None) -> CustomDroidsSetting:
    """Whether ``enableCustomDroids`` is true in the settings file."""
    path = path or default_settings_path()
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return CustomDroidsSetting(path=path, missing=True)
    except OSError as e:
        return CustomDroidsSetting(path=path, error=str(e))
    try:
        data = json.loads(strip_json_comments(raw))
    except json.JSONDecodeError as e:
        return CustomDroidsSetting(path=path, error=f"Invalid JSON in {path}: {e}")
    enabled = isinstance(data, dict) and data.get("enableCustomDroids") is True
    return CustomDroidsSetting(path=path, enabled=enabled)
