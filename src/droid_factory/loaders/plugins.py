from __future__ import annotations

from typing import Any

from ..log import get_logger
from ..models.plugin import PluginOverrides, PluginRecord

logger = get_logger(__name__)


def normalize_plugins(data: Any) -> list[PluginRecord]:
    """Map ``data["plugins"]`` to canonical plugin records, in manifest order.

    A missing or non-list ``plugins`` yields an empty list. Entries without a
    string ``name`` are dropped; every other field falls back to an empty value.
    """
    if not isinstance(data, dict):
        return []
    entries = data.get("plugins")
    if not isinstance(entries, list):
        return []

    plugin_root = _str(data.get("pluginRoot"))
    metadata = data.get("metadata")
    if not plugin_root and isinstance(metadata, dict):
        plugin_root = _str(metadata.get("pluginRoot"))

    records: list[PluginRecord] = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict) or not _str(entry.get("name")):
            logger.debug("dropping plugins[%d]: no name", i)
            continue
        records.append(_normalize_entry(entry, plugin_root))
    return records


def _normalize_entry(entry: dict[str, Any], plugin_root: str) -> PluginRecord:
    tags = entry.get("tags")
    keywords = entry.get("keywords") if isinstance(entry.get("keywords"), list) else tags
    strict = entry.get("strict")
    return PluginRecord(
        name=entry["name"],
        description=_str(entry.get("description")),
        version=_str(entry.get("version")),
        author=_author(entry.get("author")),
        category=_str(entry.get("category")),
        keywords=tuple(k for k in keywords if isinstance(k, str)) if isinstance(keywords, list) else (),
        license=_str(entry.get("license")),
        homepage=_str(entry.get("homepage")),
        repository=_str(entry.get("repository")),
        strict=bool(strict) if strict is not None else True,
        plugin_root=plugin_root,
        source=entry.get("source"),
        overrides=PluginOverrides(
            commands=entry.get("commands"),
            agents=entry.get("agents"),
            hooks=entry.get("hooks"),
            skills=entry.get("skills"),
        ),
    )


def _author(value: object) -> str:
    if isinstance(value, dict):
        return _str(value.get("name"))
    return _str(value)


def _str(value: object) -> str:
    return value if isinstance(value, str) else ""
