"""Rewrite plugin markdown into Factory's droid and command formats."""

from __future__ import annotations

import re
from typing import Any

import frontmatter  # type: ignore[import-untyped]

from .log import get_logger
from .models.definitions import AgentDefinition, CommandDefinition, single_line

logger = get_logger(__name__)

MAX_DESCRIPTION = 200

_LINE_MARKERS = re.compile(r"^(#+\s*|[-*]\s+|\d+\.\s+)")


def convert_agent_to_droid(text: str, fallback_name: str | None = None) -> str:
    """Convert agent markdown to a droid: name, one-line description, ``model: inherit``, tools.

    Raises:
        ValueError: When the frontmatter cannot be parsed or validated.
    """
    try:
        post = frontmatter.loads(text or "")
        agent = AgentDefinition.model_validate({**post.metadata, "body": post.content})
    except Exception as e:
        raise ValueError(f"Invalid agent frontmatter: {e}") from e

    metadata: dict[str, Any] = {"name": agent.name or fallback_name or ""}
    if agent.description:
        metadata["description"] = agent.description
    metadata["model"] = "inherit"
    if agent.tools:
        metadata["tools"] = agent.tools
    return _dump(metadata, agent.body)


def convert_command(text: str) -> str:
    """Convert command markdown to Factory's command frontmatter.

    Keeps ``description`` (derived from the body when missing), ``argument-hint``
    and ``allowed-tools``. Unparseable input is returned unchanged.
    """
    try:
        post = frontmatter.loads(text or "")
        command = CommandDefinition.model_validate({**post.metadata, "body": post.content})
    except Exception as e:
        logger.debug("command conversion skipped: %s", e)
        return text or ""

    metadata: dict[str, Any] = {}
    description = command.description or derive_description(command.body)
    if description:
        metadata["description"] = description
    if command.argument_hint:
        metadata["argument-hint"] = command.argument_hint
    if command.allowed_tools:
        metadata["allowed-tools"] = ", ".join(command.allowed_tools)
    if not metadata:
        return command.body + "\n"
    return _dump(metadata, command.body)


def derive_description(body: str) -> str:
    """First meaningful body line without markdown markers, cut at a word boundary."""
    for raw in body.splitlines():
        line = single_line(_LINE_MARKERS.sub("", raw.strip()))
        if not line:
            continue
        if len(line) > MAX_DESCRIPTION:
            cut = line[:MAX_DESCRIPTION]
            return re.sub(r"\s+\S*$", "", cut).strip()
        return line
    return ""


def _dump(metadata: dict[str, Any], body: str) -> str:
    post = frontmatter.Post(body)
    post.metadata.update(metadata)
    # a huge width keeps long descriptions on one line
    return frontmatter.dumps(post, sort_keys=False, width=1_000_000) + "\n"
