"""Frontmatter of agent and command markdown files, as written by plugin authors."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

_WS = re.compile(r"\s+")


def single_line(value: str) -> str:
    return _WS.sub(" ", value).strip()


class AgentDefinition(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    name: str = ""
    description: str | None = None
    tools: list[str] = []
    body: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _name_as_text(cls, v: object) -> object:
        return "" if v is None else str(v)

    @field_validator("description", mode="before")
    @classmethod
    def _single_line_description(cls, v: object) -> object:
        if isinstance(v, str):
            return single_line(v) or None
        return v

    @field_validator("tools", mode="before")
    @classmethod
    def _parse_tools(cls, v: object) -> object:
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, (list, tuple)):
            tools = [str(t).strip() for t in v]
            return list(dict.fromkeys(t for t in tools if t))
        return v


class CommandDefinition(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    description: str | None = None
    argument_hint: str | None = Field(None, alias="argument-hint")
    allowed_tools: list[str] = Field(default_factory=list, alias="allowed-tools")
    body: str = ""

    @field_validator("description", mode="before")
    @classmethod
    def _single_line_description(cls, v: object) -> object:
        if v is None:
            return None
        return single_line(str(v)) or None

    @field_validator("argument_hint", mode="before")
    @classmethod
    def _parse_argument_hint(cls, v: object) -> object:
        # ["file", "mode"] -> "[file] [mode]"
        if isinstance(v, (list, tuple)):
            items = [str(x).strip() for x in v if str(x).strip()]
            return " ".join(f"[{x}]" for x in items) or None
        if v is None:
            return None
        return single_line(str(v)) or None

    @field_validator("allowed_tools", mode="before")
    @classmethod
    def _parse_allowed_tools(cls, v: object) -> object:
        if v is None:
            return []
        if isinstance(v, str):
            return [t.strip() for t in v.split(",") if t.strip()]
        if isinstance(v, (list, tuple)):
            return [str(t).strip() for t in v if str(t).strip()]
        return v
