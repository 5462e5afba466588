"""Pydantic schemas for tools and tool overrides.

Request and response bodies use camelCase on the wire (categoryId,
toolName, ...) and snake_case in Python. Separate "Create" schemas
(input) from "Read" schemas (output).
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

_camel = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "str_strip_whitespace": True,
}


# ─── Tools ──────────────────────────────────────────────

class ToolCreate(BaseModel):
    category_id: str = Field(..., min_length=1, max_length=100)
    tool_name: str = Field(..., min_length=1, max_length=255)
    tool_url: str = Field(..., min_length=1)
    icon_url: Optional[str] = None

    model_config = {**_camel}


class ToolRead(BaseModel):
    id: int
    category_id: str
    tool_name: str
    tool_url: str
    icon_url: Optional[str] = None
    created_at: datetime

    model_config = {**_camel, "from_attributes": True}


class ToolEnvelope(BaseModel):
    tool: ToolRead


class ToolList(BaseModel):
    tools: list[ToolRead]


# ─── Tool overrides ─────────────────────────────────────

OverrideAction = Literal["hide", "rename", "replace"]


class ToolOverrideUpsert(BaseModel):
    category_id: str = Field(..., min_length=1, max_length=100)
    tool_name: str = Field(..., min_length=1, max_length=255)
    action: OverrideAction
    new_name: Optional[str] = Field(None, max_length=255)
    new_url: Optional[str] = None
    new_icon_url: Optional[str] = None

    model_config = {**_camel}


class ToolOverrideRead(BaseModel):
    id: int
    category_id: str
    tool_name: str
    action: str
    new_name: Optional[str] = None
    new_url: Optional[str] = None
    new_icon_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {**_camel, "from_attributes": True}


class ToolOverrideEnvelope(BaseModel):
    override: ToolOverrideRead


class ToolOverrideList(BaseModel):
    overrides: list[ToolOverrideRead]
