from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tiergoals.core.tiers import MAX_TIER, MIN_TIER

_TRUTHY = {"true", "on", "1"}


class GoalIn(BaseModel):
    title: str = Field(min_length=1, max_length=256)
    notes: str | None = None
    tier: int = Field(ge=MIN_TIER, le=MAX_TIER)
    is_primary: bool | None = None
    parent_goal_id: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value: Any) -> str:
        text = value.strip() if isinstance(value, str) else ""
        if not text:
            raise ValueError("Title is required")
        return text

    @field_validator("notes", mode="before")
    @classmethod
    def _strip_notes(cls, value: Any) -> str | None:
        if not isinstance(value, str):
            return None
        text = value.strip()
        return text or None

    @field_validator("is_primary", mode="before")
    @classmethod
    def _parse_primary(cls, value: Any) -> bool | None:
        if value is None or value == "":
            return None
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value in _TRUTHY
        return None

    @field_validator("parent_goal_id", mode="before")
    @classmethod
    def _parse_parent(cls, value: Any) -> str | None:
        if not isinstance(value, str) or not value.strip():
            return None
        try:
            return str(uuid.UUID(value.strip()))
        except ValueError:
            raise ValueError("Parent goal id must be a UUID")


class DirectionIn(BaseModel):
    direction: Literal["up", "down"]


class GoalOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    notes: str | None
    tier: int
    is_primary: bool
    sort_order: int
    parent_goal_id: str | None
    parent_title: str | None = None
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_goal(cls, goal) -> "GoalOut":
        out = cls.model_validate(goal)
        out.parent_title = goal.parent.title if goal.parent is not None else None
        return out


class TierMetaOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tier: int
    title: str
    description: str
    allow_extras: bool


class ParentOption(BaseModel):
    id: str
    title: str
    tier: int


class TierSectionOut(BaseModel):
    meta: TierMetaOut
    primary_count: int
    primary_limit: int
    primary: list[GoalOut]
    extra: list[GoalOut]
    completed_primary: list[GoalOut]
    completed_extra: list[GoalOut]
    parent_options: list[ParentOption]


class DashboardOut(BaseModel):
    tiers: list[TierSectionOut]
