"""
Tracking models: projects, keywords and presence checks.

``Project`` is a tracked website/brand. ``Keyword`` belongs to exactly one
project. ``Check`` is one timestamped presence/absence fact for a keyword on
an AI engine.

All three are frozen (immutable) after construction. Checks are produced by
an external ingestion process or the synthetic generator and are read-only
to the aggregation layer.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Project(BaseModel):
    """A tracked website/brand, the scoping unit for keywords.

    Attributes:
        project_id: Auto-assigned database PK; ``None`` before DB insertion.
        domain: Website domain, e.g. ``"boat-lifestyle.com"``.
        brand: Brand name looked for in engine answers.
    """

    model_config = ConfigDict(frozen=True)

    project_id: Optional[int] = None
    domain: str
    brand: str

    @field_validator("domain")
    @classmethod
    def validate_domain(cls, v: str) -> str:
        v = v.strip().lower()
        if not v or " " in v:
            raise ValueError(f"Project domain '{v}' must be non-empty and contain no spaces.")
        return v

    @field_validator("brand")
    @classmethod
    def validate_brand(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Project brand must be non-empty.")
        return v.strip()


class Keyword(BaseModel):
    """A tracked search phrase.

    Keyword text is a display/grouping label only; duplicates within a
    project are allowed and are grouped together by the aggregator.

    Attributes:
        keyword_id: Auto-assigned database PK; ``None`` before DB insertion.
        keyword: The search phrase.
        project_id: FK to ``projects.project_id``.
    """

    model_config = ConfigDict(frozen=True)

    keyword_id: Optional[int] = None
    keyword: str
    project_id: int

    @field_validator("keyword")
    @classmethod
    def validate_keyword(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Keyword text must be non-empty.")
        return v.strip()


class Check(BaseModel):
    """One presence/absence observation for a keyword on an engine.

    Naive timestamps are interpreted as UTC so that calendar-day grouping
    is unambiguous.

    Attributes:
        check_id: Auto-assigned database PK; ``None`` before DB insertion.
        keyword_id: FK to ``keywords.keyword_id``.
        engine: Engine label, one of the configured engine names.
        presence: ``True`` if the brand appeared in the engine's answer.
        timestamp: UTC time of the check.
    """

    model_config = ConfigDict(frozen=True)

    check_id: Optional[int] = None
    keyword_id: int
    engine: str
    presence: bool
    timestamp: datetime

    @field_validator("engine")
    @classmethod
    def validate_engine(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Check engine must be non-empty.")
        return v.strip()

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)
