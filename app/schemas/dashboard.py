"""
app/schemas/dashboard.py

Request and response schemas for the dashboard and header-mapping API.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from app.domain.analysis_payload import AnalysisPayload


class IndustrySummaryResponse(BaseModel):
    key: str
    title: str
    description: str = ""
    canonical_fields: list[str] = Field(default_factory=list)


class AliasTableResponse(BaseModel):
    industry: str
    aliases: dict[str, list[str]]


class ResolveHeadersRequest(BaseModel):
    headers: list[str] = Field(..., description="Column headers exactly as uploaded.")


class HeaderMappingResponse(BaseModel):
    industry: str
    mapped: dict[str, str]
    unresolved: list[str] = Field(default_factory=list)
    duplicates: dict[str, list[str]] = Field(default_factory=dict)
    missing_fields: list[str] = Field(default_factory=list)


class WindowRequest(BaseModel):
    """
    Selected trend window: ``preset`` is ``"7"``, ``"30"``, ``"90"``,
    ``"all"`` or ``"custom"``; ``start``/``end`` apply to ``custom`` only.
    """

    preset: str | int | None = "all"
    start: str | None = None
    end: str | None = None


class RenderDashboardRequest(BaseModel):
    analysis: AnalysisPayload
    window: WindowRequest = Field(default_factory=WindowRequest)


class DashboardResponse(BaseModel):
    industry: str
    title: str
    palette: list[str]
    window: dict[str, Any]
    panels: list[dict[str, Any]] = Field(default_factory=list)
    fields: list[dict[str, Any]] = Field(default_factory=list)
