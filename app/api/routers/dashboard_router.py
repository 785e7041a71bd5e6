"""
app/api/routers/dashboard_router.py

Dashboard rendering and header-mapping endpoints.

    GET  /industries                              industry keys and titles
    GET  /industries/{industry}/aliases           accepted header aliases
    POST /industries/{industry}/resolve-headers   map an uploaded header row
    POST /dashboards/{industry}/render            render a supplied payload
    GET  /files/{file_id}/dashboard               fetch from the analysis service and render

Unknown industries answer 404, malformed payloads 422 and analysis service
failures 502.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import (
    get_alias_resolver,
    get_analysis_connector,
    get_bearer_token,
    get_dashboard_engine,
)
from app.connectors.analysis_service_connector import AnalysisServiceConnector, ConnectorRequestError
from app.mappers.alias_resolver import AliasResolver
from app.schemas.dashboard import (
    AliasTableResponse,
    DashboardResponse,
    HeaderMappingResponse,
    IndustrySummaryResponse,
    RenderDashboardRequest,
    ResolveHeadersRequest,
)
from app.validators.alias_table_validator import ConfigurationError
from dashboard.engine import DashboardEngine
from industry.profiles import DEFAULT_PROFILES
from temporal.window import WindowSpec

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])


@router.get("/industries", response_model=list[IndustrySummaryResponse])
def list_industries(resolver: AliasResolver = Depends(get_alias_resolver)) -> list[IndustrySummaryResponse]:
    summaries = []
    for key, profile in DEFAULT_PROFILES.items():
        fields = list(resolver.canonical_fields(key)) if key in resolver.industries() else []
        summaries.append(
            IndustrySummaryResponse(
                key=key,
                title=profile.title,
                description=profile.description,
                canonical_fields=fields,
            )
        )
    return summaries


@router.get("/industries/{industry}/aliases", response_model=AliasTableResponse)
def get_aliases(
    industry: str,
    resolver: AliasResolver = Depends(get_alias_resolver),
) -> AliasTableResponse:
    try:
        table = resolver.aliases_for(industry)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.to_dict()) from exc
    return AliasTableResponse(
        industry=industry.strip().lower(),
        aliases={canonical: list(aliases) for canonical, aliases in table.items()},
    )


@router.post("/industries/{industry}/resolve-headers", response_model=HeaderMappingResponse)
def resolve_headers(
    industry: str,
    body: ResolveHeadersRequest,
    resolver: AliasResolver = Depends(get_alias_resolver),
) -> HeaderMappingResponse:
    try:
        report = resolver.resolve_headers(industry, body.headers)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.to_dict()) from exc
    return HeaderMappingResponse(**report.to_dict())


@router.post("/dashboards/{industry}/render", response_model=DashboardResponse)
def render_dashboard(
    body: RenderDashboardRequest,
    engine: DashboardEngine = Depends(get_dashboard_engine),
) -> DashboardResponse:
    """
    Decide the presentation of a payload the caller already holds.

    Raises HTTP 422 for an unrecognised window preset.
    """

    window = _window_spec(body.window.preset, body.window.start, body.window.end)
    view = engine.render(body.analysis, window)
    return DashboardResponse(**view.to_dict())


@router.get("/files/{file_id}/dashboard", response_model=DashboardResponse)
def file_dashboard(
    file_id: str,
    window: str = Query(default="all", description="Day count, 'all' or 'custom'."),
    start: str | None = Query(default=None),
    end: str | None = Query(default=None),
    engine: DashboardEngine = Depends(get_dashboard_engine),
    connector: AnalysisServiceConnector = Depends(get_analysis_connector),
    token: str | None = Depends(get_bearer_token),
) -> DashboardResponse:
    """
    Fetch a file's analysis from the analysis service and render it.

    Raises HTTP 404 when the analysis service does not know the file and
    HTTP 502 for any other upstream failure.
    """

    spec = _window_spec(window, start, end)
    try:
        payload = connector.fetch_analysis(file_id, token=token)
    except ConnectorRequestError as exc:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No analysis found for file '{file_id}'.",
            ) from exc
        logger.error("Analysis fetch failed file_id=%s error=%s", file_id, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Analysis service request failed.",
        ) from exc

    view = engine.render(payload, spec)
    return DashboardResponse(**view.to_dict())


def _window_spec(preset: str | int | None, start: str | None, end: str | None) -> WindowSpec:
    try:
        return WindowSpec.parse(preset, start=start, end=end)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
