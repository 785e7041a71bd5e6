"""
app/api/dependencies.py

Shared FastAPI dependencies: configured resolver, engines and connector.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status

from app.config import get_analysis_service_settings, get_dashboard_settings
from app.connectors.analysis_service_connector import AnalysisServiceConnector
from app.mappers.alias_resolver import AliasResolver
from app.validators.alias_table_validator import ConfigurationError
from dashboard.engine import DashboardEngine
from dispatch.dispatcher import VisualizationDispatcher
from industry.aliases import load_alias_tables
from industry.profiles import get_profile


@lru_cache(maxsize=1)
def get_alias_resolver() -> AliasResolver:
    """
    Build the resolver once; malformed alias tables fail the first request
    loudly instead of mapping headers wrongly.
    """

    settings = get_dashboard_settings()
    return AliasResolver(alias_tables=load_alias_tables(settings.alias_tables_path))


@lru_cache(maxsize=1)
def get_dispatcher() -> VisualizationDispatcher:
    settings = get_dashboard_settings()
    return VisualizationDispatcher(
        display_decimals=settings.display_decimals,
        min_trend_points=settings.min_trend_points,
        pie_max_slices=settings.pie_max_slices,
    )


@lru_cache(maxsize=1)
def get_analysis_connector() -> AnalysisServiceConnector:
    return AnalysisServiceConnector(settings=get_analysis_service_settings())


def get_dashboard_engine(
    industry: str,
    dispatcher: VisualizationDispatcher = Depends(get_dispatcher),
) -> DashboardEngine:
    """
    Resolve the engine for the ``industry`` path or query parameter.

    Raises HTTP 404 when the industry has no dashboard profile.
    """

    try:
        profile = get_profile(industry)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.to_dict()) from exc
    return DashboardEngine(
        profile,
        dispatcher=dispatcher,
        display_decimals=get_dashboard_settings().display_decimals,
    )


def get_bearer_token(authorization: str | None = Header(default=None)) -> str | None:
    """
    Extract the bearer token forwarded to the analysis service, if any.
    """

    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
