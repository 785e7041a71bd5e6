"""
app/schemas package marker.
"""

from app.schemas.dashboard import (
    AliasTableResponse,
    DashboardResponse,
    HeaderMappingResponse,
    IndustrySummaryResponse,
    RenderDashboardRequest,
    ResolveHeadersRequest,
    WindowRequest,
)

__all__ = [
    "AliasTableResponse",
    "DashboardResponse",
    "HeaderMappingResponse",
    "IndustrySummaryResponse",
    "RenderDashboardRequest",
    "ResolveHeadersRequest",
    "WindowRequest",
]
