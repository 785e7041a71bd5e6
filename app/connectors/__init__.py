"""
app/connectors package marker.
"""

from app.connectors.analysis_service_connector import AnalysisServiceConnector, ConnectorRequestError

__all__ = [
    "AnalysisServiceConnector",
    "ConnectorRequestError",
]
