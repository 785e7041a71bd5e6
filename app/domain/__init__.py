"""
app/domain package marker.
"""

from app.domain.analysis_payload import (
    AnalysisPayload,
    BooleanFieldDescriptor,
    CategoricalFieldDescriptor,
    FieldDescriptor,
    NumericFieldDescriptor,
    ValueCount,
)

__all__ = [
    "AnalysisPayload",
    "BooleanFieldDescriptor",
    "CategoricalFieldDescriptor",
    "FieldDescriptor",
    "NumericFieldDescriptor",
    "ValueCount",
]
