"""
app/domain/analysis_payload.py

Typed boundary over the analysis service's JSON payload.

Only the outer envelope and the per-field statistics are typed. Everything
under ``insights`` stays raw JSON because its shape varies by industry and
backend version; the shape classifier decides how to read it.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class ValueCount(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: Any = None
    count: float = 0


class NumericFieldDescriptor(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    type: Literal["numeric"]
    min: float | None = None
    max: float | None = None
    mean: float | None = None
    median: float | None = None
    stddev: float | None = None
    count: float | None = None


class CategoricalFieldDescriptor(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    type: Literal["categorical"]
    unique_count: int | None = None
    top_values: list[ValueCount] = Field(default_factory=list)


class BooleanFieldDescriptor(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    type: Literal["boolean"]
    counts: list[ValueCount] = Field(default_factory=list)


FieldDescriptor = Annotated[
    Union[NumericFieldDescriptor, CategoricalFieldDescriptor, BooleanFieldDescriptor],
    Field(discriminator="type"),
]

FIELD_DESCRIPTOR_ADAPTER: TypeAdapter[FieldDescriptor] = TypeAdapter(FieldDescriptor)


class AnalysisPayload(BaseModel):
    """
    Analysis result for one uploaded file.

    Immutable for the duration of a render. Unknown top-level keys are kept.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    summary: dict[str, Any] = Field(default_factory=dict)
    insights: dict[str, Any] = Field(default_factory=dict)

    @field_validator("summary", "insights", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def section(self, name: str) -> Any:
        return self.insights.get(name)
