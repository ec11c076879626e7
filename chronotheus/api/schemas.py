#!/usr/bin/env python3
"""
Chronotheus API Schemas - Pydantic Models for the Prometheus Envelope
"""

from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, model_validator

# Prometheus emits timestamps as integer or fractional seconds
Timestamp = Union[int, float]
Point = Tuple[Timestamp, str]


class Series(BaseModel):
    """One observation stream: instant (``value``) or range (``values``)."""

    model_config = ConfigDict(frozen=True)

    metric: Dict[str, str]
    value: Optional[Point] = None
    values: Optional[List[Point]] = None

    @model_validator(mode="after")
    def _exactly_one_shape(self) -> "Series":
        if (self.value is None) == (self.values is None):
            raise ValueError("series must carry exactly one of 'value' or 'values'")
        return self

    @property
    def is_range(self) -> bool:
        return self.values is not None

    def points(self) -> List[Point]:
        """All (timestamp, value) pairs, in order."""
        if self.values is not None:
            return list(self.values)
        return [self.value]

    def derive(self, metric: Dict[str, str], points: List[Point]) -> "Series":
        """New series of the same shape with the given labels and points."""
        if self.is_range:
            return Series(metric=metric, values=points)
        return Series(metric=metric, value=points[0])


class QueryData(BaseModel):
    resultType: str
    result: List[Series]


class QueryResponse(BaseModel):
    status: str = "success"
    data: QueryData

    def to_json(self) -> dict:
        # Absent value/values keys are omitted, never null
        return self.model_dump(mode="json", exclude_none=True)


class ErrorResponse(BaseModel):
    status: str = "error"
    errorType: str = "execution"
    error: str
