from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional, Union

from minutebits.domain.models import Granularity
from pydantic import BaseModel, Field, StrictInt


class TrackRequest(BaseModel):
    event: str = Field(min_length=1)
    ids: Union[List[StrictInt], StrictInt]
    timestamp: Optional[datetime] = None


class TrackResponse(BaseModel):
    status: str = "accepted"
    tracked: int


class SetRef(BaseModel):
    """A base set: one event in one time bucket."""

    event: str = Field(min_length=1)
    granularity: Granularity
    at: Optional[datetime] = None


class Expression(BaseModel):
    """Operator applied to nested expressions or base sets."""

    op: Literal["and", "or", "xor", "minus", "not"]
    operands: List[Union[Expression, SetRef]] = Field(min_length=1)


Expression.model_rebuild()


class QueryRequest(BaseModel):
    expression: Union[Expression, SetRef]
    ids: Optional[List[StrictInt]] = None


class QueryResponse(BaseModel):
    key: str
    count: int
    members: Optional[List[int]] = None


class MembersRequest(BaseModel):
    ids: List[StrictInt]


class SetSummary(BaseModel):
    event: str
    granularity: Granularity
    key: str
    count: int
