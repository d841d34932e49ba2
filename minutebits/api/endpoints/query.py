from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from minutebits.api.dependencies import get_query_service, get_tracker
from minutebits.api.schemas import (
    MembersRequest,
    QueryRequest,
    QueryResponse,
    SetSummary,
)
from minutebits.domain.models import Granularity
from minutebits.metrics.instruments import REQUEST_LATENCY
from minutebits.services.query_service import QueryService
from minutebits.services.tracker import EventTracker

router = APIRouter()


@router.get("/events")
def list_events(tracker: EventTracker = Depends(get_tracker)):
    return {"events": tracker.events()}


@router.get("/events/{granularity}/{event}", response_model=SetSummary)
def event_summary(
    granularity: Granularity,
    event: str,
    at: Optional[datetime] = Query(None, description="Any instant in the bucket"),
    tracker: EventTracker = Depends(get_tracker),
):
    with REQUEST_LATENCY.labels(endpoint="event_summary").time():
        bitset = tracker.query(granularity, event, at)
        return SetSummary(
            event=event,
            granularity=granularity,
            key=bitset.key,
            count=bitset.length(),
        )


@router.post("/events/{granularity}/{event}/members")
def event_members(
    granularity: Granularity,
    event: str,
    body: MembersRequest,
    at: Optional[datetime] = Query(None),
    svc: QueryService = Depends(get_query_service),
):
    with REQUEST_LATENCY.labels(endpoint="event_members").time():
        return {"members": svc.members(granularity, event, at, body.ids)}


@router.post("/query", response_model=QueryResponse)
def run_query(body: QueryRequest, svc: QueryService = Depends(get_query_service)):
    with REQUEST_LATENCY.labels(endpoint="query").time():
        return QueryResponse(**svc.summarize(body.expression, body.ids))


@router.get("/operations")
def list_operations(tracker: EventTracker = Depends(get_tracker)):
    return {"operations": tracker.operations()}


@router.delete("/operations", status_code=status.HTTP_200_OK)
def reset_operations(tracker: EventTracker = Depends(get_tracker)):
    return {"deleted": tracker.reset_operations_cache()}
