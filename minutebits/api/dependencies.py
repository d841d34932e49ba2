from fastapi import Depends, Request
from minutebits.services.query_service import QueryService
from minutebits.services.tracker import EventTracker


def get_tracker(request: Request) -> EventTracker:
    return request.app.state.tracker  # type: ignore[return-value]


def get_query_service(tracker: EventTracker = Depends(get_tracker)) -> QueryService:
    return QueryService(tracker)
