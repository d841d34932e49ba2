from fastapi import APIRouter, Depends, status
from minutebits.api.dependencies import get_tracker
from minutebits.api.schemas import TrackRequest, TrackResponse
from minutebits.core.logger import get_logger
from minutebits.metrics.instruments import REQUEST_LATENCY
from minutebits.services.tracker import EventTracker

router = APIRouter()
logger = get_logger("minutebits.api.track")


@router.post(
    "/track",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=TrackResponse,
    summary="Track an event for one or more identifiers",
)
def track_event(body: TrackRequest, tracker: EventTracker = Depends(get_tracker)):
    with REQUEST_LATENCY.labels(endpoint="track").time():
        tracked = tracker.track(body.event, body.ids, body.timestamp)
    logger.info("event_tracked", extra={"event": body.event, "tracked": tracked})
    return TrackResponse(tracked=tracked)
