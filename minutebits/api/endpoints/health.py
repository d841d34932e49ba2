from fastapi import APIRouter, Request, Response
from minutebits.exceptions import StoreUnavailable

router = APIRouter()


@router.get("/healthz")
def healthz(request: Request):
    try:
        pong = request.app.state.tracker.store.ping()
        return {"status": "ok", "redis": pong}
    except StoreUnavailable as e:
        return Response(status_code=503, content=str(e))


@router.get("/readyz")
def readyz(request: Request):
    if getattr(request.app.state, "ready", False):
        return {"status": "ready"}
    return Response(status_code=503, content="not ready")
