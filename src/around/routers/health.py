import logging

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

router = APIRouter(tags=["health"])

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    status: str
    index: str | None = None


@router.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
async def healthcheck():
    return {"status": "ok"}


@router.get("/health/ready", response_model=HealthResponse)
async def readiness(request: Request):
    """Report whether the posts index backend is reachable."""
    state = request.app.state
    es = getattr(state, "es", None)
    try:
        reachable = es is not None and await es.ping()
    except Exception:
        logger.exception("Elasticsearch ping failed")
        reachable = False

    if not reachable:
        raise HTTPException(status_code=503, detail="Elasticsearch is not reachable")
    return HealthResponse(status="ok", index=state.settings.posts_index)
