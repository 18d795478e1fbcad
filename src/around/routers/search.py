"""Search router – finds posts near a point.

GET /search?lat=..&lon=..&range=..
    Posts within ``range`` kilometres (default from settings), moderated.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ..lib.errors import PostPipelineError
from ..lib.geo import InvalidCoordinateError, parse_lat_lon
from ..lib.posts import ProximitySearchEngine
from ..models import Post
from ..security import verify_api_key

router = APIRouter(tags=["search"], dependencies=[Depends(verify_api_key)])

logger = logging.getLogger(__name__)


def get_search_engine(request: Request) -> ProximitySearchEngine:
    state = request.app.state
    return ProximitySearchEngine(es=state.es, settings=state.settings)


@router.get("/search", response_model=list[Post])
async def search_posts(
    request: Request,
    lat: str | None = Query(None, description="Latitude in decimal degrees"),
    lon: str | None = Query(None, description="Longitude in decimal degrees"),
    radius_km: float | None = Query(
        None,
        alias="range",
        ge=0,
        allow_inf_nan=False,
        description="Search radius in kilometres",
    ),
    engine: ProximitySearchEngine = Depends(get_search_engine),
) -> list[Post]:
    """Return posts within the radius of (lat, lon), minus moderated ones."""
    settings = request.app.state.settings
    try:
        lat_value, lon_value = parse_lat_lon(lat, lon, strict=settings.strict_coordinates)
    except InvalidCoordinateError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    try:
        return await engine.search(lat_value, lon_value, radius_km)
    except PostPipelineError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.reason) from exc
