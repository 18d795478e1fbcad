"""Posts router – accepts new geo-tagged posts.

POST /post
    Multipart form with ``message``, ``lat``, ``lon`` and an ``image`` file.

Starlette's multipart parser already spools each file part to a
``SpooledTemporaryFile`` that keeps up to 1 MiB in memory and rolls larger
uploads over to disk; that spool is handed to the blob store as-is.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile

from ..lib.errors import PostPipelineError
from ..lib.posts import IngestionPipeline, Media
from ..models import PostCreatedResponse
from ..security import CallerIdentity, verify_api_key

router = APIRouter(tags=["posts"], dependencies=[Depends(verify_api_key)])

logger = logging.getLogger(__name__)


def get_ingestion_pipeline(request: Request) -> IngestionPipeline:
    state = request.app.state
    return IngestionPipeline(es=state.es, blob_store=state.blob_store, settings=state.settings)


@router.post("/post", response_model=PostCreatedResponse)
async def create_post(
    user: CallerIdentity,
    message: str = Form(""),
    lat: str | None = Form(None),
    lon: str | None = Form(None),
    image: UploadFile | None = File(None),
    pipeline: IngestionPipeline = Depends(get_ingestion_pipeline),
) -> PostCreatedResponse:
    """Store the image, index the post and return its generated id."""
    media = None
    if image is not None and image.filename:
        media = Media(stream=image.file, content_type=image.content_type)

    try:
        return await pipeline.ingest(user=user, message=message, lat=lat, lon=lon, media=media)
    except PostPipelineError as exc:
        logger.warning("Post request from %s failed: %s", user, exc.reason)
        raise HTTPException(status_code=exc.status_code, detail=exc.reason) from exc
