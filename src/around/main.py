import logging
from contextlib import asynccontextmanager

from elasticsearch import AsyncElasticsearch
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .lib.blobstore import S3BlobStore
from .lib.elasticsearch import ensure_posts_index
from .routers import health, posts, search
from .security import (
    API_KEY_HEADER_NAME,
    CALLER_IDENTITY_HEADER_NAME,
    verify_api_key,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.getLogger("around").setLevel(settings.log_level)

    es = AsyncElasticsearch(settings.es_url, api_key=settings.es_api_key)
    try:
        await ensure_posts_index(es, settings.posts_index)
    except Exception:
        logger.warning(
            "Could not provision index %s; searches fail until Elasticsearch is reachable",
            settings.posts_index,
            exc_info=True,
        )

    app.state.settings = settings
    app.state.es = es
    app.state.blob_store = S3BlobStore.from_settings(settings)
    logger.info("started-service")
    try:
        yield
    finally:
        await es.close()


app = FastAPI(
    title="Around API",
    description="An API server for geo-tagged posts and nearby-post search",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        API_KEY_HEADER_NAME,
        CALLER_IDENTITY_HEADER_NAME,
    ],
)

app.include_router(health.router)
app.include_router(posts.router)
app.include_router(search.router)


@app.get("/", dependencies=[Depends(verify_api_key)])
async def root():
    return {"message": "Around API"}
