"""Post ingestion pipeline.

Creates a post in two sequential writes keyed by the same generated id:

1. Store the image in the blob store, make it public and obtain its URL.
2. Index the post document (with that URL) and refresh immediately so it is
   searchable on the next request.

The blob always goes first so an indexed post never points at a missing or
private object.  If indexing fails after the blob write, the blob is left
behind and logged; there is no rollback.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import BinaryIO

from ...config import Settings
from ...models import Location, Post, PostCreatedResponse
from ..errors import IndexWriteError, InvalidPostError, MediaMissingError
from ..geo import InvalidCoordinateError, parse_lat_lon

logger = logging.getLogger(__name__)


@dataclass
class Media:
    """An uploaded image stream, already spooled by the HTTP layer."""

    stream: BinaryIO
    content_type: str | None = None


def new_post_id() -> str:
    return str(uuid.uuid4())


class IngestionPipeline:
    """Validates a post, stores its media and indexes it.

    Pipeline:
        form fields → id → blob write (public-read) → index write (refresh)
    """

    def __init__(self, es, blob_store, settings: Settings) -> None:
        self.es = es
        self.blob_store = blob_store
        self.settings = settings

    async def store_media(self, post_id: str, media: Media) -> str:
        """Write *media* under *post_id* and return its public URL."""
        return await self.blob_store.put(post_id, media.stream, media.content_type)

    async def index_post(self, post_id: str, post: Post) -> None:
        """Index *post* under *post_id*, visible to the next search."""
        try:
            await self.es.index(
                index=self.settings.posts_index,
                id=post_id,
                document=post.model_dump(),
                refresh=True,
            )
        except Exception as exc:
            if post.url is not None:
                logger.error(
                    "Post %s was not indexed; blob %s is orphaned", post_id, post.url
                )
            logger.exception("Elasticsearch index write failed for post %s", post_id)
            raise IndexWriteError() from exc

        logger.info("Post %s is saved to index: %s", post_id, post.message)

    async def ingest(
        self,
        user: str,
        message: str | None,
        lat: str | None,
        lon: str | None,
        media: Media | None,
    ) -> PostCreatedResponse:
        """Create a post for the already-authenticated *user*.

        *lat* and *lon* are the raw form values.  Raises a
        :class:`~around.lib.errors.PostPipelineError` subclass on failure.
        """
        message = message or ""
        logger.info("Received one post request from %s: %s", user, message)

        try:
            lat_value, lon_value = parse_lat_lon(
                lat, lon, strict=self.settings.strict_coordinates
            )
        except InvalidCoordinateError as exc:
            raise InvalidPostError(str(exc)) from exc

        if media is None and self.settings.require_media:
            logger.warning("Post request from %s has no image", user)
            raise MediaMissingError()

        # Generated before any write so the blob key and the document id match.
        post_id = new_post_id()

        url = None
        if media is not None:
            url = await self.store_media(post_id, media)

        post = Post(
            user=user,
            message=message,
            location=Location(lat=lat_value, lon=lon_value),
            url=url,
        )
        await self.index_post(post_id, post)

        return PostCreatedResponse(id=post_id, url=url)
