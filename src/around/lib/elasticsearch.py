"""Shared Elasticsearch utilities.

Response unwrapping and posts-index provisioning used by the ingestion
pipeline, the search engine and the application lifespan.
"""

import logging

from elastic_transport import ObjectApiResponse

logger = logging.getLogger(__name__)

POSTS_MAPPINGS = {
    "properties": {
        "location": {"type": "geo_point"},
    }
}


def unwrap_es_response(resp) -> dict:
    """Unwrap an Elasticsearch response, handling both ObjectApiResponse and dict.

    Raises ``TypeError`` if the response type is unexpected.
    """
    if isinstance(resp, ObjectApiResponse):
        return resp.body
    elif isinstance(resp, dict):
        return resp
    else:
        logger.error("Unexpected Elasticsearch response type: %s", type(resp))
        raise TypeError(f"Unexpected Elasticsearch response type: {type(resp)}")


async def ensure_posts_index(es, index: str) -> bool:
    """Create *index* with a ``geo_point`` location mapping if it is missing.

    Returns ``True`` when the index was created, ``False`` if it already existed.
    """
    exists = await es.indices.exists(index=index)
    if exists:
        return False

    await es.indices.create(index=index, mappings=POSTS_MAPPINGS)
    logger.info("Created index %s with geo_point location mapping", index)
    return True
