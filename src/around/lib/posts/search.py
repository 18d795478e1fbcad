"""Proximity search over the posts index.

Runs a ``geo_distance`` filter centred on the query point, decodes every hit
into a :class:`~around.models.Post` and drops posts whose message matches the
moderation blocklist.  Hits come back in whatever order the index returns
them; proximity is the only guarantee.
"""

import logging

from pydantic import ValidationError

from ...config import Settings
from ...models import Post
from ..elasticsearch import unwrap_es_response
from ..errors import SearchError
from ..geo import format_distance
from ..moderation import is_filtered

logger = logging.getLogger(__name__)


def build_geo_distance_query(lat: float, lon: float, radius_km: float) -> dict:
    """Non-scoring filter matching documents within *radius_km* (inclusive)."""
    return {
        "bool": {
            "filter": [
                {
                    "geo_distance": {
                        "distance": format_distance(radius_km),
                        "location": {"lat": lat, "lon": lon},
                    }
                }
            ]
        }
    }


def decode_hits(data: dict) -> list[Post]:
    """Decode search hits into posts, failing on any malformed document."""
    posts: list[Post] = []
    for hit in data.get("hits", {}).get("hits", []):
        src = hit.get("_source") or {}
        try:
            posts.append(Post.model_validate(src))
        except ValidationError as exc:
            logger.error("Malformed post document %s: %s", hit.get("_id"), exc)
            raise SearchError("Malformed post document") from exc
    return posts


class ProximitySearchEngine:
    """Answers "posts within *radius_km* of (lat, lon)" with moderation applied."""

    def __init__(self, es, settings: Settings) -> None:
        self.es = es
        self.settings = settings

    def resolve_radius(self, radius_km: float | None) -> float:
        if radius_km is None:
            return self.settings.default_radius_km
        return radius_km

    async def search(
        self,
        lat: float,
        lon: float,
        radius_km: float | None = None,
    ) -> list[Post]:
        radius = self.resolve_radius(radius_km)
        query = build_geo_distance_query(lat, lon, radius)
        logger.info("Search received: %f %f %s", lat, lon, format_distance(radius))

        try:
            resp = await self.es.search(
                index=self.settings.posts_index,
                query=query,
                size=self.settings.search_max_results,
            )
            data = unwrap_es_response(resp)
        except Exception as exc:
            logger.exception(
                "Elasticsearch search failed",
                extra={"index": self.settings.posts_index, "query": query},
            )
            raise SearchError() from exc

        posts = decode_hits(data)
        logger.info("Query took %s milliseconds, found %d posts", data.get("took"), len(posts))

        visible = [
            p for p in posts if not is_filtered(p.message, self.settings.blocked_terms)
        ]
        if len(visible) != len(posts):
            logger.info("Filtered %d posts by moderation", len(posts) - len(visible))
        return visible
