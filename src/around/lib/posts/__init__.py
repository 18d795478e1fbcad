"""Post ingestion and proximity search.

Both components take an ``AsyncElasticsearch`` client and a
:class:`~around.config.Settings` at construction; ingestion additionally
takes a :class:`~around.lib.blobstore.BlobStore`.
"""

from .ingestion import IngestionPipeline, Media, new_post_id
from .search import ProximitySearchEngine, build_geo_distance_query, decode_hits

__all__ = [
    "IngestionPipeline",
    "Media",
    "new_post_id",
    "ProximitySearchEngine",
    "build_geo_distance_query",
    "decode_hits",
]
