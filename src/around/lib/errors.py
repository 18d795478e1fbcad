"""Per-request failures raised by the ingestion pipeline and search engine.

Each error carries the HTTP status and short reason the routers respond
with, so a failing external call ends one request instead of the process.
"""


class PostPipelineError(Exception):
    """Base class for post ingestion and search failures."""

    status_code = 500
    reason = "Internal error"

    def __init__(self, reason: str | None = None):
        if reason is not None:
            self.reason = reason
        super().__init__(self.reason)


class InvalidPostError(PostPipelineError):
    status_code = 400
    reason = "Invalid post"


class MediaMissingError(PostPipelineError):
    reason = "Image is not available"


class BlobStoreError(PostPipelineError):
    reason = "Blob store is not available"


class IndexWriteError(PostPipelineError):
    reason = "Failed to save post to index"


class SearchError(PostPipelineError):
    reason = "Search request failed"
