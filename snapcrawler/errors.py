"""
Error taxonomy for crawl jobs.

Each error carries the response category it maps to at the request boundary:
bad input (400), timeout (504) or internal (500). Per-page and per-artifact
errors never leave the page processor; they are recorded on the job result.
"""


class SnapshotError(Exception):
    """Base error for the snapshot crawler."""
    status = 500


class InvalidInput(SnapshotError):
    """Raised when a request or one of its fields is unusable."""
    status = 400


class MalformedUrl(InvalidInput):
    """Raised when a string is not an absolute http(s) URL."""
    pass


class SsrfRejected(InvalidInput):
    """Raised when a seed URL could target a private or dangerous endpoint."""
    pass


class InputTooLong(InvalidInput):
    """Raised when an input exceeds its length limit."""
    pass


class SeedExcluded(InvalidInput):
    """Raised when the seed itself is filtered out by the scope policy."""
    pass


class RenderFailure(SnapshotError):
    """Raised by a renderer when a single page cannot be loaded or captured."""
    pass


class ArtifactTooLarge(SnapshotError):
    """Raised when a captured artifact exceeds its size cap."""
    pass


class StorageFailure(SnapshotError):
    """Raised by a blob store when an object cannot be written or read."""
    pass


class JobTimeout(SnapshotError):
    """Raised when the job deadline passes before any page completes."""
    status = 504


class InternalError(SnapshotError):
    """Unexpected failure. The message is safe to return to callers."""
    pass
