"""
Request boundary.

Raw JSON bodies are turned into a StartCrawl or DownloadArchive before any
work starts. Every failure leaves as {error, timestamp} with a 400, 500 or 504
status; internal details are logged here and never returned.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Tuple, Union

from snapcrawler.core import logger
from snapcrawler.engine import CrawlContext, run_crawl
from snapcrawler.errors import InternalError, InvalidInput, JobTimeout, SnapshotError
from snapcrawler.models import ArtifactKind, CrawlRequest, CrawlResult, DownloadArchive, StartCrawl
from snapcrawler.storage.archive import build_archive
from snapcrawler.storage.blob_store import BlobStore
from snapcrawler.validation import validate_email

ARCHIVE_TYPES = {
    "html": ArtifactKind.HTML,
    "screenshots": ArtifactKind.SCREENSHOT,
}

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred while processing the request."


def parse_request(body: Any) -> CrawlRequest:
    if not isinstance(body, dict):
        raise InvalidInput("request body must be a JSON object")

    action = body.get("action")
    if action is None:
        url = body.get("url")
        if not isinstance(url, str) or not url.strip():
            raise InvalidInput("Website URL is required.")
        email = body.get("email")
        if email is not None:
            email = validate_email(email)
        return StartCrawl(url=url.strip(), email=email)

    if action == "download-zip":
        kind = ARCHIVE_TYPES.get(body.get("type"))
        if kind is None:
            raise InvalidInput("type must be 'html' or 'screenshots'")
        files = body.get("files")
        if not isinstance(files, list) or not files:
            raise InvalidInput("files must be a non-empty list")
        names = tuple(
            f["name"] for f in files
            if isinstance(f, dict) and isinstance(f.get("name"), str)
        )
        if not names:
            raise InvalidInput("files contain no names")
        return DownloadArchive(kind=kind, names=names)

    raise InvalidInput(f"unknown action: {action!r}")


def crawl_response(result: CrawlResult) -> dict:
    return {
        "message": "Processing complete. HTML and screenshots are available.",
        "pagesProcessed": result.pages_visited,
        "htmlFiles": result.html_files,
        "screenshotFiles": result.screenshot_files,
        "failedPages": [e.describe() for e in result.per_page_errors],
        "timedOut": result.timed_out,
    }


def error_response(error: SnapshotError) -> Tuple[int, dict]:
    # Only input and timeout messages are written for callers
    if isinstance(error, (InvalidInput, JobTimeout)):
        message = str(error)
    else:
        message = INTERNAL_ERROR_MESSAGE
    return error.status, {
        "error": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def handle_request(body, context_factory: Callable[[], CrawlContext],
                   store: BlobStore) -> Tuple[int, Union[dict, bytes]]:
    """
    Dispatch one request. Returns (status, payload): a JSON-ready dict, or the
    zip bytes of a successful download.
    """
    try:
        request = parse_request(body)
        if isinstance(request, DownloadArchive):
            return 200, build_archive(store, request.kind, request.names)

        logger.info(
            f"received crawl request for {request.url}"
            + (f" (notify {request.email})" if request.email else ""),
            extra={'context': 'handler'},
        )
        result = run_crawl(request.url, context_factory())
        return 200, crawl_response(result)
    except SnapshotError as e:
        logger.warning(f"request failed: {type(e).__name__}: {e}", extra={'context': 'handler'})
        return error_response(e)
    except Exception:
        logger.exception("unexpected error while handling request", extra={'context': 'handler'})
        return error_response(InternalError(INTERNAL_ERROR_MESSAGE))
