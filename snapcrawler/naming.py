"""
Storage key naming for captured pages.
Keys are flat: "<prefix>/<stem>-<timestamp>.<ext>".
"""

import hashlib
import re
from datetime import datetime
from urllib.parse import urlsplit

from snapcrawler.models import ArtifactKind

MAX_NAME_LENGTH = 100
PLACEHOLDER_NAME = "page"

_FORBIDDEN_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f\x7f]')
_DOT_RUNS = re.compile(r"\.+")
_WHITESPACE_RUNS = re.compile(r"\s+")
_HYPHEN_RUNS = re.compile(r"-{2,}")


def _clean(value: str) -> str:
    name = _FORBIDDEN_CHARS.sub("", value or "")
    name = _DOT_RUNS.sub("-", name)
    name = _WHITESPACE_RUNS.sub("-", name)
    name = _HYPHEN_RUNS.sub("-", name).strip("-")
    return name[:MAX_NAME_LENGTH].strip("-").lower()


def sanitize_filename(value: str, fallback: str = None) -> str:
    """Make a storage-safe name segment; falls back to the host, then a placeholder."""
    name = _clean(value)
    if not name and fallback:
        name = _clean(fallback)
    return name or PLACEHOLDER_NAME


def page_stem(canonical_url: str) -> str:
    """
    host + path segments joined with '-'. Anything below the root gets a short
    digest of path and query: /a/b, /a-b and /a.b read the same once joined.
    """
    parts = urlsplit(canonical_url)
    host = parts.hostname or ""
    segments = [s for s in parts.path.split("/") if s]
    readable = sanitize_filename("-".join([host] + segments), fallback=host)
    if not segments and not parts.query:
        return readable
    digest = hashlib.sha1(f"{parts.path}?{parts.query}".encode("utf-8")).hexdigest()[:8]
    readable = readable[:MAX_NAME_LENGTH - len(digest) - 1].strip("-")
    return f"{readable}-{digest}"


def timestamp_suffix(now: datetime = None) -> str:
    return (now or datetime.now()).strftime("%Y%m%d%H%M%S")


def artifact_key(kind: ArtifactKind, stem: str, stamp: str) -> str:
    return f"{kind.prefix}/{stem}-{stamp}.{kind.extension}"
