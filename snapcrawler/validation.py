"""
Input validation for externally supplied values.

Seed URLs are screened for SSRF targets by literal host matching only; no DNS
resolution happens here, so a public name that resolves to a private address
is not caught (known gap). Links discovered during a crawl are not re-checked:
they must share the seed's host to be visited at all.
"""

import re
from urllib.parse import urlsplit

from snapcrawler.core import BLOCKED_PORTS, MAX_URL_LENGTH, MAX_EMAIL_LENGTH, logger
from snapcrawler.errors import MalformedUrl, SsrfRejected, InputTooLong, InvalidInput
from snapcrawler.url_utils import strip_www

BLOCKED_HOSTS = {"localhost", "0.0.0.0", "::1"}

_PRIVATE_HOST_PATTERNS = (
    r"^127\.",                          # loopback
    r"^10\.",                           # 10.0.0.0/8
    r"^172\.(1[6-9]|2\d|3[01])\.",      # 172.16.0.0/12
    r"^192\.168\.",                     # 192.168.0.0/16
    r"^169\.254\.169\.254$",            # cloud metadata service
)
_PRIVATE_HOST_REGEX = re.compile("|".join(_PRIVATE_HOST_PATTERNS))

_EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def check_length(value: str, limit: int, field: str) -> str:
    if len(value) > limit:
        raise InputTooLong(f"{field} exceeds {limit} characters")
    return value


def check_host(host: str) -> str:
    """Raise SsrfRejected for internal-network or metadata hosts."""
    if host in BLOCKED_HOSTS or _PRIVATE_HOST_REGEX.search(host):
        logger.warning(f"[SSRF] rejected private host {host}", extra={'context': 'validation'})
        raise SsrfRejected(f"host not allowed: {host}")
    if "metadata" in host:
        logger.warning(f"[SSRF] rejected metadata-like host {host}", extra={'context': 'validation'})
        raise SsrfRejected(f"host not allowed: {host}")
    return host


def validate_seed_url(raw: str) -> str:
    """
    Screen an externally supplied URL before it is canonicalized.
    Returns the stripped URL or raises the first failing rule's error.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise MalformedUrl("URL is required")
    url = check_length(raw.strip(), MAX_URL_LENGTH, "URL")

    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise MalformedUrl(f"unparseable URL: {e}") from e

    scheme = (parts.scheme or "").lower()
    if scheme not in ("http", "https"):
        raise SsrfRejected(f"scheme not allowed: {scheme or '(none)'}")

    host = (parts.hostname or "").lower()
    if not host:
        raise MalformedUrl("URL has no host")
    try:
        port = parts.port
    except ValueError as e:
        raise MalformedUrl(f"invalid port: {e}") from e

    # canonicalize() strips "www.", so the host it will fetch is screened too
    for candidate in (host, strip_www(host)):
        check_host(candidate)
    if port is not None and port in BLOCKED_PORTS:
        raise SsrfRejected(f"port not allowed: {port}")
    if ".." in host or host.startswith(".") or host.endswith("."):
        raise SsrfRejected(f"invalid host: {host}")

    return url


def validate_email(raw: str) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidInput("email is required")
    email = check_length(raw.strip(), MAX_EMAIL_LENGTH, "email")
    if not _EMAIL_REGEX.match(email):
        raise InvalidInput("email is not a valid address")
    return email
