from urllib.parse import urlsplit, parse_qsl, urlencode, quote

from snapcrawler.errors import MalformedUrl

DEFAULT_PORTS = {"http": 80, "https": 443}

# Characters left untouched when re-quoting a path; "%" keeps existing escapes
_PATH_SAFE = "/%:@!$&'()*+,;=~-._"


def strip_www(host: str) -> str:
    """Drop a leading 'www.' unless that would leave a bare label (www.com stays)."""
    if host.startswith("www."):
        rest = host[4:]
        if "." in rest:
            return rest
    return host


def _split(url: str):
    if not isinstance(url, str) or not url.strip():
        raise MalformedUrl("empty URL")
    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except ValueError as e:
        raise MalformedUrl(f"unparseable URL {url!r}: {e}") from e
    scheme = (parts.scheme or "").lower()
    if scheme not in DEFAULT_PORTS:
        raise MalformedUrl(f"not an absolute http(s) URL: {url!r}")
    if not parts.hostname:
        raise MalformedUrl(f"URL has no host: {url!r}")
    return parts, scheme, port


def canonicalize(url: str) -> str:
    """
    Canonical form used for page identity:
    - scheme forced to https, host lower-cased and www-stripped
    - empty path -> "/", trailing slash removed from non-root paths
    - query pairs stable-sorted by key, empty query dropped
    - fragment and userinfo dropped
    - port kept only when it is not a default port
    Raises MalformedUrl instead of returning the raw input.
    """
    parts, scheme, port = _split(url)

    host = strip_www(parts.hostname.lower())
    if ":" in host:
        host = f"[{host}]"

    # A port that was the default for the original scheme is implicit
    if port is not None and port in (DEFAULT_PORTS[scheme], DEFAULT_PORTS["https"]):
        port = None

    path = quote(parts.path, safe=_PATH_SAFE).rstrip("/") or "/"

    pairs = parse_qsl(parts.query, keep_blank_values=True)
    query = urlencode(sorted(pairs, key=lambda kv: kv[0]))

    netloc = host if port is None else f"{host}:{port}"
    canonical = f"https://{netloc}{path}"
    if query:
        canonical += f"?{query}"
    return canonical


def canonical_host(url: str) -> str:
    """Lower-case, www-stripped host of a URL (no port)."""
    parts, _, _ = _split(url)
    return strip_www(parts.hostname.lower())


def is_same_page(a: str, b: str) -> bool:
    try:
        return canonicalize(a) == canonicalize(b)
    except MalformedUrl:
        return False
