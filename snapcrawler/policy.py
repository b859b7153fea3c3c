"""
Scope policy deciding which canonical URLs a job may visit.

A URL is eligible when it lives on the seed's host (after www-stripping) and
neither its host nor its path contains an excluded keyword, which keeps
policy-and-terms style pages out of the snapshot set.
"""

from typing import Dict, Iterable, Tuple
from urllib.parse import urlsplit

from snapcrawler.core import EXCLUDED_KEYWORDS
from snapcrawler.errors import MalformedUrl
from snapcrawler.url_utils import canonical_host


class ScopePolicy:
    """
    Methods:
    - matched_keyword(url): first excluded keyword found in host or path, or None
    - is_eligible(url, seed_host): single gate used by the supervisor
    - eval(url, seed_host): (allowed, reason), updates counters
    """

    def __init__(self, exclusion_keywords: Iterable[str] = None):
        keywords = EXCLUDED_KEYWORDS if exclusion_keywords is None else exclusion_keywords
        self.exclusion_keywords = tuple(k.lower() for k in keywords if k)
        self._stats: Dict[str, int] = {
            "evaluations": 0,
            "allowed": 0,
            "blocked_malformed": 0,
            "blocked_off_host": 0,
            "blocked_keyword": 0,
        }

    def matched_keyword(self, url: str):
        parts = urlsplit(url)
        haystack = f"{(parts.hostname or '').lower()} {parts.path.lower()}"
        for keyword in self.exclusion_keywords:
            if keyword in haystack:
                return keyword
        return None

    def is_eligible(self, url: str, seed_host: str) -> bool:
        allowed, _ = self.eval(url, seed_host)
        return allowed

    def eval(self, url: str, seed_host: str) -> Tuple[bool, str]:
        """
        Evaluate a URL and return (allowed, reason), reason being one of the
        stats keys. Always updates counters exactly once per call.
        """
        self._stats["evaluations"] += 1
        try:
            host = canonical_host(url)
        except MalformedUrl:
            self._stats["blocked_malformed"] += 1
            return False, "blocked_malformed"
        if host != seed_host:
            self._stats["blocked_off_host"] += 1
            return False, "blocked_off_host"
        if self.matched_keyword(url):
            self._stats["blocked_keyword"] += 1
            return False, "blocked_keyword"
        self._stats["allowed"] += 1
        return True, "allowed"

    def get_stats(self) -> Dict[str, int]:
        return dict(self._stats)
