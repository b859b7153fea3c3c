"""
Outbound request interception for the renderer.

Interceptors are plain predicates evaluated in order for every request the
page makes. The first DENY wins; a request nobody denies is allowed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Sequence

from snapcrawler.core import BLOCKED_DOMAINS

# Resource classes that never affect the screenshot
NON_VISUAL_RESOURCE_TYPES = ("font", "media", "manifest", "other")


class Decision(Enum):
    ALLOW = "allow"
    DENY = "deny"


@dataclass(frozen=True)
class OutboundRequest:
    url: str
    resource_type: str


Interceptor = Callable[[OutboundRequest], Decision]


class BlockResourceType:
    def __init__(self, resource_types: Iterable[str] = NON_VISUAL_RESOURCE_TYPES):
        self.resource_types = frozenset(resource_types)

    def __call__(self, request: OutboundRequest) -> Decision:
        if request.resource_type in self.resource_types:
            return Decision.DENY
        return Decision.ALLOW


class BlockDomain:
    """Substring match so path-scoped entries like 'facebook.com/tr' work."""

    def __init__(self, domains: Iterable[str] = None):
        self.domains = tuple(BLOCKED_DOMAINS if domains is None else domains)

    def __call__(self, request: OutboundRequest) -> Decision:
        url = request.url.lower()
        if any(domain in url for domain in self.domains):
            return Decision.DENY
        return Decision.ALLOW


def default_interceptors() -> Sequence[Interceptor]:
    return (BlockResourceType(), BlockDomain())


def evaluate(interceptors: Sequence[Interceptor], request: OutboundRequest) -> Decision:
    for interceptor in interceptors:
        if interceptor(request) is Decision.DENY:
            return Decision.DENY
    return Decision.ALLOW
