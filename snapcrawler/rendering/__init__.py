from snapcrawler.rendering.engine import PageRenderer
from snapcrawler.rendering.interception import (
    Decision,
    OutboundRequest,
    BlockResourceType,
    BlockDomain,
    default_interceptors,
    evaluate,
)
