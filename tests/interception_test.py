import unittest
from unittest.mock import MagicMock

from snapcrawler.rendering.interception import (
    BlockDomain,
    BlockResourceType,
    Decision,
    OutboundRequest,
    default_interceptors,
    evaluate,
)


class TestInterceptors(unittest.TestCase):

    def test_non_visual_resources_denied(self):
        block = BlockResourceType()
        for resource_type in ("font", "media", "manifest", "other"):
            with self.subTest(resource_type=resource_type):
                self.assertIs(block(OutboundRequest("https://example.com/x", resource_type)), Decision.DENY)
        for resource_type in ("document", "stylesheet", "image", "script"):
            with self.subTest(resource_type=resource_type):
                self.assertIs(block(OutboundRequest("https://example.com/x", resource_type)), Decision.ALLOW)

    def test_blocked_domains_match_substrings(self):
        block = BlockDomain(["google-analytics.com", "facebook.com/tr"])
        self.assertIs(block(OutboundRequest("https://www.google-analytics.com/collect", "script")), Decision.DENY)
        self.assertIs(block(OutboundRequest("https://www.facebook.com/tr?id=1", "image")), Decision.DENY)
        self.assertIs(block(OutboundRequest("https://www.facebook.com/page", "document")), Decision.ALLOW)

    def test_default_chain(self):
        chain = default_interceptors()
        self.assertIs(evaluate(chain, OutboundRequest("https://example.com/", "document")), Decision.ALLOW)
        self.assertIs(evaluate(chain, OutboundRequest("https://fonts.gstatic.com/a.css", "stylesheet")), Decision.DENY)
        self.assertIs(evaluate(chain, OutboundRequest("https://example.com/a.woff2", "font")), Decision.DENY)

    def test_first_deny_wins_and_stops_chain(self):
        later = MagicMock(return_value=Decision.ALLOW)
        chain = (BlockResourceType(), later)
        self.assertIs(evaluate(chain, OutboundRequest("https://example.com/", "media")), Decision.DENY)
        later.assert_not_called()

    def test_empty_chain_allows(self):
        self.assertIs(evaluate((), OutboundRequest("https://example.com/", "font")), Decision.ALLOW)


if __name__ == "__main__":
    unittest.main()
