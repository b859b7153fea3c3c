import unittest

from snapcrawler.policy import ScopePolicy


class TestScopePolicy(unittest.TestCase):
    def setUp(self):
        self.policy = ScopePolicy(["privacy", "Terms"])

    def test_same_host_allowed(self):
        self.assertTrue(self.policy.is_eligible("https://example.com/about", "example.com"))
        self.assertTrue(self.policy.is_eligible("https://www.example.com/about", "example.com"))

    def test_other_hosts_blocked(self):
        self.assertFalse(self.policy.is_eligible("https://blog.example.com/", "example.com"))
        self.assertFalse(self.policy.is_eligible("https://example.org/", "example.com"))

    def test_keywords_in_path_blocked_case_insensitively(self):
        self.assertFalse(self.policy.is_eligible("https://example.com/privacy-policy", "example.com"))
        self.assertFalse(self.policy.is_eligible("https://example.com/legal/TERMS", "example.com"))

    def test_keywords_in_query_ignored(self):
        self.assertTrue(self.policy.is_eligible("https://example.com/search?q=privacy", "example.com"))

    def test_keywords_in_host_blocked(self):
        policy = ScopePolicy(["privacy"])
        self.assertFalse(policy.is_eligible("https://privacy.example.com/", "privacy.example.com"))

    def test_eval_reasons_and_stats(self):
        self.assertEqual(self.policy.eval("https://example.com/", "example.com"), (True, "allowed"))
        self.assertEqual(self.policy.eval("https://other.com/", "example.com"), (False, "blocked_off_host"))
        self.assertEqual(self.policy.eval("https://example.com/privacy", "example.com"), (False, "blocked_keyword"))
        self.assertEqual(self.policy.eval("mailto:x@example.com", "example.com"), (False, "blocked_malformed"))
        stats = self.policy.get_stats()
        self.assertEqual(stats["evaluations"], 4)
        self.assertEqual(stats["allowed"], 1)

    def test_default_keywords_cover_policy_pages(self):
        policy = ScopePolicy()
        self.assertEqual(policy.matched_keyword("https://example.com/privacy-policy"), "privacy")
        self.assertIsNone(policy.matched_keyword("https://example.com/about"))


if __name__ == "__main__":
    unittest.main()
