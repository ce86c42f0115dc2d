from django.core.cache import cache
from django.test import SimpleTestCase

from squadhub.core import ratelimit
from squadhub.core.exceptions import RateLimited


class RateLimitTest(SimpleTestCase):
    def setUp(self):
        cache.clear()

    def test_counts_down_then_raises(self):
        self.assertEqual(ratelimit.hit("test", "10.0.0.1", limit=2, window=60), 1)
        self.assertEqual(ratelimit.hit("test", "10.0.0.1", limit=2, window=60), 0)
        with self.assertRaises(RateLimited) as context:
            ratelimit.hit("test", "10.0.0.1", limit=2, window=60)
        self.assertEqual(context.exception.status_code, 429)
        self.assertEqual(context.exception.retry_after, 60)

    def test_keys_are_independent(self):
        ratelimit.hit("test", "10.0.0.1", limit=1, window=60)
        self.assertEqual(ratelimit.hit("test", "10.0.0.2", limit=1, window=60), 0)
        self.assertEqual(ratelimit.hit("other", "10.0.0.1", limit=1, window=60), 0)

    def test_reset(self):
        ratelimit.hit("test", "10.0.0.1", limit=1, window=60)
        ratelimit.reset("test", "10.0.0.1")
        self.assertEqual(ratelimit.hit("test", "10.0.0.1", limit=1, window=60), 0)
