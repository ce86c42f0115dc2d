"""
Fixed-window attempt limiter backed by the Django cache.

Used to slow down brute-force guessing of availability tokens. Counting is
per key (typically the client address), not per token.
"""

import hashlib
import logging

from django.core.cache import cache

from squadhub.core.exceptions import RateLimited

logger = logging.getLogger(__name__)


def _cache_key(scope, identifier):
    digest = hashlib.sha256(str(identifier).encode()).hexdigest()[:32]
    return f"ratelimit:{scope}:{digest}"


def hit(scope, identifier, limit, window):
    """Record one attempt and return how many are left in the current window.

    Raises ``RateLimited`` once ``limit`` attempts were made within ``window``
    seconds.
    """
    key = _cache_key(scope, identifier)
    if cache.add(key, 1, timeout=window):
        count = 1
    else:
        try:
            count = cache.incr(key)
        except ValueError:
            # Key expired between add() and incr()
            cache.set(key, 1, timeout=window)
            count = 1

    if count > limit:
        logger.warning(f"Rate limit exceeded for {scope} ({count}/{limit})")
        raise RateLimited(retry_after=window)

    return limit - count


def reset(scope, identifier):
    cache.delete(_cache_key(scope, identifier))
