"""
With these settings, tests run faster.
"""

from .base import *  # noqa: F403

SECRET_KEY = "test-secret-key"
JWT_SECRET_KEY = SECRET_KEY
TEST_RUNNER = "django.test.runner.DiscoverRunner"

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

DATABASES["default"] = {  # noqa: F405
    "ENGINE": "django.db.backends.sqlite3",
    "NAME": ":memory:",
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "squadhub-test",
    },
}

SITE_URL = "http://testserver"
TRYOUTS_TOKEN_TTL_DAYS = None
TRYOUTS_RESOLVE_RATE_LIMIT = 1000

LOGGING["loggers"]["squadhub"]["level"] = "WARNING"  # noqa: F405
