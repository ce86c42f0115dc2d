from .base import *  # noqa: F403

DEBUG = True
SECRET_KEY = "local-insecure-secret-key"
JWT_SECRET_KEY = SECRET_KEY
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"]  # noqa: S104

LOGGING["loggers"]["squadhub"]["level"] = "DEBUG"  # noqa: F405
