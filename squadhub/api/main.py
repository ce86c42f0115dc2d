import logging

from django.conf import settings
from django.http import HttpRequest
from ninja import NinjaAPI
from ninja.errors import ValidationError

import squadhub
from squadhub.api.auth import JWTAuth
from squadhub.api.routers.availability import router as availability_router
from squadhub.api.routers.team_availability import router as team_availability_router
from squadhub.api.routers.tryouts import router as tryouts_router
from squadhub.core.exceptions import RateLimited
from squadhub.core.exceptions import ServiceError

logger = logging.getLogger(__name__)

# Create the API instance
api = NinjaAPI(
    title="SquadHub API",
    version=squadhub.__version__,
    description="Tryout scheduling, prospect pipeline and team availability",
    auth=JWTAuth(),
    docs_url="/docs/",
)


# Error handlers
@api.exception_handler(ServiceError)
def service_error_handler(request: HttpRequest, exc: ServiceError):
    body = {"error": exc.kind, "detail": exc.message}
    if exc.errors:
        body["errors"] = exc.errors
    response = api.create_response(request, body, status=exc.status_code)
    if isinstance(exc, RateLimited) and exc.retry_after:
        response["Retry-After"] = str(exc.retry_after)
    return response


@api.exception_handler(ValidationError)
def validation_error_handler(request: HttpRequest, exc: ValidationError):
    return api.create_response(
        request,
        {"error": "validation_error", "detail": "Invalid request", "errors": exc.errors},
        status=400,
    )


@api.exception_handler(Exception)
def generic_exception_handler(request: HttpRequest, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.path}")
    if settings.DEBUG:
        return api.create_response(
            request,
            {"error": "internal_error", "detail": str(exc)},
            status=500,
        )
    return api.create_response(
        request,
        {"error": "internal_error", "detail": "An unexpected error occurred"},
        status=500,
    )


# Add routers
api.add_router("/availability", availability_router, tags=["Availability links"])
api.add_router("/tryouts", tryouts_router, tags=["Tryouts"])
api.add_router("/team-availability", team_availability_router, tags=["Team availability"])


# Health check endpoint
@api.get("/health", auth=None, tags=["System"])
def health_check(request):
    return {"status": "healthy", "version": squadhub.__version__}
