"""
Middlewares and exception handlers for the FastAPI application.
Implements security headers, content-type validation, request correlation
and the uniform error envelope for malformed requests.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shared.config.settings import settings
from shared.infrastructure.correlation import CorrelationIdMiddleware
from shared.utils.exceptions import ValidationError
from shared.utils.result import Result, format_validation_error


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to all responses.

    Headers added:
    - X-Content-Type-Options: nosniff (prevent MIME sniffing)
    - X-Frame-Options: DENY (prevent clickjacking)
    - Referrer-Policy: strict-origin-when-cross-origin
    - Cache-Control: no-store (floor state is polled and must never be cached)
    - Strict-Transport-Security: production only
    """

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers.setdefault("Cache-Control", "no-store")
        if settings.environment == "production":
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
        return response


class ContentTypeValidationMiddleware(BaseHTTPMiddleware):
    """
    Validate Content-Type for requests with body.

    Ensures POST/PUT/PATCH requests with a body use application/json.
    Returns 415 Unsupported Media Type otherwise.
    """

    METHODS_WITH_BODY = {"POST", "PUT", "PATCH"}

    async def dispatch(self, request: Request, call_next):
        if request.method in self.METHODS_WITH_BODY:
            content_type = request.headers.get("content-type", "")
            if content_type and not content_type.startswith("application/json"):
                return JSONResponse(
                    status_code=415,
                    content={
                        "success": False,
                        "error": "Unsupported Media Type. Use application/json",
                        "code": "UNSUPPORTED_MEDIA_TYPE",
                    },
                )
        return await call_next(request)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed body, path or query: same envelope as a VALIDATION_ERROR result."""
    result = Result.fail(ValidationError(format_validation_error(exc), path=request.url.path))
    return JSONResponse(result.to_response(), status_code=result.status_code)


def register_middlewares(app: FastAPI) -> None:
    """
    Register middlewares and exception handlers on the FastAPI application.

    Order matters: middlewares are executed in reverse order of registration.
    Correlation runs first so every later log line carries the request id.
    """
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(ContentTypeValidationMiddleware)
    app.add_middleware(CorrelationIdMiddleware)
