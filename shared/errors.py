"""
Error taxonomy shared by every service.

Services raise these; the handlers registered by ``register_exception_handlers``
turn them into ``{"error": message}`` JSON responses at the request boundary.
"""
import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.config.settings import IS_PRODUCTION

logger = structlog.get_logger(__name__)


class StorefrontError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Something went wrong!"
    headers: dict | None = None

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid input"


class DuplicateEmail(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "User with this email already exists"


class AuthenticationError(StorefrontError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Could not validate credentials"
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidCredentials(AuthenticationError):
    message = "Invalid email or password"


class MissingToken(AuthenticationError):
    message = "Access token required"


class InvalidOrExpiredToken(AuthenticationError):
    message = "Invalid or expired token"


class Forbidden(StorefrontError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "You do not have permission to perform this action"


class NotFound(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class ProductNotFound(NotFound):
    message = "Product not found"


class LineNotFound(NotFound):
    message = "Item not found in cart"


class OrderNotFound(NotFound):
    message = "Order not found"


class UserNotFound(NotFound):
    message = "User not found"


class ConcurrentModification(StorefrontError):
    status_code = status.HTTP_409_CONFLICT
    message = "The resource was modified concurrently, please retry"


class BusinessRuleViolation(StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST


class EmptyCart(BusinessRuleViolation):
    message = "Cart is empty"


class OutOfStock(BusinessRuleViolation):
    message = "Not enough stock available"


class InsufficientStock(BusinessRuleViolation):
    message = "Insufficient stock"


def _error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    logger.info(
        "request_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        status_code=exc.status_code,
    )
    return _error_response(exc.status_code, exc.message, exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        details.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", "invalid"))
    return _error_response(status.HTTP_400_BAD_REQUEST, "; ".join(details) or ValidationError.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("rate_limit_exceeded", path=request.url.path, limit=str(exc.detail))
    return _error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        "Too many requests, please try again later.",
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path)
    message = "Something went wrong!" if IS_PRODUCTION else str(exc)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
