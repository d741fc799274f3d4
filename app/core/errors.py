"""
Application errors and the FastAPI handlers that render them.

Services raise AppError subclasses; routes let them propagate and the
handlers registered in app.main turn them into JSON bodies. Clients only
ever see a `message` (or `error`) field plus the HTTP status.
"""
import logging
from typing import Any, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"message": self.message}


class InputError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class DuplicateAccountError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Email already exists"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class ServerError(AppError):
    pass


class ProviderError(AppError):
    """A third-party collaborator (Stripe, Resend, Google, ClipTune) failed."""
    default_message = "Upstream provider error"


class BillingError(ProviderError):
    default_message = "Billing provider error"


class NotificationError(ProviderError):
    default_message = "Failed to send email"


class IdentityError(ProviderError):
    """The identity token could not be verified."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid identity token"


class PaymentIntentError(BillingError):
    status_code = status.HTTP_400_BAD_REQUEST

    def to_body(self) -> dict:
        return {"error": {"message": self.message}}


class GenerationError(ProviderError):
    default_message = "Music generation failed"

    def __init__(self, details: Any = None, message: Optional[str] = None):
        super().__init__(message)
        self.details = details

    def to_body(self) -> dict:
        return {"error": self.message, "details": self.details}


class NoUploadError(InputError):
    default_message = "No video uploaded."

    def to_body(self) -> dict:
        return {"error": self.message}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in err.get("loc", ())[1:]), "message": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request", "errors": errors},
    )
