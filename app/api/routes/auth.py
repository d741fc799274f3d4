import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from app.core.errors import AppError, AuthenticationError, ServerError
from app.db.session import get_db
from app.dependencies.services import get_account_service
from app.schemas.auth import (
    GoogleLoginRequest,
    GoogleLoginResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SignupRequest,
)
from app.services.accounts import AccountService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup", response_model=MessageResponse)
def signup(
    request: SignupRequest,
    db: Session = Depends(get_db),
    accounts: AccountService = Depends(get_account_service),
):
    """
    Register with email + password. Creates the Stripe customer and sends
    the verification email. Passing paymentIntentId starts on Premium.
    """
    try:
        accounts.signup(db, request.email, request.password, request.payment_intent_id)
    except AppError as e:
        if e.status_code < 500:
            raise
        logger.error("Signup error for %s: %s", request.email, e.message)
        raise ServerError("Signup error") from e
    except Exception as e:
        logger.exception("Signup error for %s: %s", request.email, e)
        raise ServerError("Signup error") from e

    return {"message": "Signup successful, please verify your email"}


@router.get("/verify-email", response_class=PlainTextResponse)
def verify_email(
    token: str = Query(""),
    email: str = Query(""),
    db: Session = Depends(get_db),
    accounts: AccountService = Depends(get_account_service),
):
    """Target of the emailed link; answers in plain text for the browser."""
    email = email.strip()
    try:
        accounts.verify_email(db, email, token)
    except AppError as e:
        if e.status_code < 500:
            return PlainTextResponse(e.message, status_code=e.status_code)
        return PlainTextResponse("Verification error.", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception as e:
        logger.exception("Verification error for %s: %s", email, e)
        return PlainTextResponse("Verification error.", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return PlainTextResponse("Email verified successfully!")


@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
    accounts: AccountService = Depends(get_account_service),
):
    try:
        account = accounts.login(db, request.email, request.password)
    except AuthenticationError:
        raise
    except Exception as e:
        logger.exception("Login error for %s: %s", request.email, e)
        raise ServerError("Login error") from e

    return {"message": "Login successful", "email": account.email}


@router.post("/google-login", response_model=GoogleLoginResponse)
def google_login(
    request: GoogleLoginRequest,
    db: Session = Depends(get_db),
    accounts: AccountService = Depends(get_account_service),
):
    """Sign in with a Google ID token; first sign-in creates the account."""
    try:
        account, is_new_user = accounts.google_login(db, request.token)
    except Exception as e:
        logger.warning("Google login failed: %s", e)
        raise AuthenticationError("Google login failed") from e

    return {
        "message": "Google login successful",
        "email": account.email,
        "isNewUser": is_new_user,
    }
