import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.errors import AppError, ServerError
from app.db.session import get_db
from app.dependencies.services import get_account_service
from app.schemas.auth import EmailRequest, UserResponse
from app.services.accounts import AccountService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/get-user", response_model=UserResponse)
def get_user(
    request: EmailRequest,
    db: Session = Depends(get_db),
    accounts: AccountService = Depends(get_account_service),
):
    """Get the display name for an account"""
    try:
        account = accounts.get_user(db, request.email)
    except AppError:
        raise
    except Exception as e:
        logger.exception("Failed to fetch user %s: %s", request.email, e)
        raise ServerError("Failed to fetch user") from e

    return {"username": account.username, "email": account.email}
