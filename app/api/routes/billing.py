"""
Billing Routes
Account tier (Free/Premium) tracking and Stripe payment intents.
Tier changes are recorded locally; there are no Stripe subscriptions.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.errors import AppError, PaymentIntentError, ServerError
from app.db.session import get_db
from app.dependencies.services import get_account_service
from app.schemas.auth import CompleteCheckoutRequest, EmailRequest, MessageResponse
from app.schemas.billing import ClientSecretResponse, CreditCardResponse, PaymentStatusResponse
from app.services.accounts import AccountService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/check-payment-status", response_model=PaymentStatusResponse)
def check_payment_status(
    request: EmailRequest,
    db: Session = Depends(get_db),
    accounts: AccountService = Depends(get_account_service),
):
    try:
        tier = accounts.get_subscription_tier(db, request.email)
    except AppError:
        raise
    except Exception as e:
        logger.exception("Error checking payment status for %s: %s", request.email, e)
        raise ServerError("Server error while checking account status.") from e

    return {"accountType": tier}


@router.post("/create-payment-intent", response_model=ClientSecretResponse)
def create_payment_intent(accounts: AccountService = Depends(get_account_service)):
    """
    Create a fixed-amount Stripe PaymentIntent.
    The frontend confirms it with the returned client secret.
    """
    try:
        client_secret = accounts.create_payment_intent()
    except AppError:
        raise
    except Exception as e:
        logger.exception("Error creating payment intent: %s", e)
        raise PaymentIntentError(str(e)) from e

    return {"clientSecret": client_secret}


@router.post("/complete-checkout", response_model=MessageResponse)
def complete_checkout(
    request: CompleteCheckoutRequest,
    db: Session = Depends(get_db),
    accounts: AccountService = Depends(get_account_service),
):
    try:
        accounts.complete_checkout(db, request.email, request.payment_intent_id)
    except AppError:
        raise
    except Exception as e:
        logger.exception("Error completing checkout for %s: %s", request.email, e)
        raise ServerError("Server error while updating account.") from e

    return {"message": "Checkout completed successfully. Account is now Premium."}


@router.post("/check-credit-card", response_model=CreditCardResponse)
def check_credit_card(
    request: EmailRequest,
    db: Session = Depends(get_db),
    accounts: AccountService = Depends(get_account_service),
):
    """Whether the Stripe customer has a default payment method saved."""
    try:
        has_card = accounts.has_credit_card(db, request.email)
    except AppError as e:
        if e.status_code < 500:
            raise
        raise ServerError("Failed to check credit card status") from e
    except Exception as e:
        logger.exception("Error checking credit card for %s: %s", request.email, e)
        raise ServerError("Failed to check credit card status") from e

    return {"hasCreditCard": has_card}


@router.post("/upgrade-to-premium", response_model=MessageResponse)
def upgrade_to_premium(
    request: EmailRequest,
    db: Session = Depends(get_db),
    accounts: AccountService = Depends(get_account_service),
):
    try:
        accounts.upgrade_to_premium(db, request.email)
    except AppError:
        raise
    except Exception as e:
        logger.exception("Upgrade error for %s: %s", request.email, e)
        raise ServerError("Failed to upgrade user") from e

    return {"message": "User upgraded to Premium"}


@router.post("/cancel-premium", response_model=MessageResponse)
def cancel_premium(
    request: EmailRequest,
    db: Session = Depends(get_db),
    accounts: AccountService = Depends(get_account_service),
):
    try:
        accounts.cancel_premium(db, request.email)
    except AppError:
        raise
    except Exception as e:
        logger.exception("Error cancelling subscription for %s: %s", request.email, e)
        raise ServerError("Failed to cancel subscription.") from e

    return {"message": "Subscription cancelled, user downgraded to Free."}
