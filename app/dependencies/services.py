"""
Dependency wiring for provider clients.

Each getter builds its client once from settings and reuses it; tests
replace the getters through app.dependency_overrides.
"""
from typing import Optional

from fastapi import Depends

from app.core.config import get_settings
from app.services.accounts import AccountService
from app.services.billing import BillingService
from app.services.generation_client import GenerationClient
from app.services.identity import GoogleTokenVerifier
from app.services.mailer import VerificationMailer

_billing: Optional[BillingService] = None
_mailer: Optional[VerificationMailer] = None
_token_verifier: Optional[GoogleTokenVerifier] = None
_generation_client: Optional[GenerationClient] = None


def get_billing_service() -> BillingService:
    global _billing
    if _billing is None:
        settings = get_settings()
        _billing = BillingService(
            api_key=settings.stripe_secret_key,
            amount=settings.payment_amount,
            currency=settings.payment_currency,
        )
    return _billing


def get_mailer() -> VerificationMailer:
    global _mailer
    if _mailer is None:
        settings = get_settings()
        _mailer = VerificationMailer(
            api_key=settings.resend_api_key,
            sender=settings.email_from,
            base_url=settings.verify_email_base_url,
        )
    return _mailer


def get_token_verifier() -> GoogleTokenVerifier:
    global _token_verifier
    if _token_verifier is None:
        _token_verifier = GoogleTokenVerifier.from_settings(get_settings())
    return _token_verifier


def get_generation_client() -> GenerationClient:
    global _generation_client
    if _generation_client is None:
        settings = get_settings()
        _generation_client = GenerationClient(
            base_url=settings.cliptune_api_url,
            timeout=settings.generation_timeout_seconds,
        )
    return _generation_client


def get_account_service(
    billing: BillingService = Depends(get_billing_service),
    mailer: VerificationMailer = Depends(get_mailer),
    token_verifier: GoogleTokenVerifier = Depends(get_token_verifier),
) -> AccountService:
    return AccountService(billing=billing, mailer=mailer, token_verifier=token_verifier)
