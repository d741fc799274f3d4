"""
Account and subscription state machine shared by every endpoint.

One method per operation, one commit per method. Collaborators (Stripe,
email, identity tokens) are injected so routes stay thin and tests can
swap in fakes. Concurrent writes to the same account are last-writer-wins.
"""
import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    AuthenticationError,
    DuplicateAccountError,
    InputError,
    NotFoundError,
)
from app.models.account import Account, SubscriptionTier
from app.services.billing import BillingService
from app.services.identity import GoogleTokenVerifier
from app.services.mailer import VerificationMailer
from app.utils.auth import (
    dummy_verify_password,
    generate_verification_token,
    hash_password,
    username_from_email,
    verify_password,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
VERIFY_FIRST = "Please verify your email"


class AccountService:
    def __init__(
        self,
        billing: BillingService,
        mailer: VerificationMailer,
        token_verifier: GoogleTokenVerifier,
    ):
        self.billing = billing
        self.mailer = mailer
        self.token_verifier = token_verifier

    # -- store access -----------------------------------------------------

    def find(self, db: Session, email: str) -> Optional[Account]:
        return db.query(Account).filter(Account.email == email).first()

    def require(self, db: Session, email: str, message: str = "User not found") -> Account:
        account = self.find(db, email)
        if not account:
            raise NotFoundError(message)
        return account

    def _insert(self, db: Session, account: Account) -> Account:
        db.add(account)
        try:
            db.commit()
        except IntegrityError as e:
            # Unique email constraint: another request created it first
            db.rollback()
            raise DuplicateAccountError() from e
        db.refresh(account)
        return account

    # -- identity ---------------------------------------------------------

    def signup(self, db: Session, email: str, password: str, payment_intent_id: Optional[str] = None) -> Account:
        """
        Create a password account and send the verification email.
        A supplied payment intent id starts the account on Premium.
        If the email fails to send, the account is already stored.
        """
        if self.find(db, email):
            raise DuplicateAccountError()

        customer_id = self.billing.create_customer(email)
        token = generate_verification_token()
        account = self._insert(db, Account(
            username=username_from_email(email),
            email=email,
            hashed_password=hash_password(password),
            stripe_customer_id=customer_id,
            verification_token=token,
            is_verified=False,
            subscription_tier=(SubscriptionTier.PREMIUM if payment_intent_id else SubscriptionTier.FREE).value,
            last_payment_intent_id=payment_intent_id or None,
        ))
        logger.info("Created account %s (tier=%s)", email, account.subscription_tier)

        self.mailer.send_verification_email(email, token)
        return account

    def verify_email(self, db: Session, email: str, token: str) -> Account:
        if not email or not token:
            raise InputError("Invalid token or email.")
        account = db.query(Account).filter(
            Account.email == email,
            Account.verification_token == token,
        ).first()
        if not account:
            raise InputError("Invalid token or email.")

        account.is_verified = True
        account.verification_token = None
        db.commit()
        logger.info("Verified email for %s", email)
        return account

    def login(self, db: Session, email: str, password: str) -> Account:
        """
        Unknown email and wrong password give the same error. An unverified
        account is reported as such before the password is checked.
        """
        account = self.find(db, email)
        if not account or not account.hashed_password:
            dummy_verify_password()
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not account.is_verified:
            raise AuthenticationError(VERIFY_FIRST)
        if not verify_password(password, account.hashed_password):
            raise AuthenticationError(INVALID_CREDENTIALS)
        return account

    def google_login(self, db: Session, token: str) -> Tuple[Account, bool]:
        """Verify a Google ID token; create a verified Free account on first sight."""
        email = self.token_verifier.verify(token)

        account = self.find(db, email)
        if account:
            return account, False

        customer_id = self.billing.create_customer(email)
        account = self._insert(db, Account(
            email=email,
            username=username_from_email(email),
            stripe_customer_id=customer_id,
            is_verified=True,
            subscription_tier=SubscriptionTier.FREE.value,
        ))
        logger.info("Created account %s via Google sign-in", email)
        return account, True

    def get_user(self, db: Session, email: str) -> Account:
        return self.require(db, email)

    # -- billing ----------------------------------------------------------

    def get_subscription_tier(self, db: Session, email: str) -> str:
        return self.require(db, email).subscription_tier

    def create_payment_intent(self) -> str:
        return self.billing.create_payment_intent()

    def complete_checkout(self, db: Session, email: str, payment_intent_id: str) -> Account:
        account = self.require(db, email, "User not found.")
        account.last_payment_intent_id = payment_intent_id
        account.subscription_tier = SubscriptionTier.PREMIUM.value
        db.commit()
        logger.info("Checkout completed for %s (payment intent %s)", email, payment_intent_id)
        return account

    def has_credit_card(self, db: Session, email: str) -> bool:
        account = self.find(db, email)
        if not account or not account.stripe_customer_id:
            raise NotFoundError("User or Stripe customer not found")
        return self.billing.has_default_payment_method(account.stripe_customer_id)

    def upgrade_to_premium(self, db: Session, email: str) -> Account:
        account = self.require(db, email)
        account.subscription_tier = SubscriptionTier.PREMIUM.value
        db.commit()
        logger.info("Upgraded %s to Premium", email)
        return account

    def cancel_premium(self, db: Session, email: str) -> Account:
        # No Stripe subscription exists to cancel; the tier is local state
        account = self.require(db, email)
        account.subscription_tier = SubscriptionTier.FREE.value
        account.last_payment_intent_id = None
        db.commit()
        logger.info("Cancelled Premium for %s", email)
        return account
