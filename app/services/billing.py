"""
Stripe billing adapter.
Creates customers and payment intents and checks for a saved card.
The service keeps its own API key so tests can build it with a dummy one.
"""
import logging
from typing import Optional

import stripe

from app.core.errors import BillingError, PaymentIntentError

logger = logging.getLogger(__name__)


class BillingService:
    def __init__(self, api_key: str, amount: int = 1000, currency: str = "usd"):
        self.api_key = api_key
        self.amount = amount
        self.currency = currency

    def create_customer(self, email: str) -> str:
        """Create a Stripe customer for the email and return its id."""
        try:
            customer = stripe.Customer.create(email=email, api_key=self.api_key)
        except stripe.StripeError as e:
            logger.error("Stripe error creating customer for %s: %s", email, e)
            raise BillingError(f"Failed to create billing customer: {e}") from e
        logger.info("Created Stripe customer %s for %s", customer.id, email)
        return customer.id

    def create_payment_intent(self) -> str:
        """Create a fixed-amount payment intent and return its client secret."""
        try:
            intent = stripe.PaymentIntent.create(
                amount=self.amount,
                currency=self.currency,
                automatic_payment_methods={"enabled": True},
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error("Stripe error creating payment intent: %s", e)
            raise PaymentIntentError(getattr(e, "user_message", None) or str(e)) from e
        logger.info("Created payment intent %s", intent.id)
        return intent.client_secret

    def has_default_payment_method(self, customer_id: str) -> bool:
        try:
            customer = stripe.Customer.retrieve(customer_id, api_key=self.api_key)
        except stripe.StripeError as e:
            logger.error("Stripe error retrieving customer %s: %s", customer_id, e)
            raise BillingError(f"Failed to retrieve billing customer: {e}") from e

        # Deleted customers come back without invoice_settings
        invoice_settings = getattr(customer, "invoice_settings", None)
        default_method: Optional[str] = (
            getattr(invoice_settings, "default_payment_method", None) if invoice_settings else None
        )
        return bool(default_method)
