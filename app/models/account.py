import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from app.db.base import Base


class SubscriptionTier(str, enum.Enum):
    FREE = "Free"
    PREMIUM = "Premium"


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, nullable=True)
    hashed_password = Column(String, nullable=True)  # NULL for Google-only accounts
    stripe_customer_id = Column(String, nullable=True)
    is_verified = Column(Boolean, default=False, nullable=False)
    verification_token = Column(String, nullable=True)  # Cleared once verified
    last_payment_intent_id = Column(String, nullable=True)
    subscription_tier = Column(String, default=SubscriptionTier.FREE.value, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
