from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional


def _check_email(value: str) -> str:
    value = (value or "").strip()
    if not value or "@" not in value:
        raise ValueError("Invalid email format.")
    return value


class EmailRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)


class SignupRequest(EmailRequest):
    model_config = ConfigDict(populate_by_name=True)

    password: str = Field(min_length=1)
    payment_intent_id: Optional[str] = Field(default=None, alias="paymentIntentId")


class LoginRequest(EmailRequest):
    password: str


class GoogleLoginRequest(BaseModel):
    token: str = Field(min_length=1)


class CompleteCheckoutRequest(EmailRequest):
    model_config = ConfigDict(populate_by_name=True)

    payment_intent_id: str = Field(alias="paymentIntentId")


class MessageResponse(BaseModel):
    message: str


class LoginResponse(BaseModel):
    message: str
    email: str


class GoogleLoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    email: str
    is_new_user: bool = Field(alias="isNewUser")


class UserResponse(BaseModel):
    username: Optional[str] = None
    email: str
