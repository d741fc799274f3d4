import secrets

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

VERIFICATION_TOKEN_BYTES = 32


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def dummy_verify_password() -> None:
    """Spend one bcrypt verify so a missing account costs the same as a bad password."""
    pwd_context.dummy_verify()


def generate_verification_token() -> str:
    """Random hex token for the email verification link (64 chars)."""
    return secrets.token_hex(VERIFICATION_TOKEN_BYTES)


def username_from_email(email: str) -> str:
    return email.split("@")[0]
