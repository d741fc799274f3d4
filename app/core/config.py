"""
Environment-backed settings for the ClipTune backend.
Values come from the process environment or a local .env file.
"""
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGINS = ",".join([
    "http://localhost:3000",
    "http://localhost:3001",
    "http://localhost:5173",
    "https://yumu2-91939.web.app",
    "https://yumu2-91939.firebaseapp.com",
])


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Database
    database_url: str = Field(default="sqlite:///./cliptune.db", alias="DATABASE_URL")

    # Stripe
    stripe_secret_key: str = Field(default="", alias="STRIPE_SECRET_KEY")
    payment_amount: int = Field(default=1000, alias="PAYMENT_AMOUNT")  # minor units
    payment_currency: str = Field(default="usd", alias="PAYMENT_CURRENCY")

    # Email (Resend)
    resend_api_key: str = Field(default="", alias="RESEND_API_KEY")
    email_from: str = Field(default="AI App <noreply@cliptune.app>", alias="EMAIL_FROM")
    verify_email_base_url: str = Field(
        default="https://yumu2-91939.web.app", alias="VERIFY_EMAIL_BASE_URL"
    )

    # Google / Firebase sign-in
    google_client_id: str = Field(default="", alias="GOOGLE_CLIENT_ID")
    firebase_project_id: str = Field(default="", alias="FIREBASE_PROJECT_ID")

    # ClipTune generation service
    cliptune_api_url: str = Field(default="https://cliptune.replit.app", alias="CLIPTUNE_API_URL")
    generation_timeout_seconds: int = Field(default=1800, alias="GENERATION_TIMEOUT_SECONDS")

    # HTTP server
    cors_origins: str = Field(default=DEFAULT_CORS_ORIGINS, alias="CORS_ORIGINS")
    host: str = Field(default="localhost", alias="HOST")
    port: int = Field(default=3001, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def sqlalchemy_database_url(self) -> str:
        # Render/Heroku style URLs use the old scheme name
        url = self.database_url
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://"):]
        return url

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


settings = get_settings()
