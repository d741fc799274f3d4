"""
Pytest configuration for the ClipTune backend tests.
Provider clients are replaced with in-memory fakes and the database with
an in-memory SQLite engine shared across threads.
"""
import os

# Must be set before any app imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["RESEND_API_KEY"] = ""
os.environ["GOOGLE_CLIENT_ID"] = ""
os.environ["FIREBASE_PROJECT_ID"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.errors import BillingError, GenerationError, IdentityError, NotificationError, PaymentIntentError
from app.db.base import Base
from app.db.session import get_db
from app.dependencies.services import (
    get_billing_service,
    get_generation_client,
    get_mailer,
    get_token_verifier,
)
from app.main import app
from app.models.account import Account
from app.services.generation_client import UploadTicket


class FakeBilling:
    def __init__(self):
        self.customers = []
        self.default_methods = {}
        self.fail_customers = False
        self.payment_error = None
        self.intents_created = 0

    def create_customer(self, email):
        if self.fail_customers:
            raise BillingError("stripe is down")
        customer_id = f"cus_{len(self.customers) + 1}"
        self.customers.append((customer_id, email))
        return customer_id

    def create_payment_intent(self):
        if self.payment_error:
            raise PaymentIntentError(self.payment_error)
        self.intents_created += 1
        return f"pi_{self.intents_created}_secret_abc"

    def has_default_payment_method(self, customer_id):
        return self.default_methods.get(customer_id, False)


class FakeMailer:
    def __init__(self):
        self.sent = []
        self.fail = False

    def send_verification_email(self, to_email, token):
        if self.fail:
            raise NotificationError("relay rejected the message")
        self.sent.append((to_email, token))


class FakeTokenVerifier:
    def __init__(self):
        self.tokens = {}

    def verify(self, token):
        if token not in self.tokens:
            raise IdentityError("Invalid identity token")
        return self.tokens[token]


class FakeGenerationClient:
    def __init__(self):
        self.calls = []
        self.uploaded = None
        self.result = {"status": "ok", "audio_url": "https://cdn.example/track.mp3"}
        self.fail_step = None

    def request_upload_ticket(self):
        self.calls.append("ticket")
        if self.fail_step == "ticket":
            raise GenerationError({"error": "quota exceeded"})
        return UploadTicket(put_url="https://storage.example/put?sig=1", content_uri="gs://bucket/video.mp4")

    def upload(self, ticket, stream, content_type):
        self.calls.append("upload")
        if self.fail_step == "upload":
            raise GenerationError("403 Forbidden")
        self.uploaded = (ticket, stream.read(), content_type)

    def submit_generation_job(self, content_uri, params):
        self.calls.append("generate")
        if self.fail_step == "generate":
            raise GenerationError({"error": "model crashed"})
        self.submitted = (content_uri, params)
        return self.result


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def billing():
    return FakeBilling()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def token_verifier():
    return FakeTokenVerifier()


@pytest.fixture
def generation_client():
    return FakeGenerationClient()


@pytest.fixture
def client(db_session, billing, mailer, token_verifier, generation_client):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_billing_service] = lambda: billing
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_token_verifier] = lambda: token_verifier
    app.dependency_overrides[get_generation_client] = lambda: generation_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def get_account(db_session):
    def _get(email):
        db_session.expire_all()
        return db_session.query(Account).filter(Account.email == email).first()
    return _get


@pytest.fixture
def verified_account(client, mailer, get_account):
    """Sign up a@x.com / pw and follow the emailed verification link."""
    client.post("/signup", json={"email": "a@x.com", "password": "pw"})
    _, token = mailer.sent[-1]
    client.get("/verify-email", params={"token": token, "email": "a@x.com"})
    return get_account("a@x.com")
