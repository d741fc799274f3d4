"""AccountService paths the HTTP surface cannot reach on its own."""
import pytest

from app.core.errors import AuthenticationError, DuplicateAccountError
from app.models.account import Account
from app.services import accounts as accounts_module
from app.services.accounts import AccountService


@pytest.fixture
def service(billing, mailer, token_verifier):
    return AccountService(billing=billing, mailer=mailer, token_verifier=token_verifier)


def _store(db_session, email):
    db_session.add(Account(email=email, username="first", stripe_customer_id="cus_0"))
    db_session.commit()


def test_signup_losing_insert_race_is_duplicate(service, db_session, mailer, monkeypatch):
    _store(db_session, "race@x.com")
    # The other request inserted between our lookup and our commit
    monkeypatch.setattr(service, "find", lambda db, email: None)

    with pytest.raises(DuplicateAccountError) as exc:
        service.signup(db_session, "race@x.com", "pw")

    assert exc.value.status_code == 400
    assert exc.value.message == "Email already exists"
    assert mailer.sent == []
    rows = db_session.query(Account).filter(Account.email == "race@x.com").all()
    assert [row.username for row in rows] == ["first"]


def test_google_login_losing_insert_race_is_duplicate(service, db_session, token_verifier, monkeypatch):
    _store(db_session, "g@x.com")
    token_verifier.tokens["google-token"] = "g@x.com"
    monkeypatch.setattr(service, "find", lambda db, email: None)

    with pytest.raises(DuplicateAccountError):
        service.google_login(db_session, "google-token")

    assert db_session.query(Account).count() == 1


def test_login_unknown_email_still_runs_password_hash(service, db_session, monkeypatch):
    calls = []
    monkeypatch.setattr(accounts_module, "dummy_verify_password", lambda: calls.append(1))

    with pytest.raises(AuthenticationError) as exc:
        service.login(db_session, "ghost@x.com", "pw")

    assert exc.value.message == "Invalid credentials"
    assert calls == [1]


def test_login_google_only_account_still_runs_password_hash(service, db_session, monkeypatch):
    _store(db_session, "g@x.com")
    calls = []
    monkeypatch.setattr(accounts_module, "dummy_verify_password", lambda: calls.append(1))

    with pytest.raises(AuthenticationError):
        service.login(db_session, "g@x.com", "")

    assert calls == [1]
