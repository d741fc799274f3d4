import pytest


@pytest.fixture
def account(client):
    client.post("/signup", json={"email": "a@x.com", "password": "pw"})


def test_upgrade_then_payment_status_is_premium(client, account):
    response = client.post("/upgrade-to-premium", json={"email": "a@x.com"})
    assert response.status_code == 200
    assert response.json() == {"message": "User upgraded to Premium"}

    response = client.post("/check-payment-status", json={"email": "a@x.com"})
    assert response.status_code == 200
    assert response.json() == {"accountType": "Premium"}


def test_new_account_is_free(client, account):
    response = client.post("/check-payment-status", json={"email": "a@x.com"})
    assert response.json() == {"accountType": "Free"}


@pytest.mark.parametrize("path", [
    "/check-payment-status",
    "/upgrade-to-premium",
    "/cancel-premium",
    "/get-user",
])
def test_unknown_email_is_404(client, path):
    response = client.post(path, json={"email": "ghost@x.com"})
    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}


def test_complete_checkout_is_idempotent(client, account, get_account):
    for _ in range(2):
        response = client.post(
            "/complete-checkout",
            json={"email": "a@x.com", "paymentIntentId": "pi_42"},
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Checkout completed successfully. Account is now Premium."}
        stored = get_account("a@x.com")
        assert stored.subscription_tier == "Premium"
        assert stored.last_payment_intent_id == "pi_42"


def test_complete_checkout_unknown_email(client):
    response = client.post("/complete-checkout", json={"email": "ghost@x.com", "paymentIntentId": "pi_1"})
    assert response.status_code == 404
    assert response.json() == {"message": "User not found."}


def test_complete_checkout_requires_payment_intent(client, account):
    response = client.post("/complete-checkout", json={"email": "a@x.com"})
    assert response.status_code == 400


@pytest.mark.parametrize("prepare", [None, "/upgrade-to-premium", "checkout"])
def test_cancel_premium_always_downgrades(client, account, get_account, prepare):
    if prepare == "checkout":
        client.post("/complete-checkout", json={"email": "a@x.com", "paymentIntentId": "pi_7"})
    elif prepare:
        client.post(prepare, json={"email": "a@x.com"})

    response = client.post("/cancel-premium", json={"email": "a@x.com"})

    assert response.status_code == 200
    assert response.json() == {"message": "Subscription cancelled, user downgraded to Free."}
    stored = get_account("a@x.com")
    assert stored.subscription_tier == "Free"
    assert stored.last_payment_intent_id is None


def test_create_payment_intent_returns_client_secret(client, billing):
    response = client.post("/create-payment-intent")

    assert response.status_code == 200
    assert response.json() == {"clientSecret": "pi_1_secret_abc"}


def test_create_payment_intent_provider_error_is_400(client, billing):
    billing.payment_error = "Invalid API Key provided"

    response = client.post("/create-payment-intent")

    assert response.status_code == 400
    assert response.json() == {"error": {"message": "Invalid API Key provided"}}


def test_check_credit_card(client, account, billing):
    response = client.post("/check-credit-card", json={"email": "a@x.com"})
    assert response.status_code == 200
    assert response.json() == {"hasCreditCard": False}

    billing.default_methods["cus_1"] = True
    response = client.post("/check-credit-card", json={"email": "a@x.com"})
    assert response.json() == {"hasCreditCard": True}


def test_check_credit_card_without_customer(client, account, db_session, get_account):
    stored = get_account("a@x.com")
    stored.stripe_customer_id = None
    db_session.commit()

    response = client.post("/check-credit-card", json={"email": "a@x.com"})

    assert response.status_code == 404
    assert response.json() == {"message": "User or Stripe customer not found"}


def test_check_credit_card_provider_failure(client, account, billing, monkeypatch):
    from app.core.errors import BillingError

    def boom(customer_id):
        raise BillingError("network down")

    monkeypatch.setattr(billing, "has_default_payment_method", boom)

    response = client.post("/check-credit-card", json={"email": "a@x.com"})

    assert response.status_code == 500
    assert response.json() == {"message": "Failed to check credit card status"}


def test_missing_email_is_input_error(client):
    response = client.post("/upgrade-to-premium", json={})
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request"
