"""Tests for API endpoints."""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.testclient import TestClient

from occ_assistant.api.main import app
from occ_assistant.api.middleware import RateLimitMiddleware
from occ_assistant.memory.session_manager import unsign_session_id
from occ_assistant.utils.config import settings
from conftest import FakeOCC

CART_PAYLOAD = {
    "guid": "guid-1",
    "entries": [
        {
            "entryNumber": 0,
            "product": {"code": "1382080", "name": "EOS 450D"},
            "basePrice": {"value": 60.0, "formattedValue": "$60.00"},
            "quantity": 2,
            "totalPrice": {"formattedValue": "$120.00"},
        }
    ],
    "subTotal": {"value": 120.0, "formattedValue": "$120.00"},
    "totalTax": {"formattedValue": "$9.60"},
    "totalPrice": {"formattedValue": "$120.00"},
    "totalItems": 1,
}


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def _register(client, email="ada@example.com"):
    return client.post(
        "/api/auth/register",
        json={"email": email, "password": "s3cret", "firstName": "Ada", "lastName": "Lovelace"},
    )


def _stock_cart(fake: FakeOCC):
    fake.add("POST", "/users/anonymous/carts", json_body={"guid": "guid-1", "code": "00001"})
    fake.add("POST", "/users/anonymous/carts/guid-1/entries", json_body={"entry": {"entryNumber": 0}})
    fake.add("GET", "/users/anonymous/carts/guid-1", json_body=CART_PAYLOAD)


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] in ["healthy", "degraded", "unhealthy"]
    assert "embedding_cache" in data["checks"]


def test_session_cookie_is_issued(client):
    response = client.get("/api/health/liveness")
    assert settings.session_cookie_name in response.cookies


def test_forged_session_cookie_starts_new_session(client):
    client.cookies.set(settings.session_cookie_name, "forged-id.deadbeef")

    response = client.get("/api/health/liveness")

    issued = response.cookies[settings.session_cookie_name]
    assert issued != "forged-id.deadbeef"
    assert unsign_session_id(issued) is not None


def test_cors_wraps_all_other_middleware():
    assert app.user_middleware[0].cls is CORSMiddleware


def test_rate_limit_response_carries_cors_headers():
    limited = FastAPI()

    @limited.get("/ping")
    async def ping():
        return {"ok": True}

    limited.add_middleware(RateLimitMiddleware, calls=2, period=60)
    limited.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    test_client = TestClient(limited)
    headers = {"Origin": "http://shop.example"}

    assert test_client.get("/ping", headers=headers).status_code == 200
    assert test_client.get("/ping", headers=headers).status_code == 200
    response = test_client.get("/ping", headers=headers)

    assert response.status_code == 429
    assert response.json()["error"] == "Rate limit exceeded: 2 requests per 60 seconds"
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.parametrize("path,error", [
    ("/api/search", "Query is required"),
    ("/api/auth/register", "Email and password required"),
    ("/api/auth/login", "Email and password required"),
    ("/api/cart/add", "Product code and quantity required"),
])
def test_post_without_body_gets_route_message(client, path, error):
    response = client.post(path)

    assert response.status_code == 400
    assert response.json() == {"error": error}


class TestAuth:

    def test_register_login_me_logout(self, client):
        response = _register(client)
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"] == {"email": "ada@example.com", "firstName": "Ada", "lastName": "Lovelace"}

        me = client.get("/api/auth/me")
        assert me.status_code == 200
        assert me.json()["userId"] == data["userId"]

        assert client.get("/api/auth/logout").json() == {"success": True, "message": "Logged out"}
        assert client.get("/api/auth/me").status_code == 401

        login = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "s3cret"})
        assert login.status_code == 200
        assert login.json()["message"] == "Login successful"

    def test_register_requires_email_and_password(self, client):
        response = client.post("/api/auth/register", json={"email": "ada@example.com"})
        assert response.status_code == 400
        assert response.json() == {"error": "Email and password required"}

    def test_duplicate_registration(self, client):
        _register(client)
        response = _register(client)
        assert response.status_code == 409
        assert response.json()["error"] == "User already exists"

    def test_bad_credentials(self, client):
        _register(client)
        response = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "nope"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"


class TestProducts:

    def test_product_detail(self, client, fake_occ):
        fake_occ.add("GET", "/products/123", json_body={"code": "123", "name": "EOS"})

        response = client.get("/api/products/123")

        assert response.status_code == 200
        assert response.json()["name"] == "EOS"

    def test_product_detail_failure(self, client, fake_occ):
        response = client.get("/api/products/missing")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch product details"}

    def test_reviews(self, client, fake_occ):
        fake_occ.add("GET", "/products/123/reviews", json_body={"reviews": [{"rating": 4}, {"rating": 5}]})

        response = client.get("/api/products/123/reviews")

        assert response.json()["reviewsSummary"] == {"count": 2, "averageRating": 4.5}


class TestCart:

    def test_empty_cart_without_handle(self, client):
        assert client.get("/api/cart").json() == {"items": [], "total": 0, "guid": None}

    def test_add_creates_cart_once(self, client, fake_occ):
        _stock_cart(fake_occ)

        first = client.post("/api/cart/add", json={"productCode": "1382080", "quantity": 2})
        second = client.post("/api/cart/add", json={"productCode": "1382080", "quantity": 1})

        assert first.status_code == 200
        cart = first.json()["cart"]
        assert cart["guid"] == "guid-1"
        assert cart["items"] == [{
            "id": 0,
            "productCode": "1382080",
            "productName": "EOS 450D",
            "price": 60.0,
            "quantity": 2,
            "totalPrice": "$120.00",
        }]
        assert cart["total"] == 120.0
        assert second.status_code == 200
        assert len(fake_occ.calls("POST", "/users/anonymous/carts")) == 1
        assert client.get("/api/cart").json()["guid"] == "guid-1"

    def test_add_accepts_display_price_and_numeric_code(self, client, fake_occ):
        _stock_cart(fake_occ)

        response = client.post(
            "/api/cart/add",
            json={"productCode": 1382080, "productName": "EOS 450D", "price": "$60.00", "quantity": 1},
        )

        assert response.status_code == 200
        request = fake_occ.calls("POST", "/users/anonymous/carts/guid-1/entries")[0]
        assert FakeOCC.body(request) == {"product": {"code": "1382080"}, "quantity": 1}

    def test_add_requires_code_and_quantity(self, client):
        response = client.post("/api/cart/add", json={"productCode": "1382080"})
        assert response.status_code == 400
        assert response.json()["error"] == "Product code and quantity required"

    def test_add_failure_reports_platform_message(self, client, fake_occ):
        fake_occ.add("POST", "/users/anonymous/carts", json_body={"guid": "guid-1"})
        fake_occ.add(
            "POST",
            "/users/anonymous/carts/guid-1/entries",
            status_code=400,
            json_body={"errors": [{"message": "Product not found"}]},
        )

        response = client.post("/api/cart/add", json={"productCode": "nope", "quantity": 1})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to add item to cart", "details": "Product not found"}

    def test_remove_and_update_need_cart(self, client):
        assert client.post("/api/cart/remove", json={"itemId": 0}).json() == {"error": "No cart found"}
        assert client.post("/api/cart/update", json={"itemId": 0, "quantity": 3}).status_code == 400

    def test_update_and_remove(self, client, fake_occ):
        _stock_cart(fake_occ)
        fake_occ.add("PATCH", "/users/anonymous/carts/guid-1/entries/0", json_body={})
        fake_occ.add("DELETE", "/users/anonymous/carts/guid-1/entries/0")
        client.post("/api/cart/add", json={"productCode": "1382080", "quantity": 2})

        updated = client.post("/api/cart/update", json={"itemId": 0, "quantity": 3})
        removed = client.post("/api/cart/remove", json={"itemId": 0})

        assert updated.json()["message"] == "Cart updated"
        assert removed.json()["message"] == "Item removed from cart"
        patch_request = fake_occ.calls("PATCH", "/users/anonymous/carts/guid-1/entries/0")[0]
        assert FakeOCC.body(patch_request) == {"quantity": 3}

    def test_cart_fetch_failure_degrades_to_empty(self, client, fake_occ):
        _stock_cart(fake_occ)
        client.post("/api/cart/add", json={"productCode": "1382080", "quantity": 2})
        fake_occ.add("GET", "/users/anonymous/carts/guid-1", status_code=500)

        assert client.get("/api/cart").json() == {"items": [], "total": 0, "guid": None}


class TestSearch:

    def test_blank_query_rejected(self, client):
        response = client.post("/api/search", json={"query": "   "})
        assert response.status_code == 400
        assert response.json() == {"error": "Query is required"}

    def test_runs_agent(self, client):
        agent = MagicMock()
        agent.run = AsyncMock(return_value={"response": "Hi", "searched": False, "products": []})

        with patch("occ_assistant.api.routes.search.get_shopping_agent", return_value=agent):
            response = client.post("/api/search", json={"query": "hello"})

        assert response.status_code == 200
        assert response.json()["response"] == "Hi"
        agent.run.assert_awaited_once_with("hello")

    def test_agent_crash_returns_500(self, client):
        agent = MagicMock()
        agent.run = AsyncMock(side_effect=RuntimeError("boom"))

        with patch("occ_assistant.api.routes.search.get_shopping_agent", return_value=agent):
            response = client.post("/api/search", json={"query": "hello"})

        assert response.status_code == 500
        assert response.json() == {
            "error": "boom",
            "response": "An error occurred while processing your request",
        }


class TestOrders:

    def test_requires_authentication(self, client):
        response = client.get("/api/orders")
        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required"}

    def test_empty_cart_rejected(self, client):
        _register(client)
        response = client.post(
            "/api/orders/create",
            json={"shippingAddress": {"line1": "1 Main St"}, "billingAddress": {"line1": "1 Main St"}},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Cart is empty"

    def test_addresses_required(self, client, fake_occ):
        _stock_cart(fake_occ)
        _register(client)
        client.post("/api/cart/add", json={"productCode": "1382080", "quantity": 2})

        response = client.post("/api/orders/create", json={"shippingAddress": {"line1": "x"}})

        assert response.status_code == 400
        assert response.json()["error"] == "Shipping and billing addresses required"

    def test_checkout_flow(self, client, fake_occ):
        _stock_cart(fake_occ)
        _register(client)
        client.post("/api/cart/add", json={"productCode": "1382080", "quantity": 2})

        response = client.post(
            "/api/orders/create",
            json={
                "shippingAddress": {"line1": "1 Main St"},
                "billingAddress": {"line1": "1 Main St"},
                "paymentMethod": "card",
            },
        )

        assert response.status_code == 200
        data = response.json()
        order = data["order"]
        assert data["orderId"] == order["id"] == "ORD-1001"
        assert order["subtotal"] == 120.0
        assert order["tax"] == 9.6
        assert order["shipping"] == 0
        assert order["total"] == pytest.approx(129.6)
        assert order["userName"] == "Ada Lovelace"
        assert order["status"] == "PENDING"

        # Cart handle is consumed by the order
        assert client.get("/api/cart").json()["guid"] is None

        assert client.get(f"/api/orders/{order['id']}").json()["id"] == order["id"]
        listing = client.get("/api/orders").json()
        assert listing["total"] == 1

    def test_other_users_orders_are_forbidden(self, client, fake_occ):
        _stock_cart(fake_occ)
        _register(client)
        client.post("/api/cart/add", json={"productCode": "1382080", "quantity": 2})
        order_id = client.post(
            "/api/orders/create",
            json={"shippingAddress": {"a": 1}, "billingAddress": {"a": 1}},
        ).json()["orderId"]

        client.get("/api/auth/logout")
        _register(client, email="bob@example.com")

        assert client.get(f"/api/orders/{order_id}").status_code == 403
        assert client.get("/api/orders/ORD-9999").status_code == 404
