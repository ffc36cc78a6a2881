from budget_manager.main import session_cookie_options
from tests.conftest import register


class TestAuth:
    def test_register_starts_session(self, client):
        user = register(client)
        assert user["email"] == "asha@example.com"
        assert "password" not in user

        response = client.get("/api/auth/me")
        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Asha"

    def test_register_rejects_duplicate_email(self, client):
        register(client)
        response = client.post(
            "/api/auth/register",
            json={"name": "Other", "email": "ASHA@example.com", "password": "secret123"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Email already registered."

    def test_register_rejects_bad_email(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Asha", "email": "not-an-email", "password": "secret123"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert body["errors"][0]["field"] == "email"

    def test_login_and_logout(self, client):
        register(client)
        client.post("/api/auth/logout")
        assert client.get("/api/auth/me").status_code == 401

        response = client.post("/api/auth/login", json={"email": "asha@example.com", "password": "secret123"})
        assert response.status_code == 200
        assert client.get("/api/auth/me").status_code == 200

    def test_login_wrong_password(self, client):
        register(client)
        client.post("/api/auth/logout")
        response = client.post("/api/auth/login", json={"email": "asha@example.com", "password": "wrong-pass"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password."

    def test_protected_routes_need_session(self, client):
        for path in ("/api/budgets", "/api/expenses", "/api/borrowings", "/api/lendings"):
            response = client.get(path)
            assert response.status_code == 401
            assert "message" in response.json()

    def test_health_is_public(self, client):
        assert client.get("/api/health").status_code == 200


class TestSessionCookie:
    def test_development_cookie_is_lax(self):
        assert session_cookie_options(production=False) == {"same_site": "lax", "https_only": False}

    def test_production_cookie_is_sent_cross_site(self):
        # SameSite=None is only honoured together with Secure
        assert session_cookie_options(production=True) == {"same_site": "none", "https_only": True}

    def test_register_sets_session_cookie(self, client):
        response = client.post(
            "/api/auth/register",
            json={"name": "Asha", "email": "asha@example.com", "password": "secret123"},
        )
        cookie = response.headers["set-cookie"].lower()
        assert "session=" in cookie
        assert "samesite=lax" in cookie

    def test_cross_site_preflight_allows_credentials(self, client):
        response = client.options(
            "/api/budgets",
            headers={"Origin": "https://app.vercel.app", "Access-Control-Request-Method": "GET"},
        )
        assert response.headers["access-control-allow-origin"] == "https://app.vercel.app"
        assert response.headers["access-control-allow-credentials"] == "true"
