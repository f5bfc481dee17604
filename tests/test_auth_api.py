import pytest

from storefront.main import create_app
from storefront.utils.settings import ConfigError


def _register(client, email="jamie@storefront.dev", password="s3cret-password", name="Jamie"):
    return client.post("/api/auth/register", json={"name": name, "email": email, "password": password})


class TestRegister:
    def test_register(self, client):
        resp = _register(client)

        assert resp.status_code == 201
        body = resp.json()
        assert body["token"]
        assert body["user"]["email"] == "jamie@storefront.dev"
        assert "createdAt" in body["user"]
        assert "passwordHash" not in body["user"]
        assert "password" not in body["user"]

    def test_email_is_normalized(self, client):
        resp = _register(client, email="Jamie@Storefront.DEV")

        assert resp.json()["user"]["email"] == "jamie@storefront.dev"

    def test_duplicate_email(self, client):
        _register(client)

        resp = _register(client, email="JAMIE@storefront.dev")

        assert resp.status_code == 400
        assert resp.json() == {"message": "User already exists with this email try to login."}

    @pytest.mark.parametrize(
        "body",
        [
            {"name": "Jamie", "email": "not-an-email", "password": "s3cret-password"},
            {"name": "Jamie", "email": "jamie@storefront.dev", "password": "short"},
            {"name": "<b>Jamie</b>", "email": "jamie@storefront.dev", "password": "s3cret-password"},
            {"email": "jamie@storefront.dev", "password": "s3cret-password"},
        ],
    )
    def test_invalid_body(self, client, body):
        resp = client.post("/api/auth/register", json=body)

        assert resp.status_code == 400
        assert resp.json()["errors"]


class TestLogin:
    def test_login(self, client, user, password):
        resp = client.post("/api/auth/login", json={"email": user.email, "password": password})

        assert resp.status_code == 200
        assert resp.json()["user"]["id"] == user.id

        profile = client.get(
            "/api/auth/profile",
            headers={"Authorization": f"Bearer {resp.json()['token']}"},
        )
        assert profile.json()["user"]["email"] == user.email

    def test_wrong_password(self, client, user):
        resp = client.post("/api/auth/login", json={"email": user.email, "password": "wrong-password"})

        assert resp.status_code == 401
        assert resp.json() == {"message": "Invalid credentials."}

    def test_unknown_email(self, client, password):
        resp = client.post("/api/auth/login", json={"email": "nobody@storefront.dev", "password": password})

        assert resp.status_code == 401
        assert resp.json() == {"message": "Invalid credentials."}


class TestAuthGuard:
    def test_no_header(self, client):
        resp = client.get("/api/auth/profile")

        assert resp.status_code == 401
        assert resp.json() == {"message": "Access denied. No token provided."}

    def test_not_bearer(self, client):
        resp = client.get("/api/auth/profile", headers={"Authorization": "Basic abc"})

        assert resp.status_code == 401

    def test_garbage_token(self, client):
        resp = client.get("/api/auth/profile", headers={"Authorization": "Bearer garbage"})

        assert resp.status_code == 401
        assert resp.json() == {"message": "Invalid token."}

    def test_expired_token(self, client, user, auth_headers):
        resp = client.get("/api/auth/profile", headers=auth_headers(user, expires_seconds=-30))

        assert resp.status_code == 401
        assert resp.json() == {"message": "Token expired."}

    def test_token_of_deleted_user(self, client, user, auth_headers, db):
        headers = auth_headers(user)
        db.delete(user)
        db.commit()

        resp = client.get("/api/auth/profile", headers=headers)

        assert resp.status_code == 401
        assert resp.json() == {"message": "User not found for the provided token."}


class TestProfile:
    def test_get_profile(self, client, user, auth_headers):
        resp = client.get("/api/auth/profile", headers=auth_headers(user))

        assert resp.status_code == 200
        assert resp.json()["user"] == {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "createdAt": resp.json()["user"]["createdAt"],
        }

    def test_update_name(self, client, user, auth_headers):
        resp = client.put("/api/auth/profile", json={"name": "Renamed"}, headers=auth_headers(user))

        assert resp.status_code == 200
        assert resp.json()["user"]["name"] == "Renamed"

    def test_update_password(self, client, user, password, auth_headers):
        client.put("/api/auth/profile", json={"password": "another-password"}, headers=auth_headers(user))

        old = client.post("/api/auth/login", json={"email": user.email, "password": password})
        new = client.post("/api/auth/login", json={"email": user.email, "password": "another-password"})
        assert old.status_code == 401
        assert new.status_code == 200

    def test_empty_update(self, client, user, auth_headers):
        resp = client.put("/api/auth/profile", json={}, headers=auth_headers(user))

        assert resp.status_code == 400
        assert resp.json() == {"message": "No update information provided."}

    def test_email_taken(self, client, user, other_user, auth_headers):
        resp = client.put("/api/auth/profile", json={"email": other_user.email}, headers=auth_headers(user))

        assert resp.status_code == 400
        assert resp.json() == {"message": "This email is already in use by another account."}

    def test_keep_own_email(self, client, user, auth_headers):
        resp = client.put("/api/auth/profile", json={"email": user.email}, headers=auth_headers(user))

        assert resp.status_code == 200


class TestStartup:
    def test_missing_jwt_secret(self, database):
        with pytest.raises(ConfigError):
            create_app(database=database, jwt_secret="")

    def test_health(self, client):
        resp = client.get("/api/health")

        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "database": "ok"}
