import jwt
import pytest

from storefront.domain.errors import AuthError
from storefront.utils.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from storefront.utils.settings import ConfigError, validate_settings

SECRET = "unit-secret"


class TestPasswords:
    def test_hash_round_trip(self):
        hashed = hash_password("s3cret-password")

        assert hashed.startswith("$2b$")
        assert "s3cret-password" not in hashed
        assert verify_password("s3cret-password", hashed)
        assert not verify_password("wrong-password", hashed)

    def test_salted(self):
        assert hash_password("same-password") != hash_password("same-password")

    def test_malformed_hash(self):
        assert not verify_password("anything", "not-a-hash")

    def test_foreign_scheme_hash(self):
        assert not verify_password("anything", "pbkdf2_sha256$1000$abcd$ef01")


class TestTokens:
    def test_round_trip(self):
        token = create_access_token(42, SECRET, 60)

        assert decode_access_token(token, SECRET) == 42

    def test_expired(self):
        token = create_access_token(42, SECRET, -10)

        with pytest.raises(AuthError, match="Token expired."):
            decode_access_token(token, SECRET)

    def test_wrong_secret(self):
        token = create_access_token(42, SECRET, 60)

        with pytest.raises(AuthError, match="Invalid token."):
            decode_access_token(token, "another-secret")

    def test_payload_without_id(self):
        token = jwt.encode({"sub": "42"}, SECRET, algorithm="HS256")

        with pytest.raises(AuthError, match="Invalid token payload."):
            decode_access_token(token, SECRET)


class TestSettings:
    @pytest.mark.parametrize("secret", [None, ""])
    def test_missing_jwt_secret(self, secret):
        with pytest.raises(ConfigError, match="JWT_SECRET"):
            validate_settings(secret)

    def test_secret_passes_through(self):
        assert validate_settings("abc") == "abc"
