# storefront/utils/security.py
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from storefront.domain.errors import AuthError
from storefront.utils.settings import BCRYPT_ROUNDS

_ALGORITHM = "HS256"

password_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return password_ctx.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return password_ctx.verify(password, password_hash)
    except ValueError:
        #hash not produced by password_ctx
        return False


def create_access_token(user_id: int, secret: str, expires_seconds: int) -> str:
    payload = {
        "id": user_id,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_seconds),
    }
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)


def decode_access_token(token: str, secret: str) -> int:
    """
    Returns the user id carried by the token.
    Raises AuthError with the message the API sends back.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthError("Token expired.")
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token.")

    user_id = payload.get("id")
    #bool is an int subclass
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise AuthError("Invalid token payload.")
    return user_id
