# storefront/api/deps.py
from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import AuthError
from storefront.repos.user_repo import UserRepo
from storefront.utils.security import decode_access_token


def get_current_user(
    request: Request,
    authorization: str | None = Header(None),
    db: Session = Depends(get_db),
) -> UserModel:
    """Resolve the bearer token to a user row, 401 on anything wrong."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Access denied. No token provided.")

    token = authorization[len("Bearer "):].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Access denied. Token missing.")

    try:
        user_id = decode_access_token(token, request.app.state.jwt_secret)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))

    user = UserRepo(db).get_user(user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found for the provided token.")
    return user


def get_search_client(request: Request):
    return request.app.state.search_client
