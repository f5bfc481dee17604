# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import AuthError, NotFoundError, ValidationError
from storefront.domain.schemas import AuthOut, ProfileOut, UserCreate, UserLogin, UserRead, UserUpdate
from storefront.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


def get_service(request: Request, db: Session):
    return UserService(db, jwt_secret=request.app.state.jwt_secret)


@router.post("/register", response_model=AuthOut, status_code=201)
def register(payload: UserCreate, request: Request, db: Session = Depends(get_db)):
    svc = get_service(request, db)
    try:
        token, user = svc.register(payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AuthOut(message="User registered successfully", token=token, user=user)


@router.post("/login", response_model=AuthOut)
def login(payload: UserLogin, request: Request, db: Session = Depends(get_db)):
    svc = get_service(request, db)
    try:
        token, user = svc.login(payload)
    except AuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return AuthOut(message="Login successful", token=token, user=user)


@router.get("/profile", response_model=ProfileOut)
def get_profile(user: UserModel = Depends(get_current_user)):
    return ProfileOut(message="Profile fetched successfully", user=UserRead.model_validate(user))


@router.put("/profile", response_model=ProfileOut)
def update_profile(
    payload: UserUpdate,
    request: Request,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(request, db)
    try:
        updated = svc.update_profile(user.id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ProfileOut(message="Profile updated successfully", user=updated)
