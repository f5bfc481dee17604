# storefront/services/user_service.py
from sqlalchemy.orm import Session

from storefront.data.database import transaction
from storefront.data.models.user import UserModel
from storefront.domain.errors import AuthError, NotFoundError, ValidationError
from storefront.domain.schemas import UserCreate, UserLogin, UserRead, UserUpdate
from storefront.repos.user_repo import UserRepo
from storefront.utils.security import create_access_token, hash_password, verify_password
from storefront.utils.settings import JWT_EXPIRES_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    """
    Accounts: registration, login, profile.
    Rows with the password hash stay inside this service, callers only get UserRead.
    """

    def __init__(self, db: Session, jwt_secret: str, token_ttl: int = JWT_EXPIRES_SECONDS):
        self.db = db
        self.repo = UserRepo(db)
        self.jwt_secret = jwt_secret
        self.token_ttl = token_ttl

    def _issue_token(self, user: UserModel) -> str:
        return create_access_token(user.id, self.jwt_secret, self.token_ttl)

    def register(self, payload: UserCreate) -> tuple[str, UserRead]:
        email = payload.email.lower()

        with transaction(self.db):
            if self.repo.get_user_by_email(email):
                raise ValidationError("User already exists with this email try to login.")

            user = self.repo.create_user(
                UserModel(
                    name=payload.name,
                    email=email,
                    password_hash=hash_password(payload.password),
                )
            )

        logger.info(f"Registered user {user.id}")
        return self._issue_token(user), UserRead.model_validate(user)

    def login(self, payload: UserLogin) -> tuple[str, UserRead]:
        user = self.repo.get_user_by_email(payload.email.lower())

        #same message for unknown email and wrong password
        if not user or not verify_password(payload.password, user.password_hash):
            logger.warning(f"Failed login for {payload.email}")
            raise AuthError("Invalid credentials.")

        return self._issue_token(user), UserRead.model_validate(user)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found.")
        return UserRead.model_validate(user)

    def update_profile(self, user_id: int, payload: UserUpdate) -> UserRead:
        updates = payload.model_dump(exclude_unset=True, exclude_none=True)
        if not updates:
            raise ValidationError("No update information provided.")

        with transaction(self.db):
            user = self.repo.get_user(user_id)
            if not user:
                raise NotFoundError("User not found for update.")

            if "email" in updates:
                email = updates["email"].lower()
                other = self.repo.get_user_by_email(email)
                if other and other.id != user.id:
                    raise ValidationError("This email is already in use by another account.")
                user.email = email

            if "name" in updates:
                user.name = updates["name"]

            if "password" in updates:
                user.password_hash = hash_password(updates["password"])

        logger.info(f"Updated profile of user {user_id}: {sorted(updates)}")
        return UserRead.model_validate(user)
