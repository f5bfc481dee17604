# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
JWT_SECRET = os.getenv("JWT_SECRET", "")
JWT_EXPIRES_SECONDS = int(os.getenv("JWT_EXPIRES_SECONDS", 12 * 60 * 60))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))
CART_ITEM_MAX_QUANTITY = int(os.getenv("CART_ITEM_MAX_QUANTITY", 100))
PRODUCT_IMAGE_MAX_BYTES = int(os.getenv("PRODUCT_IMAGE_MAX_BYTES", 5 * 1024 * 1024))
SEARCH_INDEX_URL = os.getenv("SEARCH_INDEX_URL", "")
SEARCH_API_KEY = os.getenv("SEARCH_API_KEY", "")
SEARCH_NAMESPACE = os.getenv("SEARCH_NAMESPACE", "__default__")
SEARCH_TIMEOUT = int(os.getenv("SEARCH_TIMEOUT", 5))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


class ConfigError(RuntimeError):
    """Raised when the service cannot start with the current configuration."""


def validate_settings(jwt_secret: str | None) -> str:
    #token signing needs a secret, refuse to start without one
    if not jwt_secret:
        raise ConfigError(
            "JWT_SECRET is not defined. Set it in the environment or in .env before starting the API."
        )
    return jwt_secret
