# storefront/domain/errors.py


class NotFoundError(LookupError):
    """Entity does not exist or is not owned by the caller."""


class ValidationError(ValueError):
    """Input is well-formed but breaks a business rule (stock, ownership of referenced rows)."""


class OrderStateError(ValueError):
    """Operation is not allowed in the order's current status."""


class AuthError(Exception):
    """Credentials or token rejected."""


class SearchUnavailableError(RuntimeError):
    """No search backend configured."""
