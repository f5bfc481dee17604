from fastapi import APIRouter, Request
from sqlalchemy.exc import SQLAlchemyError

from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    try:
        request.app.state.database.ping()
        database = "ok"
    except SQLAlchemyError as e:
        logger.error(f"Health check: database unreachable: {e}")
        database = "unavailable"
    return {"status": "ok", "database": database}
