# storefront/main.py
import os

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.api.routers import addresses, auth, cart, health, orders, products
from storefront.data.database import Database
from storefront.services.search_client import SearchClient
from storefront.utils.logging import get_logger
from storefront.utils.settings import CORS_ORIGINS, DATABASE_URL, JWT_SECRET, validate_settings

logger = get_logger(__name__)

API_PREFIX = "/api"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"msg": err["msg"], "loc": list(err["loc"]), "type": err["type"]}
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"errors": errors})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"message": "Something went wrong"})


def create_app(
    database: Database | None = None,
    jwt_secret: str | None = None,
    search_client: SearchClient | None = None,
) -> FastAPI:
    #fail at startup, not on the first authenticated request
    secret = validate_settings(jwt_secret if jwt_secret is not None else JWT_SECRET)

    database = database or Database(DATABASE_URL)
    database.create_all()

    app = FastAPI(
        title="Storefront API",
        version="1.0.0",
    )

    app.state.database = database
    app.state.jwt_secret = secret
    app.state.search_client = search_client if search_client is not None else SearchClient()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router, prefix=API_PREFIX)
    app.include_router(auth.router, prefix=API_PREFIX)
    app.include_router(products.router, prefix=API_PREFIX)
    app.include_router(cart.router, prefix=API_PREFIX)
    app.include_router(orders.router, prefix=API_PREFIX)
    app.include_router(addresses.router, prefix=API_PREFIX)

    logger.info(f"Storefront API ready, database {database.engine.url.render_as_string(hide_password=True)}")
    return app


def main() -> None:
    uvicorn.run(
        create_app(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 8000)),
    )


if __name__ == "__main__":
    main()
