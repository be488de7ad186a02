# organic_store/main.py
from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from organic_store.core.config import get_settings
from organic_store.core.errors import AppError, InternalError
from organic_store.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from organic_store.models import user as _user_models  # noqa: F401
from organic_store.models import product as _product_models  # noqa: F401
from organic_store.models import cart as _cart_models  # noqa: F401
from organic_store.models import order as _order_models  # noqa: F401
from organic_store.models import wishlist as _wishlist_models  # noqa: F401

# Routers
from organic_store.routers.auth import router as auth_router
from organic_store.routers.products import router as products_router
from organic_store.routers.cart import router as cart_router
from organic_store.routers.orders import router as orders_router
from organic_store.routers.wishlist import router as wishlist_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.

    Shutdown:
      - No special cleanup needed for sync engine.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error envelope ---
# Every failure is returned as {"success": false, "message": ..., "error"?: ...}


def _error_response(status_code: int, message: str, error=None) -> JSONResponse:
    body = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return _error_response(exc.status_code, exc.message, exc.details)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = "Route not found"
    return _error_response(exc.status_code, message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return _error_response(status.HTTP_400_BAD_REQUEST, message, errors)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    err = InternalError(details=None if settings.is_production else str(exc))
    return _error_response(err.status_code, err.message, err.details)


# API routes live under /api
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(products_router, prefix=settings.API_PREFIX)
app.include_router(cart_router, prefix=settings.API_PREFIX)
app.include_router(orders_router, prefix=settings.API_PREFIX)
app.include_router(wishlist_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """Service banner."""
    return {"success": True, "message": f"{settings.PROJECT_NAME} is running"}


@app.get(f"{settings.API_PREFIX}/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "organic-store-backend"}


def run() -> None:
    """Entry point of the `organic-store` console script."""
    uvicorn.run(
        "organic_store.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
