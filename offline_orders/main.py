import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import config
from .database import SessionLocal, create_tables, init_engine
from .domain.catalog import Cafe24Client
from .domain.catalog import router as catalog_router
from .domain.coupons import router as coupons_router
from .domain.mappings import router as mappings_router
from .domain.mappings.repository import MAPPING_KIND, MappingSeedTarget
from .domain.orders import router as orders_router
from .domain.reference import router as reference_router
from .domain.reference.repository import REFERENCE_KINDS, build_reference_store
from .domain.tokens import TokenManager, TokenRepository
from .exceptions import ConfigError, NotFound, OfflineOrderError
from .services.seeding import seed_all

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        config.validate_settings()
    except ConfigError as e:
        logger.critical(f"❌ {e.message}")
        raise

    try:
        init_engine(config.DATABASE_URL)
        create_tables()
        logger.info("✅ Database connected")
    except SQLAlchemyError as e:
        logger.critical(f"❌ Database Connection Error: {e}")
        raise

    http_client = httpx.AsyncClient(timeout=config.CAFE24_HTTP_TIMEOUT)
    token_manager = TokenManager(
        mall_id=config.CAFE24_MALLID,
        client_id=config.CAFE24_CLIENT_ID,
        client_secret=config.CAFE24_CLIENT_SECRET,
        repository=TokenRepository(SessionLocal, config.TOKEN_ENCRYPTION_KEY),
        http_client=http_client,
    )
    token_manager.load(config.CAFE24_ACCESS_TOKEN, config.CAFE24_REFRESH_TOKEN)

    reference_store = build_reference_store(
        config.REFERENCE_STORAGE, SessionLocal, config.REFERENCE_DATA_DIR
    )

    app.state.session_factory = SessionLocal
    app.state.token_manager = token_manager
    app.state.reference_store = reference_store
    app.state.catalog_client = Cafe24Client(
        mall_id=config.CAFE24_MALLID,
        api_version=config.CAFE24_API_VERSION,
        token_manager=token_manager,
        http_client=http_client,
    )

    seed_targets = {kind: reference_store for kind in REFERENCE_KINDS}
    seed_targets[MAPPING_KIND] = MappingSeedTarget(SessionLocal)
    seed_all(seed_targets)

    logger.info(f"🚀 Server ready (port {config.PORT})")
    yield

    logger.info("Application shutting down...")
    await http_client.aclose()


app = FastAPI(title="Offline Order API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(OfflineOrderError)
async def offline_order_exception_handler(request: Request, exc: OfflineOrderError):
    """Uniform {success: false, message} body; server-side details stay in the log"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.message}")
        message = exc.public_message
    else:
        logger.warning(f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.message}")
        message = exc.message
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} - Error: {str(exc)}")
    return JSONResponse(status_code=500, content={"success": False, "message": "Server Error"})


# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Admin-Key"],
)

# Routes
app.include_router(catalog_router)
app.include_router(orders_router)
app.include_router(reference_router)
app.include_router(mappings_router)
app.include_router(coupons_router)


@app.get("/")
def root():
    return {"message": "Offline Order API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.get("/api/test/expire-token")
async def expire_token(request: Request):
    """Corrupt the in-memory access token to exercise the refresh path"""
    if not config.ENABLE_DEBUG_ROUTES:
        raise NotFound()
    request.app.state.token_manager.invalidate()
    logger.warning("⚠️ Access token corrupted for testing")
    return {"success": True, "message": "Token corrupted for testing"}
