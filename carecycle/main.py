import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from . import config
from . import models  # noqa: F401
from . import realtime  # noqa: F401  (registers the session change listeners)
from .auth import require_api_token
from .database import Base, SessionLocal, engine, get_db
from .domain.care_items import router as care_items_router
from .domain.dashboard import router as dashboard_router
from .domain.items import router as items_router
from .domain.notifications import router as notifications_router
from .domain.patients import router as patients_router
from .domain.schedules import router as schedules_router
from .errors import create_error_response, get_status_code_from_error, is_database_error
from .security_headers import SecurityHeadersMiddleware
from .seed import seed_default_data

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
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")

    if config.SEED_DEFAULT_DATA:
        db = SessionLocal()
        try:
            seed_default_data(db)
        except Exception as e:
            db.rollback()
            logger.error(f"Failed to seed default data: {e}")
        finally:
            db.close()

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="CareCycle API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors from HTTPBearer to 401 authentication errors
    when the issue is with the Authorization header
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return JSONResponse(
                status_code=401,
                content={
                    "detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header."
                },
            )

    # ctx may hold exception objects, which are not JSON serializable
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    logger.warning(f"Validation error for {request.url.path}: {errors}")
    return JSONResponse(status_code=422, content={"detail": errors})


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    return create_error_response(exc, status_code=409, custom_message="Conflict with existing data")


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    return create_error_response(
        exc, status_code=get_status_code_from_error(exc), custom_message="Database error"
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    status_code = get_status_code_from_error(exc) if is_database_error(exc) else 500
    return create_error_response(exc, status_code=status_code, custom_message="Internal server error")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


if config.SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/redoc", "/openapi.json"]
    )
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {config.ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(patients_router)
app.include_router(items_router)
app.include_router(care_items_router)
app.include_router(schedules_router)
app.include_router(dashboard_router)
app.include_router(notifications_router)


@app.get("/")
def root():
    return {"message": "CareCycle API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.get("/api/test-connection", dependencies=[Depends(require_api_token)])
def test_connection(db: Session = Depends(get_db)):
    """Database round trip plus which optional settings are configured"""
    try:
        db.execute(text("SELECT 1"))
        database_ok = True
    except SQLAlchemyError as e:
        logger.error(f"Connection test failed: {e}")
        database_ok = False

    return JSONResponse(
        status_code=200 if database_ok else 503,
        content={
            "success": database_ok,
            "database": "connected" if database_ok else "unavailable",
            "environment": config.ENVIRONMENT,
            "config": {
                "apiTokenConfigured": bool(config.API_TOKEN),
                "redisUrlConfigured": bool(config.REDIS_URL),
                "cacheEnabled": config.CACHE_ENABLED,
            },
        },
    )
