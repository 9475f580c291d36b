import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Import models so every table is registered with Base before create_all
from . import models  # noqa: F401
from .config import ALLOWED_ORIGINS, ENVIRONMENT, SECURITY_HEADERS_ENABLED
from .database import Base, engine
from .domain.admin.router import router as admin_router
from .domain.admin.router import visits_router
from .domain.catalog.router import router as catalog_router
from .domain.directory.router import router as directory_router
from .domain.messaging.router import router as messaging_router
from .domain.notifications.router import router as notifications_router
from .domain.profiles.router import router as profiles_router
from .domain.reviews.router import router as reviews_router
from .routes.geocoding import router as geocoding_router
from .security_headers import SecurityHeadersMiddleware
from .shared.exceptions import DomainError

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
    logger.info(f"Application starting up ({ENVIRONMENT})...")
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

    from .rate_limiter import get_redis_client

    if get_redis_client() is not None:
        logger.info("Redis connection established")
    else:
        logger.info("Running without Redis - rate limits are per process")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Beauty Directory API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Same {"message": ...} body shape as domain errors"""
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


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
                    "message": "Not authenticated. Please provide a valid Bearer token in the Authorization header."
                },
            )

    # For other validation errors, return 422 as normal
    errors = exc.errors()
    logger.warning(f"Validation error for {request.url.path}: {errors}")
    first = errors[0] if errors else {}
    return JSONResponse(
        status_code=422,
        content={
            "message": first.get("msg", "Invalid request"),
            "field": ".".join(str(part) for part in first.get("loc", [])[1:]) or None,
            "detail": jsonable_errors(errors),
        },
    )


def jsonable_errors(errors) -> list:
    """Pydantic error dicts can carry exception objects in ``ctx``"""
    return [{key: value for key, value in error.items() if key != "ctx"} for error in errors]


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"]
    )
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

# Log CORS configuration for debugging
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Token-Expired", "Retry-After"],
)

# Routes
# Directory before profiles: /api/profiles/map must not reach /api/profiles/{profile_id}
app.include_router(directory_router)
app.include_router(profiles_router)
app.include_router(catalog_router)
app.include_router(reviews_router)
app.include_router(messaging_router)
app.include_router(notifications_router)
app.include_router(admin_router)
app.include_router(visits_router)
app.include_router(geocoding_router)


@app.get("/")
def root():
    return {"message": "Beauty Directory API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
