import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings

# Configure logging
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    s = get_settings()
    key_present = bool(s.provider_api_key().strip())
    logger.info(
        "moderation gate starting: environment=%s provider=%s key_present=%s timeout_s=%s",
        s.ENVIRONMENT, s.PROVIDER, key_present, s.GENERATION_TIMEOUT_S,
    )
    if not key_present:
        logger.warning("No API key configured for provider %s; generative stage will report upstream unavailable", s.PROVIDER)
    yield


# Initialize FastAPI app with lifespan
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Youth-safety moderation gate for chat and video text",
    version=settings.VERSION,
    debug=settings.DEBUG,
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

# Set up CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# Health check endpoint
@app.get(f"{settings.API_PREFIX}/health")
async def health_check():
    return {
        "status": "healthy",
        "service": get_settings().PROJECT_NAME,
        "environment": get_settings().ENVIRONMENT,
    }


# Import and include routers
from .api.v1.routers import moderate  # noqa: E402

# API v1 routes
app.include_router(moderate.router, prefix=f"{settings.API_PREFIX}/v1", tags=["moderation"])


# Error handlers
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request, exc):
    details = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        details.append(f"{loc}: {err.get('msg', 'invalid')}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Expected {type, text}", "details": details},
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )
