import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from waitlist_api.api.api import api_router
from waitlist_api.core.config import settings
from waitlist_api.services.storage import get_storage
from waitlist_api.utils.audit import configure_audit_logger

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Configure audit logger (JSON lines)
configure_audit_logger()

api_description = """
## Landing page waitlist

Public endpoints behind the landing page signup form.

- `POST /api/waitlist` - Join the waitlist
- `GET /api/waitlist/count` - Number of signups so far
- `POST /api/waitlist/confirm/{token}` - Confirm an email address
- `POST /api/waitlist/resend-confirmation` - Issue a new confirmation token
"""

app = FastAPI(
    title="Waitlist API",
    description=api_description,
    version="1.0.0",
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc"
)

# GZip compression for large JSON responses
app.add_middleware(GZipMiddleware, minimum_size=500)

# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg") if errors else "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


# Include API router
app.include_router(api_router, prefix="/api")


# --- Storage backend is chosen once, at startup ---
@app.on_event("startup")
def select_storage_on_startup():
    storage = get_storage()
    logger.info(f"Storage ready: {type(storage).__name__}")


@app.get("/")
async def root():
    return {"message": "Waitlist API is running"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
