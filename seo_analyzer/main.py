"""
SEO Growth Analyzer API: main entry point
Proxies analysis requests to the automation workflow and serves a local
heuristic report when asked (or when the workflow is down).
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from . import __version__
from .config import get_settings
from .exceptions import AnalysisError
from .middleware.rate_limit import RateLimitMiddleware
from .routers.analyze_router import router as analyze_router
from .utils.clock import now_iso
from .utils.logging import configure_logging

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(level=settings.log_level, json=settings.log_json)
    logger.info("SEO analyzer starting ({}), webhook={}", settings.environment, settings.webhook_url)
    if settings.local_fallback:
        logger.info("Local heuristic fallback enabled")
    yield
    logger.info("SEO analyzer stopped")


app = FastAPI(
    title="SEO Growth Analyzer API",
    description=(
        "Discover untapped keywords and content opportunities for a website.\n\n"
        "- Webhook-backed SEO analysis\n"
        "- Local heuristic scoring\n"
    ),
    version=__version__,
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
    lifespan=lifespan,
)

app.add_middleware(RateLimitMiddleware)

# Dev origins are only allowed outside production.
# Add EXTRA_ALLOWED_ORIGINS (comma-separated) for preview/staging URLs.
_dev_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]
_extra_origins = [o.strip() for o in settings.extra_allowed_origins.split(",") if o.strip()]

ALLOWED_ORIGINS = _extra_origins + (
    _dev_origins if settings.environment != "production" else []
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError):
    content = {"error": exc.message, "timestamp": now_iso()}
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = errors[0].get("msg", "Invalid request body") if errors else "Invalid request body"
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": detail, "timestamp": now_iso()},
    )


app.include_router(analyze_router)


@app.get("/", tags=["Health"])
async def root():
    return {"service": "SEO Growth Analyzer API", "version": __version__, "status": "running", "docs": "/docs"}


@app.api_route("/health", methods=["GET", "HEAD"], tags=["Health"])
async def health():
    return {
        "status": "ok",
        "environment": settings.environment,
        "webhook_configured": bool(settings.webhook_url),
        "local_fallback": settings.local_fallback,
    }
