import logging

from app.core.config import settings

uvicorn_logger = logging.getLogger("uvicorn")

app_logger = logging.getLogger("app")
app_logger.setLevel(settings.LOG_LEVEL.upper())
if uvicorn_logger.handlers:
    app_logger.handlers = uvicorn_logger.handlers
    app_logger.propagate = False

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from app.api.v1.auth import router as auth_router
from app.core.headers import SecurityHeadersMiddleware
from app.core.rate_limiting import limiter, rate_limit_exceeded_handler

logger = logging.getLogger(__name__)
logger.info("Application startup - logging configured")


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Account registration for the trading platform",
    version="1.0.0",
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_middleware(SecurityHeadersMiddleware)

app.include_router(auth_router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )
