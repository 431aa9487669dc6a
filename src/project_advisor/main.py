"""
Project Advisor FastAPI application.

Lifespan for client init; async-first.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from project_advisor.api.v1.analytics import router as analytics_router
from project_advisor.config import get_settings

settings = get_settings()

# Ensure project_advisor loggers (e.g. fallback warnings) show in uvicorn output
_pa_log = logging.getLogger("project_advisor")
_pa_log.setLevel(settings.log_level.upper())
if not _pa_log.handlers:
    _h = logging.StreamHandler()
    _h.setFormatter(logging.Formatter("%(levelname)s:     %(name)s - %(message)s"))
    _pa_log.addHandler(_h)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Report advisory mode at startup."""
    if settings.advisory_configured:
        logger.info("Advisory service enabled (model=%s)", settings.advisory_model)
    else:
        logger.info("Advisory service not configured; local fallback rules only")
    yield


app = FastAPI(
    title="Project Advisor API",
    description="Project metrics, risk insights, schedule optimization and task suggestions",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Ensure error responses include proper JSON and CORS headers."""
    logger.exception("Unhandled error on %s", request.url.path)
    origin = request.headers.get("origin", "*")
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "type": type(exc).__name__},
        headers={
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": "*",
        },
    )


if settings.cors_allow_all:
    origins: list[str] = ["*"]
    credentials = False
else:
    origins = list(settings.cors_origins_list)
    credentials = True

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analytics_router, prefix="/api/v1/analytics", tags=["analytics"])


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "service": "project-advisor"}
