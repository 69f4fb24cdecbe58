"""FastAPI application entrypoint."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from clinic_stock.api.v1 import v1_router
from clinic_stock.core.config import get_settings
from clinic_stock.core.database import init_db
from clinic_stock.core.errors import BackendFailure, ClinicStockError
from clinic_stock.core.logging import configure_logging

logger = logging.getLogger(__name__)

_settings = get_settings()
configure_logging(_settings.log_level)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup: ensure tables exist
    await init_db()
    yield


app = FastAPI(
    title="Clinic Stock",
    version="0.1.0",
    description="Multi-clinic inventory tracking",
    lifespan=lifespan,
)

# ── CORS ─────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in _settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Domain errors ────────────────────────────────────────────
@app.exception_handler(ClinicStockError)
async def clinic_stock_error_handler(request: Request, exc: ClinicStockError) -> JSONResponse:
    logger.debug("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database failure on %s %s", request.method, request.url.path)
    failure = BackendFailure("The request could not be completed, please try again")
    return JSONResponse(status_code=503, content=failure.to_response())


# ── API routes ───────────────────────────────────────────────
app.include_router(v1_router)


@app.get("/health", tags=["system"])
async def health_check() -> dict:
    return {"status": "ok"}
