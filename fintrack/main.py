"""
fintrack — FastAPI app factory with startup service wiring.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from supabase import create_client

from fintrack import __version__
from fintrack.api.dependencies import set_services
from fintrack.api.router_auth import router as auth_router
from fintrack.api.router_cards import router as cards_router
from fintrack.api.router_fixed import router as fixed_router
from fintrack.api.router_meta import router as meta_router
from fintrack.api.router_reports import router as reports_router
from fintrack.api.router_spreadsheet import router as spreadsheet_router
from fintrack.api.router_summary import router as summary_router
from fintrack.api.router_transactions import router as transactions_router
from fintrack.auth import IdentityService
from fintrack.config import LOG_FORMAT, LOG_LEVEL, SUPABASE_KEY, SUPABASE_URL
from fintrack.data.repository import FinanceRepository
from fintrack.errors import FinanceError

logger = logging.getLogger("fintrack")


def configure_logging() -> None:
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect to the database and identity service at startup."""
    configure_logging()
    if not SUPABASE_URL or not SUPABASE_KEY:
        logger.warning("SUPABASE_URL/SUPABASE_KEY not set: data and auth endpoints will answer 503")
    else:
        # Separate clients: a sign-in stores its session on the client that made it
        repository = FinanceRepository(create_client(SUPABASE_URL, SUPABASE_KEY))
        identity = IdentityService(
            create_client(SUPABASE_URL, SUPABASE_KEY),
            repository,
            flow_client_factory=lambda: create_client(SUPABASE_URL, SUPABASE_KEY),
        )
        set_services(repository, identity)
        logger.info("fintrack %s ready (database %s)", __version__, SUPABASE_URL)
    yield


# ---------------------------------------------------------------------------
# Error responses
# ---------------------------------------------------------------------------

async def finance_error_handler(request: Request, exc: FinanceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    errors = [{"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": errors})


def create_app() -> FastAPI:
    app = FastAPI(
        title="fintrack API",
        description="Personal finance — transactions, credit cards, fixed expenses, reports",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FinanceError, finance_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)

    app.include_router(meta_router)
    app.include_router(auth_router)
    app.include_router(transactions_router)
    app.include_router(cards_router)
    app.include_router(fixed_router)
    app.include_router(summary_router)
    app.include_router(reports_router)
    app.include_router(spreadsheet_router)

    return app


app = create_app()
