"""Application configuration and router setup."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import fastapi
from fastapi.middleware import cors
from fastapi.responses import JSONResponse

from components.core import init_db
from components.core.database import DatabaseManager
from components.core.errors import BudgetFlowError
from components.core.schemas import Problem
from restapi.endpoints import (
    accounts,
    auth,
    costs,
    health_check,
    history,
    periods,
    realtime,
    templates,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: fastapi.FastAPI):
    await app.state.db.connect()
    try:
        yield
    finally:
        await app.state.db.disconnect()


async def budgetflow_error_handler(request: fastapi.Request, exc: BudgetFlowError) -> JSONResponse:
    """Render domain errors as problem+json with a stable ``code``."""
    logger.info("%s %s failed: %s (%s)", request.method, request.url.path, exc.code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_problem(),
        media_type="application/problem+json",
    )


def create_app(db_manager: Optional[DatabaseManager] = None) -> fastapi.FastAPI:
    """Create and configure the FastAPI application."""
    app = fastapi.FastAPI(
        title="BudgetFlow",
        description="Household budgeting: accounts, fixed costs and monthly periods",
        version="1.0.0",
        lifespan=lifespan,
    )

    init_db.init_db(app, db_manager)

    app.add_middleware(
        cors.CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(BudgetFlowError, budgetflow_error_handler)

    problem_responses = {
        404: {"model": Problem, "description": "Not found"},
        409: {"model": Problem, "description": "Conflicting state"},
    }

    app.include_router(health_check.router)
    app.include_router(auth.router)
    app.include_router(accounts.router, responses=problem_responses)
    app.include_router(templates.router, responses=problem_responses)
    app.include_router(periods.router, responses=problem_responses)
    app.include_router(costs.router, responses=problem_responses)
    app.include_router(history.router)
    app.include_router(realtime.router)

    return app
