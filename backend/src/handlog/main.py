from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from sqlalchemy import inspect
from starlette.requests import Request

from handlog.core import database
from handlog.core.config import get_settings
from handlog.core.exceptions import register_exception_handlers
from handlog.core.logging import setup_logging
from handlog.routers import foods, hand_conditions, health, meals, statistics

logger = logging.getLogger(__name__)

CORE_ROUTERS = (
    health.router,
    foods.router,
    meals.router,
    hand_conditions.router,
    statistics.router,
)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    database.init_db()
    logger.info("%s %s started", application.title, application.version)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url=settings.docs_url,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def enforce_utf8_json(request: Request, call_next):
        response = await call_next(request)
        if response.headers.get("content-type", "").startswith("application/json"):
            response.headers["content-type"] = "application/json; charset=utf-8"
        return response

    register_exception_handlers(application)

    @application.get("/favicon.ico", include_in_schema=False)
    def favicon():
        return Response(status_code=204)

    for router in CORE_ROUTERS:
        application.include_router(router)

    @application.get("/", include_in_schema=False)
    def root():
        target = settings.docs_url or "/docs"
        return RedirectResponse(target)

    @application.get("/__dbcheck", include_in_schema=False)
    def dbcheck():
        return {"tables": inspect(database.engine).get_table_names()}

    return application


app = create_app()
