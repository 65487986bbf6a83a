"""FastAPI entrypoint for the TaskNotes gateway."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from gateway.config import load_config
from gateway.errors import ErrorResponse, GatewayError, error_response
from gateway.llm import GeminiAdapter
from gateway.logsetup import setup_logging
from gateway.mcp import register_mcp_handlers
from gateway.mcp_constants import SERVICE_VERSION
from gateway.operations import TaskOperations
from gateway.projects import ProjectCatalog
from gateway.request_scope import (
    AUTH_EXEMPT_PATHS,
    SERVICE_TOKEN_HEADER,
    get_request_operations,
    service_token_matches,
)
from gateway.rest_nlp import nlp_router
from gateway.rest_tasks import filter_options_router, tasks_router
from gateway.tasknotes_client import TaskNotesClient

logger = logging.getLogger(__name__)


def create_app(operations: TaskOperations | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        config = load_config()
        setup_logging(config.log_level, json_lines=config.log_json)
        app.state.config = config

        owned: list = []
        if operations is None:
            client = TaskNotesClient(
                config.tasknotes_api_url, timeout=config.tasknotes_timeout
            )
            adapter = GeminiAdapter(
                config.gemini_api_key,
                config.gemini_model,
                config.gemini_api_url,
                timeout=config.gemini_timeout,
            )
            owned = [client, adapter]
            app.state.operations = TaskOperations(
                client,
                adapter,
                ProjectCatalog(client, ttl=config.project_cache_ttl),
            )
        else:
            app.state.operations = operations
        logger.info(
            "Gateway started",
            extra={"tasknotes_api_url": config.tasknotes_api_url},
        )
        try:
            yield
        finally:
            for resource in owned:
                resource.close()

    app = FastAPI(title="TaskNotes API", version=SERVICE_VERSION, lifespan=lifespan)

    @app.middleware("http")
    async def enforce_service_token(request: Request, call_next):
        if request.url.path in AUTH_EXEMPT_PATHS:
            return await call_next(request)

        config = getattr(request.app.state, "config", None)
        service_token = getattr(config, "service_token", None)
        if not service_token_matches(request, service_token):
            error = ErrorResponse(
                code="AUTH_FORBIDDEN",
                message="Invalid service token.",
                details={"header": SERVICE_TOKEN_HEADER},
            )
            return JSONResponse(status_code=403, content=error_response(error))

        return await call_next(request)

    @app.exception_handler(GatewayError)
    def handle_gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code, content=error_response(exc.error)
        )

    @app.get("/health", status_code=200, tags=["Health"])
    def health(request: Request) -> dict:
        return get_request_operations(request).health(SERVICE_VERSION)

    app.include_router(filter_options_router)
    app.include_router(tasks_router)
    app.include_router(nlp_router)
    register_mcp_handlers(app)
    return app


app = create_app()
