"""FastAPI route layer – the same service functions over plain HTTP.

Routes do their own parameter extraction and envelope wrapping; they do
not go through the MCP registry.

Run with:
    preflight-http
    # → http://localhost:8000/health
    # → http://localhost:8000/api/v1/system/datetime?timezone=Europe/Berlin
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from preflight.config import Settings, settings as default_settings
from preflight.errors import PreflightError, ToolValidationError
from preflight.schemas.common import ToolParams
from preflight.schemas.system import DateTimeParams, PingParams
from preflight.services.system_service import system_date_time, system_ping
from preflight.utils.envelope import to_wire, wrap_failure, wrap_success

logger = logging.getLogger("preflight.api")


async def _respond(
    route: str,
    params_model: type[ToolParams],
    service: Callable[[Any], Awaitable[Any]],
    raw: dict[str, Any],
) -> JSONResponse:
    """Validate *raw*, call *service*, and return the envelope as JSON."""
    meta = {"route": route}
    try:
        params = params_model.model_validate(raw)
    except ValidationError as exc:
        issues = [f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()]
        error = ToolValidationError(route, issues)
        return JSONResponse(status_code=422, content=to_wire(wrap_failure(error, meta)))

    try:
        data = await service(params)
    except PreflightError as exc:
        logger.info("%s failed: %s", route, exc.user_message)
        return JSONResponse(status_code=400, content=to_wire(wrap_failure(exc, meta)))
    except Exception as exc:
        logger.exception("%s raised an unexpected error", route)
        return JSONResponse(status_code=500, content=to_wire(wrap_failure(exc, meta)))

    return JSONResponse(content=to_wire(wrap_success(data, meta)))


def create_router(settings: Settings) -> APIRouter:
    router = APIRouter(prefix=settings.api_prefix)

    @router.get("/system/ping")
    async def ping(message: str | None = Query(None)):
        return await _respond("system/ping", PingParams, system_ping, {"message": message})

    @router.get("/system/datetime")
    async def datetime_(timezone: str | None = Query(None, description="IANA zone name")):
        tz = timezone or settings.default_timezone
        return await _respond(
            "system/datetime", DateTimeParams, system_date_time, {"timezone": tz}
        )

    return router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the HTTP application."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("HTTP route layer starting (env=%s)", settings.app_env)
        yield
        logger.info("HTTP route layer shutting down")

    app = FastAPI(
        title="preflight – HTTP routes",
        description="Versioned HTTP access to the preflight service functions.",
        version=settings.mcp_server_version,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": settings.mcp_server_version}

    app.include_router(create_router(settings))
    return app


app = create_app()


def main() -> None:
    """CLI entry-point."""
    import uvicorn

    logging.basicConfig(
        level=default_settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(
        "preflight.api.server:app",
        host=default_settings.http_host,
        port=default_settings.http_port,
        reload=(default_settings.app_env == "development"),
    )


if __name__ == "__main__":
    main()
