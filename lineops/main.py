# path: lineops/main.py
from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse

from lineops import __version__
from lineops.app_logging import get_logger
from lineops.core.api import router as api_router
from lineops.core.config import settings
from lineops.core.exceptions import LineOpsError
from lineops.core.models import db_helper


log = get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    log.info({"event": "startup", "version": __version__})
    yield
    # shutdown
    await db_helper.dispose()


async def lineops_error_handler(request: Request, exc: LineOpsError) -> ORJSONResponse:
    req_log = log.bind(method=request.method, path=request.url.path)
    if exc.status_code >= 500:
        req_log.error({"event": "request_failed", "kind": exc.kind, "error": exc.message})
    else:
        req_log.info({"event": "request_rejected", "kind": exc.kind, "error": exc.message})
    return ORJSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
    # ошибки схемы тела/параметров отдаём в том же формате, что и доменные
    return ORJSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Request body or parameters are invalid",
            "kind": "validation",
            "details": {"errors": jsonable_encoder(exc.errors())},
        },
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="lineops",
        version=__version__,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    app.add_exception_handler(LineOpsError, lineops_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    @app.get("/health", tags=["Health"])
    async def health() -> dict:
        return {"status": "ok", "refreshAfterSeconds": settings.sync.refresh_interval_seconds}

    app.include_router(api_router)
    return app


# Экспортируемый объект приложения
main_app = create_app()


if __name__ == "__main__":
    # Запуск: uvicorn lineops.main:main_app --reload
    uvicorn.run(
        "lineops.main:main_app",
        host=settings.run.host,
        port=settings.run.port,
        reload=True,
    )
