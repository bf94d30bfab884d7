import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from weave.api.endpoints import router
from weave.core.tracing import instrument_app, setup_tracing, shutdown_tracing
from weave.services.http_client import http_client_manager
from weave.shared import API_PREFIX, SERVICE_NAME
from weave.shared.correlation import CorrelationMiddleware
from weave.shared.errors import (
    WeaveError,
    domain_error,
    get_correlation_id,
    http_error,
    internal_error,
    validation_error,
)
from weave.shared.logging_config import setup_logging

setup_logging(service_name=SERVICE_NAME)
logger = logging.getLogger("Weave.Main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_tracing()
    await http_client_manager.startup()
    yield
    await http_client_manager.shutdown()
    shutdown_tracing()


app = FastAPI(
    title="Weave Intelligence Service",
    description="Chat, Linear sync and dual-mode memory for Weave",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(CorrelationMiddleware)
instrument_app(app)


@app.exception_handler(WeaveError)
async def weave_error_handler(request: Request, exc: WeaveError):
    logger.warning(f"{exc.code.value}: {exc.message}")
    return domain_error(exc, correlation_id=get_correlation_id(request))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return http_error(exc.status_code, str(exc.detail), correlation_id=get_correlation_id(request))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return validation_error(
        "Invalid request body",
        details={
            "errors": [
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in exc.errors()
            ]
        },
        correlation_id=get_correlation_id(request),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return internal_error(correlation_id=get_correlation_id(request))


app.include_router(router, prefix=API_PREFIX)


@app.get("/")
async def root():
    return {"message": "Weave Intelligence Service Running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
