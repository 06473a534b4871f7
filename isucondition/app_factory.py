import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from isucondition.core.config import get_settings
from isucondition.core.errors import ConditionError
from isucondition.deps import jia_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    try:
        yield
    finally:
        await jia_client.close()


async def _condition_error_handler(request: Request, exc: ConditionError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "internal server error"},
    )


def create_base_app() -> FastAPI:
    """
    Build a FastAPI application with shared middleware, settings, and lifespan hooks.
    Stored condition strings that cannot be interpreted surface as 500 responses.
    """
    settings = get_settings()
    app = FastAPI(title=settings.app_name, lifespan=_lifespan)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age,
    )
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")
    app.add_exception_handler(ConditionError, _condition_error_handler)
    return app
