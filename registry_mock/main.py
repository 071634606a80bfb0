import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from registry_mock.api.crates import router as crates_router
from registry_mock.core.config import ServerConfig, load_config
from registry_mock.domain.entities import Registry
from registry_mock.domain.errors import RegistryError
from registry_mock.services.authentication import SessionManager
from registry_mock.storage.base import RecordStore
from registry_mock.storage.fixture_store import FixtureStore
from registry_mock.storage.seed import load_seed_file

logger = logging.getLogger(__name__)


def error_response(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"errors": [{"detail": detail}]},
    )


async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    return error_response(exc.status_code, exc.detail)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "query")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return error_response(400, "; ".join(messages) or "invalid request")


def configure_logging(config: ServerConfig) -> None:
    logging.basicConfig(
        level=config.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app(
    store: Optional[RecordStore] = None,
    config: Optional[ServerConfig] = None,
) -> FastAPI:
    """
    Build a mock registry application around `store`.

    Each call gets its own store, session table and registry, so tests can
    create a fresh app per test. When no store is passed, an empty
    FixtureStore is created and, if configured, filled from the seed file.
    """
    config = config or load_config()
    configure_logging(config)

    if store is None:
        store = FixtureStore()
        if config.seed_file is not None:
            load_seed_file(store, config.seed_file)

    app = FastAPI(
        title="crates.io mock registry",
        version="0.1.0",
        description="In-memory simulation of the crates.io registry API for frontend tests.",
    )
    app.state.config = config
    app.state.store = store
    app.state.sessions = SessionManager(store)
    app.state.registry = Registry(store, api_prefix=config.api_prefix)

    app.add_exception_handler(RegistryError, registry_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    @app.get("/health")
    async def health() -> dict:
        """
        Lightweight health check endpoint.
        """
        return {"status": "ok"}

    app.include_router(crates_router, prefix=config.api_prefix, tags=["crates"])
    logger.info(f"Registry API mounted at {config.api_prefix}")

    return app


if __name__ == "__main__":
    """
    Allow running `python -m registry_mock.main` to start a development server.
    """
    import uvicorn

    uvicorn.run(
        "registry_mock.main:create_app",
        factory=True,
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
