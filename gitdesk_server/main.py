from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gitdesk_server import __version__, workspaces
from gitdesk_server.config import settings
from gitdesk_server.errors import NotFound, WorkspaceError
from gitdesk_server.logging_config import get_logger, setup_logging
from gitdesk_server.routers import router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Validate configuration and prepare the workspace root."""
    setup_logging()

    try:
        settings.validate()
    except RuntimeError as e:
        logger.critical(f"Configuration error: {e}")
        raise

    try:
        settings.base_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.critical(f"Failed to create repository base path {settings.base_path}: {e}")
        raise
    logger.info(f"Serving workspaces from {settings.base_path}")

    yield

    workspaces.workspace_locks.reset()


app = FastAPI(
    title="gitdesk API",
    version=__version__,
    description="Clone, browse, edit and push git repositories on the server",
    lifespan=lifespan,
)


def cors_policy(value: str) -> tuple[list[str], bool]:
    """Allowed origins and whether credentials may be sent, from CORS_ORIGINS.

    "*" (or empty) allows any origin without credentials; a comma-separated
    list allows exactly those origins with credentials.
    """
    origins = [o.strip() for o in value.split(",") if o.strip()]
    if not origins or origins == ["*"]:
        return ["*"], False
    return origins, True


_allow_origins, _allow_credentials = cors_policy(settings.cors_origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_allow_origins,
    allow_credentials=_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WorkspaceError)
async def workspace_exception_handler(request: Request, exc: WorkspaceError):
    """Turn a workspace failure into its JSON payload; `success` carries the outcome."""
    failed = exc.status_code >= 500 and not isinstance(exc, NotFound)
    log = logger.error if failed else logger.warning
    log(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, exc.payload_key: exc.message, "code": exc.code},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are reported like missing parameters."""
    logger.info(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Invalid request parameters!"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions and return proper JSON response."""
    error_type = type(exc).__name__
    logger.error(
        f"Unhandled exception in {request.method} {request.url.path}: {error_type}: {exc}",
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": f"Internal server error ({error_type})"},
    )


app.include_router(router)


@app.get("/status")
async def status():
    """Get API health status."""
    repos = await workspaces.list_repositories()
    return {
        "status": "ok",
        "version": __version__,
        "repo_base_path": str(settings.base_path),
        "repos": len(repos),
    }
