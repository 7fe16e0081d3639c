"""FastAPI application factory and routing definitions."""

from __future__ import annotations

from typing import Any, Callable

from fastapi import APIRouter, BackgroundTasks, Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger
from pydantic import BaseModel

from folio.auth import AuthGate, AuthorizationError
from folio.config.app import AppConfig
from folio.storage import Collection, CollectionStore, RecordIndexError, StoreError

LOAD_FAILURE_MESSAGE = "Failed to load local data. Please refresh."
UNAUTHORIZED_MESSAGE = "Unauthorized token."
STATUS_MESSAGE = "folio is running"


class DeleteRequest(BaseModel):
    """Body of a delete call; clients send the full collection, only these are read."""

    id: int
    title: str = ""


def create_app(store: CollectionStore, gate: AuthGate, config: AppConfig | None = None) -> FastAPI:
    """Creates the folio API with the collection routes under ``/v1``."""
    allow_origins = config.cors.allow_origins if config else ["*"]
    require_token = _build_auth_dependency(gate)

    app = FastAPI(
        title="folio API",
        description="Stores portfolio collection records for the folio site.",
        version="0.1.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    router = APIRouter(prefix="/v1")

    @router.get("/projects", summary="List Collections", tags=["Projects"])
    def list_projects(background_tasks: BackgroundTasks) -> JSONResponse:
        """Returns every stored collection in id order."""
        try:
            records = store.list()
        except StoreError as exc:
            logger.error("Failed to load projects data: {}", exc)
            logger.info("Re-initializing files...")
            background_tasks.add_task(_reinitialize, store)
            return JSONResponse(LOAD_FAILURE_MESSAGE)
        return JSONResponse([record.model_dump(mode="json") for record in records])

    @router.post("/projects", summary="Create Collection", tags=["Projects"], response_class=PlainTextResponse)
    def create_project(collection: Collection, _: None = Depends(require_token)) -> str:
        """Appends a collection, or replaces the one that already has its id."""
        store.upsert(collection)
        return f'Added "{collection.title}"'

    @router.put("/projects", summary="Update Collection", tags=["Projects"], response_class=PlainTextResponse)
    def update_project(collection: Collection, _: None = Depends(require_token)) -> str:
        store.update(collection)
        return f'Updated "{collection.title}"'

    @router.delete("/projects", summary="Delete Collection", tags=["Projects"], response_class=PlainTextResponse)
    def delete_project(request: DeleteRequest, _: None = Depends(require_token)) -> str:
        """Deletes the collection at ``id``; later collections move down one id."""
        store.delete(request.id)
        label = request.title or f"collection {request.id}"
        return f'Deleted "{label}"'

    @router.get("/folio", summary="Status", tags=["Monitoring"], response_class=PlainTextResponse)
    async def folio_status() -> str:
        return STATUS_MESSAGE

    app.include_router(router)
    return app


def _reinitialize(store: CollectionStore) -> None:
    try:
        result = store.initialize()
    except StoreError:
        logger.exception("Re-initialization of local files failed")
        return
    logger.info("Re-initialized local files from {} source", result.source or "placeholder")


def _build_auth_dependency(gate: AuthGate) -> Callable[..., Any]:
    """Return a dependency that checks the Bearer token against the passkey."""
    bearer = HTTPBearer(auto_error=False)

    def _verify_token(credentials: HTTPAuthorizationCredentials | None = Depends(bearer)) -> None:
        if credentials is None:
            logger.warning("Rejected request without a Bearer token")
            raise AuthorizationError()
        gate.authorize(credentials.credentials)

    return _verify_token


def _register_error_handlers(app: FastAPI) -> None:
    """Map storage and auth failures onto HTTP responses."""

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(request: Request, exc: AuthorizationError) -> PlainTextResponse:
        return PlainTextResponse(
            UNAUTHORIZED_MESSAGE,
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(RecordIndexError)
    async def record_index_error_handler(request: Request, exc: RecordIndexError) -> JSONResponse:
        logger.warning("{} {}: {}", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": f"No collection with id {exc.record_id}."},
        )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("{} {} failed: {}", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Failed to access local projects data."},
        )


__all__ = ["DeleteRequest", "create_app"]
