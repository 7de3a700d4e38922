"""
main.py
───────
Warehouse inventory: FastAPI backend entry point.

Exposes:
  REST  /api/items           list / create
  REST  /api/items/{id}      update / delete
  REST  /api/health          process info
  GET   /*                   static front-end from the public directory

Every record lives in one JSON document (see item_store.py); each request
is answered with an {"isOk": ..., "data"/"error": ...} envelope.
"""

import os
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, configure_logging, settings as default_settings
from errors import NotFound, PersistenceFailure, ValidationError, DuplicateBackendId
from ids import BackendIdGenerator
from inventory import Inventory
from item_store import ItemStore
from models import Envelope
from reload_policy import ReloadPolicy

log = logging.getLogger(__name__)


class SPAStaticFiles(StaticFiles):
    """Static files that fall back to index.html for unknown paths."""

    async def get_response(self, path: str, scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code != 404:
                raise
            return await super().get_response("index.html", scope)


def _error(status_code: int, message: str, applied_in_memory: Optional[bool] = None) -> JSONResponse:
    body = Envelope(isOk=False, error=message, appliedInMemory=applied_in_memory)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _ok(data: Any = None, include_data: bool = True) -> Dict[str, Any]:
    fields = {"isOk", "data"} if include_data else {"isOk"}
    return Envelope(isOk=True, data=data).model_dump(include=fields)


def build_inventory(cfg: Settings) -> Inventory:
    store = ItemStore(cfg.db_path, id_generator=BackendIdGenerator())
    return Inventory(store, ReloadPolicy(cfg.reload_policy))


def create_app(cfg: Optional[Settings] = None, inventory: Optional[Inventory] = None) -> FastAPI:
    cfg = cfg or default_settings
    configure_logging(cfg.log_level)
    inventory = inventory or build_inventory(cfg)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("PID=%s | store=%s | reload=%s", os.getpid(), cfg.db_path, cfg.reload_policy)
        inventory.start()

        yield   # Application runs here

        inventory.stop()
        log.info("Shutdown complete.")

    app = FastAPI(title="Warehouse Inventory", version="1.0.0", lifespan=lifespan)
    app.state.inventory = inventory

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error mapping ─────────────────────────────────────────────────────────

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        return _error(400, f"invalid json: {first.get('msg', 'malformed body')}")

    @app.exception_handler(DuplicateBackendId)
    async def duplicate_id(request: Request, exc: DuplicateBackendId):
        return _error(409, str(exc))

    @app.exception_handler(ValidationError)
    async def rejected(request: Request, exc: ValidationError):
        return _error(400, str(exc))

    @app.exception_handler(NotFound)
    async def not_found(request: Request, exc: NotFound):
        return _error(404, "not found")

    @app.exception_handler(PersistenceFailure)
    async def not_durable(request: Request, exc: PersistenceFailure):
        log.error("%s", exc)
        return _error(500, "failed to save db", applied_in_memory=exc.applied_in_memory)

    # ── Item endpoints ────────────────────────────────────────────────────────

    @app.get("/api/items")
    def list_items():
        return _ok(inventory.list_all())

    @app.post("/api/items")
    def create_item(body: Dict[str, Any] = Body(...)):
        return _ok(inventory.create(body))

    @app.put("/api/items/{backend_id}")
    def update_item(backend_id: str, body: Dict[str, Any] = Body(...)):
        inventory.update(backend_id, body)
        return _ok(None)

    @app.delete("/api/items/{backend_id}")
    def delete_item(backend_id: str):
        inventory.delete(backend_id)
        return _ok(include_data=False)

    # ── Health / info ─────────────────────────────────────────────────────────

    @app.get("/api/health")
    def health():
        return {
            "status": "ok",
            "pid": os.getpid(),
            "items": len(inventory.store),
        }

    # ── Static front-end ──────────────────────────────────────────────────────

    if os.path.isdir(cfg.public_dir):
        app.mount("/", SPAStaticFiles(directory=cfg.public_dir, html=True), name="public")
        log.info("Serving static files from %s", cfg.public_dir)
    else:
        log.warning("%s not found, static files won't be served", cfg.public_dir)

    return app


app = create_app()


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=default_settings.host, port=default_settings.port)
