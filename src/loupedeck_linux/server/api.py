"""HTTP API for reading and editing the page configuration."""

import asyncio
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

import uvicorn
from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from loupedeck_linux.exceptions import (
    ConfigurationError,
    ConfigValidationError,
    LoupedeckError,
    PageNotFoundError,
)
from loupedeck_linux.models import COMPONENT_TYPES, VIBRATION_PATTERNS, AppSettings, DeviceMetadata
from loupedeck_linux.services import PageConfigService

logger = logging.getLogger(__name__)


class NewPageRequest(BaseModel):
    title: str = ""
    description: str = ""


class PageMetaRequest(BaseModel):
    title: str | None = None
    description: str | None = None


def _error(status_code: int, error: LoupedeckError, issues: list[dict[str, Any]] | None = None) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "error": error.user_message}
    if issues is not None:
        content["issues"] = issues
    return JSONResponse(content, status_code=status_code)


def constants_payload(settings: AppSettings, metadata: DeviceMetadata) -> dict[str, Any]:
    return {
        "autoUpdateInterval": settings.auto_update_interval_ms,
        "knobIds": list(metadata.knob_ids),
        "volumeStep": settings.volume_step_percent,
        "volumeDisplayTimeout": settings.overlay_timeout_ms,
        "componentTypes": list(COMPONENT_TYPES),
        "vibrationPatterns": sorted(VIBRATION_PATTERNS),
    }


def device_payload(metadata: DeviceMetadata) -> dict[str, Any]:
    return {
        "type": metadata.name,
        "grid": {"columns": metadata.columns, "rows": metadata.rows},
        "screen": {"width": metadata.screen_width, "height": metadata.screen_height},
        "keySize": metadata.key_size,
        "knobs": list(metadata.knob_ids),
        "buttons": list(metadata.button_ids),
    }


def create_api(service: PageConfigService, settings: AppSettings, metadata: DeviceMetadata) -> FastAPI:
    """
    Build the FastAPI application.

    Every mutation goes through ``service``, which persists the document
    and notifies the running application.
    """
    app = FastAPI(title="loupedeck-linux", docs_url=None, redoc_url=None)

    def pages_payload() -> dict[str, Any]:
        return service.config.model_dump()["pages"]

    @app.get("/api/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/api/config")
    async def get_config() -> dict[str, Any]:
        return {
            "pages": pages_payload(),
            "constants": constants_payload(settings, metadata),
            "device": device_payload(metadata),
        }

    @app.get("/api/config/constants")
    async def get_constants() -> dict[str, Any]:
        return constants_payload(settings, metadata)

    @app.get("/api/device")
    async def get_device() -> dict[str, Any]:
        return device_payload(metadata)

    @app.post("/api/config", response_model=None)
    async def save_config(body: dict[str, Any] = Body(...)) -> dict[str, Any] | JSONResponse:
        # Accept both {"pages": {...}} and the bare pages mapping
        data = body if "pages" in body else {"pages": body}
        try:
            config = service.replace(data)
        except ConfigValidationError as e:
            logger.warning(f"Rejected configuration: {e.technical_message}")
            return _error(400, e, e.issues)
        except ConfigurationError as e:
            logger.warning(f"Rejected configuration: {e.technical_message}")
            return _error(400, e)
        except LoupedeckError as e:
            logger.error(f"Failed to save configuration: {e.get_full_message()}")
            return _error(500, e)
        return {
            "success": True,
            "message": "Configuration saved and applied",
            "pages": config.model_dump()["pages"],
        }

    @app.post("/api/pages", response_model=None)
    async def create_page(request: NewPageRequest | None = None) -> dict[str, Any] | JSONResponse:
        request = request or NewPageRequest()
        try:
            page_id = service.create_page(request.title, request.description)
        except LoupedeckError as e:
            logger.error(f"Failed to create page: {e.get_full_message()}")
            return _error(500, e)
        return {"success": True, "pageNum": int(page_id), "pages": pages_payload()}

    @app.delete("/api/pages/{page_id}", response_model=None)
    async def delete_page(page_id: str) -> dict[str, Any] | JSONResponse:
        try:
            service.delete_page(page_id)
        except PageNotFoundError as e:
            return _error(404, e)
        except ConfigValidationError as e:
            return _error(400, e)
        except LoupedeckError as e:
            logger.error(f"Failed to delete page {page_id}: {e.get_full_message()}")
            return _error(500, e)
        return {"success": True, "pages": pages_payload()}

    @app.put("/api/pages/{page_id}/meta", response_model=None)
    async def update_page_meta(page_id: str, request: PageMetaRequest) -> dict[str, Any] | JSONResponse:
        try:
            meta = service.update_page_meta(page_id, request.title, request.description)
        except PageNotFoundError as e:
            return _error(404, e)
        except LoupedeckError as e:
            logger.error(f"Failed to update page {page_id}: {e.get_full_message()}")
            return _error(500, e)
        return {"success": True, "pageNum": int(page_id), "meta": meta.model_dump()}

    return app


class _EmbeddedServer(uvicorn.Server):
    """uvicorn server that leaves signal handling to the application."""

    def install_signal_handlers(self) -> None:
        pass

    @contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


class ApiServer:
    """
    Serves the API on the running event loop.

    Args:
        app: Application from ``create_api``
        host: Bind address (loopback by default)
        port: TCP port
    """

    def __init__(self, app: FastAPI, host: str = "127.0.0.1", port: int = 9876):
        self.host = host
        self.port = port
        config = uvicorn.Config(app, host=host, port=port, log_config=None, access_log=False)
        self._server = _EmbeddedServer(config)
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._serve(), name="api-server")
        # Give uvicorn a chance to bind before reporting
        for _ in range(50):
            if self._server.started or self._task.done():
                break
            await asyncio.sleep(0.02)
        if self._task.done():
            error = self._task.exception()
            self._task = None
            raise OSError(f"API server failed to start on {self.host}:{self.port}: {error}")
        logger.info(f"Config API listening on http://{self.host}:{self.port}")

    async def _serve(self) -> None:
        try:
            await self._server.serve()
        except SystemExit as e:
            # uvicorn exits the process when it cannot bind
            raise OSError(f"cannot serve on {self.host}:{self.port}") from e

    async def stop(self, timeout: float = 2.0) -> None:
        task = self._task
        if task is None:
            return
        self._task = None
        self._server.should_exit = True
        try:
            await asyncio.wait_for(task, timeout)
        except TimeoutError:
            logger.warning(f"API server did not stop within {timeout}s, cancelling")
            self._server.force_exit = True
            task.cancel()
        logger.info("Config API stopped")
