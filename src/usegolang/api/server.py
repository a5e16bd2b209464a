"""
FastAPI Server - use-golang dev server

Serves a project directory. Script modules that start with "use golang" are
compiled on every request and answered with their generated glue; wasm
artifacts are answered by the artifact middleware; everything else is served
as a static file.
"""

import json
import logging
import mimetypes
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional, Union

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, Response, StreamingResponse

from .. import __version__
from ..config import PluginOptions
from ..errors import RuntimeGlueNotFoundError, TransformError
from ..hmr import SCRIPT_PATTERN, ReloadChannel
from ..plugin import GolangPlugin
from ..virtual_modules import WASM_EXEC_ID
from .models import HealthResponse, HotUpdateRequest, HotUpdateResponse

logger = logging.getLogger(__name__)

JS_MEDIA_TYPE = "application/javascript"
EVENTS_PATH = "/__use-golang/events"
HOT_UPDATE_PATH = "/__use-golang/hot-update"


def _project_file(project_root: Path, request_path: str) -> Path:
    """Resolve a path inside the project, refusing escapes"""
    path = (project_root / request_path).resolve()
    if path != project_root and project_root not in path.parents:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Path outside project root: {request_path}"
        )
    return path


def create_app(project_root: Union[str, Path] = ".",
               options: Optional[PluginOptions] = None,
               debug: bool = False,
               plugin: Optional[GolangPlugin] = None) -> FastAPI:
    """
    Create the dev server application

    Args:
        project_root: Directory served by the app
        options: Plugin options (defaults when omitted)
        debug: Enable debug logging for the use-golang package
        plugin: Pre-built plugin in serve mode; built from options when omitted

    Returns:
        Configured FastAPI application
    """
    root = Path(project_root).resolve()
    plugin = plugin or GolangPlugin(options, project_root=root, mode="serve")
    reload_channel = ReloadChannel()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Missing TinyGo is fatal: the server does not start
        await plugin.build_start()
        yield

    app = FastAPI(
        title="use-golang dev server",
        description="Serves JavaScript modules with embedded Go compiled to WebAssembly",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    plugin.configure_server(app)

    app.state.plugin = plugin
    app.state.reload_channel = reload_channel

    @app.get("/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint"""
        info = plugin.describe()
        return HealthResponse(
            version=__version__,
            mode=info["mode"],
            tinygo_path=info["tinygo_path"],
            optimization=info["optimization"],
            build_dir=info["build_dir"],
        )

    @app.get(WASM_EXEC_ID)
    async def runtime_glue():
        """TinyGo's wasm_exec.js"""
        try:
            glue = await plugin.load(WASM_EXEC_ID)
        except RuntimeGlueNotFoundError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=str(e)
            )
        return Response(content=glue, media_type=JS_MEDIA_TYPE)

    async def _event_stream() -> AsyncIterator[str]:
        queue = reload_channel.subscribe()
        async for payload in reload_channel.stream(queue):
            yield f"data: {json.dumps(payload)}\n\n"

    @app.get(EVENTS_PATH)
    async def reload_events():
        """Server-Sent Events stream of reload requests"""
        return StreamingResponse(_event_stream(), media_type="text/event-stream")

    @app.post(HOT_UPDATE_PATH, response_model=HotUpdateResponse)
    async def hot_update(request: HotUpdateRequest):
        """Notify the server that a file changed"""
        path = _project_file(root, request.file)
        if not path.is_file():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"File not found: {request.file}"
            )

        modules = await plugin.handle_hot_update(path, reload_channel.send)
        return HotUpdateResponse(
            file=str(path),
            reloaded=modules is not None,
            clients=reload_channel.subscriber_count if modules is not None else 0,
        )

    @app.get("/{request_path:path}")
    async def serve_file(request_path: str):
        """Project files, with "use golang" modules compiled on the fly"""
        path = _project_file(root, request_path.lstrip("/") or "index.html")
        if path.is_dir():
            path = path / "index.html"
        if not path.is_file():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Not found: /{request_path}"
            )

        if SCRIPT_PATTERN.search(path.name):
            code = path.read_text(encoding="utf-8")
            try:
                result = await plugin.transform(code, str(path))
            except TransformError as e:
                logger.error(str(e))
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=str(e)
                )
            if result is not None:
                return Response(content=result.code, media_type=JS_MEDIA_TYPE)
            return Response(content=code, media_type=JS_MEDIA_TYPE)

        media_type, _ = mimetypes.guess_type(path.name)
        return FileResponse(path, media_type=media_type)

    if debug:
        logging.getLogger("usegolang").setLevel(logging.DEBUG)
        logger.debug("Debug mode enabled")

    return app
