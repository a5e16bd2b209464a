"""
Wasm Middleware - Serves compiled build-slot artifacts on the dev server
"""

import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..errors import ArtifactNotFoundError
from ..virtual_modules import VIRTUAL_PREFIX, WASM_EXTENSION, VirtualModuleResolver

logger = logging.getLogger(__name__)

WASM_MEDIA_TYPE = "application/wasm"


class WasmArtifactMiddleware(BaseHTTPMiddleware):
    """
    Intercepts ``/@vite-golang/<slot>/<file>.wasm`` requests.

    The artifact is read fully into memory and returned with the wasm media
    type and its exact length, which ``WebAssembly.instantiateStreaming``
    requires. Every other request passes through untouched.

    Usage:
        app = FastAPI()
        app.add_middleware(WasmArtifactMiddleware, resolver=resolver)
    """

    def __init__(self, app: ASGIApp, resolver: VirtualModuleResolver):
        super().__init__(app)
        self.resolver = resolver

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Decoded path; request.url re-parses it and would cut at "#" or "?"
        path = request.scope["path"]
        if not (path.startswith(VIRTUAL_PREFIX) and path.endswith(WASM_EXTENSION)):
            return await call_next(request)

        try:
            content = await self.resolver.read_artifact(path)
        except ArtifactNotFoundError as e:
            logger.warning(str(e))
            return Response(status_code=404, content=str(e), media_type="text/plain")

        return Response(
            content=content,
            media_type=WASM_MEDIA_TYPE,
            headers={
                "Content-Length": str(len(content)),
                "Cache-Control": "no-cache",
            },
        )
