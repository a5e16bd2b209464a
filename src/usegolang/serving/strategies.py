"""
Serving strategies for compiled artifacts

The dev server answers artifact requests directly; a static bundle instead
copies artifacts out as hashed assets and rewrites the references to them.
One strategy is chosen per plugin instance from the host build mode.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Dict
from urllib.parse import unquote

from fastapi import FastAPI

from ..virtual_modules import (
    VIRTUAL_PREFIX,
    WASM_EXEC_ID,
    WASM_EXEC_NAME,
    VirtualModuleResolver,
)
from .assets import AssetEmitter
from .middleware import WasmArtifactMiddleware

logger = logging.getLogger(__name__)

# Virtual ids as they appear inside generated code: quoted string literals
# holding the percent-encoded URL form
VIRTUAL_REFERENCE = re.compile(
    r"""(["'])(""" + re.escape(VIRTUAL_PREFIX) + r"""[^"'\\\s]+)\1"""
)


class ArtifactServingStrategy(ABC):
    """How virtual artifacts reach the browser"""

    def __init__(self, resolver: VirtualModuleResolver):
        self.resolver = resolver

    @abstractmethod
    def configure_server(self, app: FastAPI) -> None:
        """Hook the strategy into a dev server app"""

    @abstractmethod
    async def finalize(self, code: str) -> str:
        """Rewrite a finished chunk before it is written out"""


class DevServerStrategy(ArtifactServingStrategy):
    """Serve artifacts straight from the build slots"""

    def configure_server(self, app: FastAPI) -> None:
        app.add_middleware(WasmArtifactMiddleware, resolver=self.resolver)

    async def finalize(self, code: str) -> str:
        return code


class BundleStrategy(ArtifactServingStrategy):
    """Emit artifacts and runtime glue as content-hashed bundle assets"""

    def __init__(self, resolver: VirtualModuleResolver, emitter: AssetEmitter, base: str = "/"):
        super().__init__(resolver)
        self.emitter = emitter
        self.base = base

    def configure_server(self, app: FastAPI) -> None:
        logger.debug("[use-golang] Bundle mode: no dev server middleware installed")

    async def _emit(self, module_id: str) -> str:
        if module_id == WASM_EXEC_ID:
            glue = await self.resolver.load_runtime_glue()
            file_name = self.emitter.emit(WASM_EXEC_NAME, glue)
        else:
            data = await self.resolver.read_artifact(module_id)
            slot_id, filename = module_id[len(VIRTUAL_PREFIX):].split("/", 1)
            file_name = self.emitter.emit(filename, data)
            logger.info(f"[use-golang] Emitted {slot_id}/{filename} as {file_name}")
        return self.base + file_name

    async def finalize(self, code: str) -> str:
        """
        Replace virtual references with final asset URLs

        Raises:
            ArtifactNotFoundError: If a referenced artifact is missing
            RuntimeGlueNotFoundError: If the glue is referenced but unavailable
        """
        urls: Dict[str, str] = {}
        for match in VIRTUAL_REFERENCE.finditer(code):
            reference = match.group(2)
            if reference not in urls:
                urls[reference] = await self._emit(unquote(reference))

        if not urls:
            return code

        return VIRTUAL_REFERENCE.sub(
            lambda m: f"{m.group(1)}{urls[m.group(2)]}{m.group(1)}", code
        )
