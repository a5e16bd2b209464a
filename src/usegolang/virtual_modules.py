"""
Virtual modules under the /@vite-golang/ namespace

Two kinds of ids live there: the shared TinyGo runtime glue
(``/@vite-golang/wasm_exec.js``) and compiled artifacts
(``/@vite-golang/<slot>/<file>``), which map onto the build root.
"""

import asyncio
import logging
from pathlib import Path, PurePosixPath
from typing import Optional, Union
from urllib.parse import quote

from .compiler.tinygo import TinyGoCompiler
from .errors import (
    ArtifactNotFoundError,
    RuntimeGlueNotFoundError,
    TinyGoNotInstalledError,
)

logger = logging.getLogger(__name__)

VIRTUAL_PREFIX = "/@vite-golang/"
WASM_EXEC_NAME = "wasm_exec.js"
WASM_EXEC_ID = VIRTUAL_PREFIX + WASM_EXEC_NAME
WASM_EXTENSION = ".wasm"


def is_virtual_module(module_id: str) -> bool:
    return module_id.startswith(VIRTUAL_PREFIX)


def artifact_id(slot_id: str, filename: str) -> str:
    """Virtual id of a file inside a build slot"""
    return f"{VIRTUAL_PREFIX}{slot_id}/{filename}"


def artifact_url(slot_id: str, filename: str) -> str:
    """
    URL form of an artifact id, as written into generated code

    Slot ids keep every character of the module path except separators and
    dots, so each segment is percent-encoded. Servers decode the request
    path back to the plain id before it reaches the resolver.
    """
    return f"{VIRTUAL_PREFIX}{quote(slot_id, safe='')}/{quote(filename, safe='')}"


def resolve_virtual_module(module_id: str, build_dir: Union[str, Path]) -> Optional[Union[str, Path]]:
    """
    Map a virtual id to what backs it

    Returns:
        ``"wasm_exec.js"`` for the runtime glue, the on-disk path for a
        ``<slot>/<file>.wasm`` artifact, or None for anything else
    """
    if not is_virtual_module(module_id):
        return None

    path = module_id[len(VIRTUAL_PREFIX):]

    if path == WASM_EXEC_NAME:
        return WASM_EXEC_NAME

    parts = PurePosixPath(path).parts
    if len(parts) != 2 or any(part in ("", ".", "..") for part in parts):
        return None

    if path.endswith(WASM_EXTENSION):
        return Path(build_dir).joinpath(*parts)

    return None


class VirtualModuleResolver:
    """Loads the contents behind virtual ids"""

    def __init__(self, build_dir: Union[str, Path], compiler: TinyGoCompiler):
        self.build_dir = Path(build_dir)
        self.compiler = compiler
        self._runtime_glue: Optional[str] = None

    def resolve(self, module_id: str) -> Optional[Union[str, Path]]:
        return resolve_virtual_module(module_id, self.build_dir)

    async def load_runtime_glue(self) -> str:
        """
        Return wasm_exec.js shipped with the installed TinyGo, verbatim

        Raises:
            RuntimeGlueNotFoundError: If TINYGOROOT cannot be queried or the
                file is missing
        """
        if self._runtime_glue is not None:
            return self._runtime_glue

        try:
            root = await self.compiler.get_root()
        except TinyGoNotInstalledError as e:
            raise RuntimeGlueNotFoundError(str(e))

        glue_path = root / "targets" / WASM_EXEC_NAME
        try:
            self._runtime_glue = await asyncio.to_thread(glue_path.read_text, encoding="utf-8")
        except OSError as e:
            raise RuntimeGlueNotFoundError(f"{glue_path}: {e.strerror or e}")

        logger.debug(f"[use-golang] Loaded runtime glue from {glue_path}")
        return self._runtime_glue

    async def load(self, module_id: str) -> Optional[str]:
        """Module source for the glue id; None for everything else"""
        if module_id == WASM_EXEC_ID:
            return await self.load_runtime_glue()
        return None

    def artifact_path(self, module_id: str) -> Path:
        """
        On-disk path of a virtual artifact

        Raises:
            ArtifactNotFoundError: If the id is not an artifact id or no file exists
        """
        resolved = self.resolve(module_id)
        if not isinstance(resolved, Path):
            raise ArtifactNotFoundError(module_id)
        if not resolved.is_file():
            raise ArtifactNotFoundError(module_id, str(resolved))
        return resolved

    async def read_artifact(self, module_id: str) -> bytes:
        path = self.artifact_path(module_id)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            raise ArtifactNotFoundError(module_id, str(path))
