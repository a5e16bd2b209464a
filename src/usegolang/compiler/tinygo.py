"""
TinyGo compiler adapter
Runs the tinygo executable to turn a Go main package into a wasm module
"""

import asyncio
import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Union

from ..errors import CompilationError, TinyGoNotInstalledError

logger = logging.getLogger(__name__)

OPTIMIZATION_LEVELS = ("0", "1", "2", "s", "z")
WASM_TARGET = "wasm"


@dataclass
class CompileResult:
    """Compiled artifact plus whatever TinyGo printed on success"""
    wasm_file: Path
    warnings: List[str] = field(default_factory=list)


class TinyGoCompiler:
    """Compile Go sources to WebAssembly with TinyGo"""

    def __init__(self, tinygo_path: str = "tinygo", optimization: Union[str, int] = "z"):
        optimization = str(optimization)
        if optimization not in OPTIMIZATION_LEVELS:
            raise ValueError(
                f"Invalid optimization level {optimization!r}, "
                f"expected one of {', '.join(OPTIMIZATION_LEVELS)}"
            )
        self.tinygo_path = tinygo_path
        self.optimization = optimization

    async def _run(self, *args: str) -> Tuple[int, str, str]:
        """Run tinygo with args; no timeout, a hung toolchain hangs the caller"""
        process = await asyncio.create_subprocess_exec(
            self.tinygo_path, *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
        return (
            process.returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def is_installed(self) -> bool:
        try:
            returncode, _, _ = await self._run("version")
        except OSError:
            return False
        return returncode == 0

    async def get_version(self) -> str:
        """
        Return the output of ``tinygo version``

        Raises:
            TinyGoNotInstalledError: If the executable cannot be run
        """
        try:
            returncode, stdout, stderr = await self._run("version")
        except OSError as e:
            raise TinyGoNotInstalledError(self.tinygo_path, str(e))
        if returncode != 0:
            raise TinyGoNotInstalledError(self.tinygo_path, stderr.strip() or None)
        return stdout.strip()

    async def get_root(self) -> Path:
        """Return TINYGOROOT as reported by ``tinygo env``"""
        try:
            returncode, stdout, stderr = await self._run("env", "TINYGOROOT")
        except OSError as e:
            raise TinyGoNotInstalledError(self.tinygo_path, str(e))
        root = stdout.strip()
        if returncode != 0 or not root:
            raise TinyGoNotInstalledError(
                self.tinygo_path, stderr.strip() or "TINYGOROOT is not set"
            )
        return Path(root)

    def build_args(self, go_file: Union[str, Path], wasm_file: Union[str, Path]) -> List[str]:
        return [
            self.tinygo_path,
            "build",
            "-target", WASM_TARGET,
            "-opt", self.optimization,
            "-no-debug",
            "-o", str(wasm_file),
            str(go_file),
        ]

    def build_command(self, go_file: Union[str, Path], wasm_file: Union[str, Path]) -> str:
        """Command line used by compile(), suitable for logs and assertions"""
        return " ".join(shlex.quote(arg) for arg in self.build_args(go_file, wasm_file))

    async def compile(self, go_file: Union[str, Path],
                      wasm_file: Union[str, Path]) -> CompileResult:
        """
        Compile go_file into wasm_file

        Returns:
            CompileResult with any non-fatal diagnostics

        Raises:
            TinyGoNotInstalledError: If the executable cannot be started
            CompilationError: If TinyGo exits non-zero
        """
        args = self.build_args(go_file, wasm_file)
        logger.debug(f"[use-golang] Running {self.build_command(go_file, wasm_file)}")

        try:
            returncode, stdout, stderr = await self._run(*args[1:])
        except OSError as e:
            raise TinyGoNotInstalledError(self.tinygo_path, str(e))

        if returncode != 0:
            raise CompilationError(stderr or stdout)

        warnings: List[str] = []
        if stderr.strip():
            logger.warning(f"[use-golang] TinyGo warnings: {stderr.strip()}")
            warnings.append(stderr.strip())

        return CompileResult(wasm_file=Path(wasm_file), warnings=warnings)

