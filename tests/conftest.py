"""Pytest configuration and fixtures for use-golang tests"""

from pathlib import Path
from typing import List, Tuple

import pytest

from usegolang.build_manager import BuildManager
from usegolang.compiler.tinygo import CompileResult, TinyGoCompiler
from usegolang.errors import CompilationError
from usegolang.transform import TransformContext

WASM_BYTES = b"\x00asm\x01\x00\x00\x00"
WASM_EXEC_JS = "// wasm_exec.js\nglobalThis.Go = class Go {};\n"

ADD_MODULE = '"use golang"\n//export add\nfunc add(a, b int) int { return a+b }\n'


class FakeTinyGo(TinyGoCompiler):
    """TinyGo stand-in that writes a fixed wasm header instead of compiling"""

    def __init__(self, root: Path, optimization: str = "z", installed: bool = True,
                 fail_with: str = "", warnings: str = ""):
        super().__init__("tinygo", optimization)
        self.root = root
        self.installed = installed
        self.fail_with = fail_with
        self.warnings = warnings
        self.compiled: List[Tuple[Path, Path, str]] = []

    async def is_installed(self) -> bool:
        return self.installed

    async def get_version(self) -> str:
        return "tinygo version 0.31.0 linux/amd64"

    async def get_root(self) -> Path:
        return self.root

    async def compile(self, go_file, wasm_file) -> CompileResult:
        go_file, wasm_file = Path(go_file), Path(wasm_file)
        self.compiled.append((go_file, wasm_file, self.build_command(go_file, wasm_file)))
        if self.fail_with:
            raise CompilationError(self.fail_with)
        wasm_file.write_bytes(WASM_BYTES)
        return CompileResult(wasm_file=wasm_file, warnings=[self.warnings] if self.warnings else [])


@pytest.fixture
def tinygo_root(tmp_path) -> Path:
    """Fake TINYGOROOT containing targets/wasm_exec.js"""
    root = tmp_path / "tinygo"
    (root / "targets").mkdir(parents=True)
    (root / "targets" / "wasm_exec.js").write_text(WASM_EXEC_JS)
    return root


@pytest.fixture
def fake_compiler(tinygo_root) -> FakeTinyGo:
    return FakeTinyGo(tinygo_root)


@pytest.fixture
def project_root(tmp_path) -> Path:
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    return root


@pytest.fixture
def build_manager(project_root) -> BuildManager:
    return BuildManager(project_root / ".use-golang")


@pytest.fixture
def transform_context(build_manager, fake_compiler, project_root) -> TransformContext:
    return TransformContext(
        build_manager=build_manager,
        compiler=fake_compiler,
        project_root=project_root,
        generate_types=True,
    )
