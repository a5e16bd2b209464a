"""Tests for virtual module resolution."""
import asyncio
from pathlib import Path
from urllib.parse import unquote

import pytest

from usegolang.compiler.tinygo import TinyGoCompiler
from usegolang.errors import ArtifactNotFoundError, RuntimeGlueNotFoundError, TinyGoNotInstalledError
from usegolang.virtual_modules import (
    WASM_EXEC_ID,
    VirtualModuleResolver,
    artifact_id,
    artifact_url,
    is_virtual_module,
    resolve_virtual_module,
)

from conftest import WASM_EXEC_JS


class TestResolveVirtualModule:
    """Test resolve_virtual_module."""

    def test_is_virtual(self):
        assert is_virtual_module("/@vite-golang/wasm_exec.js")
        assert not is_virtual_module("/src/main.js")

    def test_runtime_glue(self):
        assert resolve_virtual_module(WASM_EXEC_ID, "/build") == "wasm_exec.js"

    def test_artifact(self):
        resolved = resolve_virtual_module("/@vite-golang/slot_1234/main.wasm", "/build")
        assert resolved == Path("/build/slot_1234/main.wasm")

    def test_artifact_id(self):
        assert artifact_id("slot_1234", "main.wasm") == "/@vite-golang/slot_1234/main.wasm"

    @pytest.mark.parametrize("module_id", [
        "/src/main.js",
        "/@vite-golang/slot_1234/main.go",
        "/@vite-golang/../secret/main.wasm",
        "/@vite-golang/a/b/main.wasm",
        "/@vite-golang/main.wasm",
    ])
    def test_unresolvable(self, module_id):
        assert resolve_virtual_module(module_id, "/build") is None


class TestVirtualModuleResolver:
    """Test VirtualModuleResolver."""

    def test_load_runtime_glue(self, tmp_path, fake_compiler):
        resolver = VirtualModuleResolver(tmp_path / "build", fake_compiler)
        assert asyncio.run(resolver.load(WASM_EXEC_ID)) == WASM_EXEC_JS

    def test_load_other_ids(self, tmp_path, fake_compiler):
        resolver = VirtualModuleResolver(tmp_path / "build", fake_compiler)
        assert asyncio.run(resolver.load("/@vite-golang/slot/main.wasm")) is None

    def test_glue_missing_file(self, tmp_path, fake_compiler, tinygo_root):
        (tinygo_root / "targets" / "wasm_exec.js").unlink()
        resolver = VirtualModuleResolver(tmp_path / "build", fake_compiler)
        with pytest.raises(RuntimeGlueNotFoundError):
            asyncio.run(resolver.load_runtime_glue())

    def test_glue_without_toolchain(self, tmp_path):
        class NoTinyGo(TinyGoCompiler):
            async def get_root(self):
                raise TinyGoNotInstalledError(self.tinygo_path)

        resolver = VirtualModuleResolver(tmp_path / "build", NoTinyGo())
        with pytest.raises(RuntimeGlueNotFoundError):
            asyncio.run(resolver.load_runtime_glue())

    def test_read_artifact(self, tmp_path, fake_compiler):
        slot = tmp_path / "build" / "slot"
        slot.mkdir(parents=True)
        (slot / "main.wasm").write_bytes(b"\x00asm")
        resolver = VirtualModuleResolver(tmp_path / "build", fake_compiler)
        assert asyncio.run(resolver.read_artifact("/@vite-golang/slot/main.wasm")) == b"\x00asm"

    def test_read_missing_artifact(self, tmp_path, fake_compiler):
        resolver = VirtualModuleResolver(tmp_path / "build", fake_compiler)
        with pytest.raises(ArtifactNotFoundError):
            asyncio.run(resolver.read_artifact("/@vite-golang/slot/main.wasm"))


class TestArtifactUrl:
    """Test the URL form of artifact ids."""

    def test_plain_slot_unchanged(self):
        assert artifact_url("slot_1234", "main.wasm") == "/@vite-golang/slot_1234/main.wasm"

    def test_url_special_characters_encoded(self):
        url = artifact_url("home_a#b?c%41 d_js_1234abcd", "main.wasm")
        assert url == "/@vite-golang/home_a%23b%3Fc%2541%20d_js_1234abcd/main.wasm"

    def test_decoded_url_resolves_to_slot(self):
        slot = "C:_Users_josé_math_js_1234abcd"
        decoded = unquote(artifact_url(slot, "main.wasm"))
        assert decoded == artifact_id(slot, "main.wasm")
        assert resolve_virtual_module(decoded, "/build") == Path("/build", slot, "main.wasm")
