"""Tests for the host-facing plugin hooks."""
import asyncio

import pytest
from fastapi import FastAPI

from usegolang.config import PluginOptions
from usegolang.errors import TinyGoNotInstalledError
from usegolang.plugin import GolangPlugin
from usegolang.serving import BundleStrategy, DevServerStrategy, WasmArtifactMiddleware

from conftest import ADD_MODULE, WASM_EXEC_JS, FakeTinyGo


@pytest.fixture
def options():
    return PluginOptions(generate_types=True, optimization="s")


class TestGolangPlugin:
    """Test GolangPlugin."""

    def test_strategy_selected_from_mode(self, options, project_root, fake_compiler):
        serve = GolangPlugin(options, project_root, mode="serve", compiler=fake_compiler)
        build = GolangPlugin(options, project_root, mode="build", compiler=fake_compiler)
        assert isinstance(serve.strategy, DevServerStrategy)
        assert isinstance(build.strategy, BundleStrategy)

    def test_unknown_mode(self, options, project_root):
        with pytest.raises(ValueError):
            GolangPlugin(options, project_root, mode="watch")

    def test_compiler_from_options(self, options, project_root):
        plugin = GolangPlugin(options, project_root)
        assert plugin.compiler.optimization == "s"
        assert plugin.build_manager.get_build_dir() == (project_root / ".use-golang").resolve()

    def test_build_start(self, options, project_root, fake_compiler):
        plugin = GolangPlugin(options, project_root, compiler=fake_compiler)
        version = asyncio.run(plugin.build_start())
        assert "tinygo version" in version
        assert plugin.build_manager.get_build_dir().is_dir()

    def test_build_start_without_tinygo(self, options, project_root, tinygo_root):
        plugin = GolangPlugin(options, project_root, compiler=FakeTinyGo(tinygo_root, installed=False))
        with pytest.raises(TinyGoNotInstalledError):
            asyncio.run(plugin.build_start())

    def test_resolve_id(self, options, project_root, fake_compiler):
        plugin = GolangPlugin(options, project_root, compiler=fake_compiler)
        assert plugin.resolve_id("/@vite-golang/wasm_exec.js") == "/@vite-golang/wasm_exec.js"
        assert plugin.resolve_id("/src/main.js") is None

    def test_load_glue(self, options, project_root, fake_compiler):
        plugin = GolangPlugin(options, project_root, compiler=fake_compiler)
        assert asyncio.run(plugin.load("/@vite-golang/wasm_exec.js")) == WASM_EXEC_JS
        assert asyncio.run(plugin.load("/src/main.js")) is None

    def test_configure_server(self, options, project_root, fake_compiler):
        plugin = GolangPlugin(options, project_root, compiler=fake_compiler)
        app = FastAPI()
        plugin.configure_server(app)
        assert any(m.cls is WasmArtifactMiddleware for m in app.user_middleware)

    def test_build_mode_pipeline(self, options, project_root, fake_compiler):
        plugin = GolangPlugin(options, project_root, mode="build", compiler=fake_compiler)
        module_id = str(project_root / "src" / "math.js")

        async def run():
            await plugin.build_start()
            result = await plugin.transform(ADD_MODULE, module_id)
            return await plugin.render_chunk(result.code)

        code = asyncio.run(run())
        assert "/@vite-golang/" not in code
        assert any(name.endswith(".wasm") for name in plugin.emitter.assets)
        assert any(name.startswith("assets/wasm_exec-") for name in plugin.emitter.assets)

    @pytest.mark.parametrize("module_id", [
        "/home/me/My Project/src/math.js",
        "/home/josé/src/math.js",
        "/home/me/@work/math.js",
        "C:\\Users\\me\\proj\\math.js",
        "/home/me/a#b?c%41/math.js",
    ])
    def test_build_mode_unusual_paths(self, options, project_root, fake_compiler, module_id):
        plugin = GolangPlugin(options, project_root, mode="build", compiler=fake_compiler)

        async def run():
            await plugin.build_start()
            result = await plugin.transform(ADD_MODULE, module_id)
            return await plugin.render_chunk(result.code)

        code = asyncio.run(run())
        wasm_names = [name for name in plugin.emitter.assets if name.endswith(".wasm")]
        assert "/@vite-golang/" not in code
        assert len(wasm_names) == 1
        assert f'fetch("/{wasm_names[0]}")' in code

    def test_handle_hot_update(self, options, project_root, fake_compiler):
        plugin = GolangPlugin(options, project_root, compiler=fake_compiler)
        module = project_root / "src" / "math.js"
        module.write_text(ADD_MODULE)
        sent = []
        assert asyncio.run(plugin.handle_hot_update(module, sent.append)) == []
        assert sent[0]["type"] == "full-reload"
