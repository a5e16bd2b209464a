"""
GolangPlugin - the hooks a host build tool calls

The host owns the lifecycle: it calls ``build_start`` once, then
``resolve_id``/``load``/``transform`` per module, ``configure_server`` when
running a dev server, ``render_chunk`` when finalizing a bundle and
``handle_hot_update`` when a watched file changes.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

from fastapi import FastAPI

from .build_manager import BuildManager
from .compiler.tinygo import TinyGoCompiler
from .config import PluginOptions
from .errors import TinyGoNotInstalledError
from .hmr import ReloadSender, handle_go_hot_update
from .serving import ArtifactServingStrategy, AssetEmitter, BundleStrategy, DevServerStrategy
from .transform import TransformContext, TransformResult, transform_go_directive
from .virtual_modules import VirtualModuleResolver, is_virtual_module

logger = logging.getLogger(__name__)

BuildMode = Literal["serve", "build"]


class GolangPlugin:
    """Embed Go in JavaScript modules, compiled to WebAssembly"""

    name = "use-golang"

    def __init__(self, options: Optional[PluginOptions] = None,
                 project_root: Union[str, Path] = ".",
                 mode: BuildMode = "serve",
                 emitter: Optional[AssetEmitter] = None,
                 compiler: Optional[TinyGoCompiler] = None):
        self.options = options or PluginOptions()
        self.project_root = Path(project_root).resolve()
        self.mode = mode

        self.build_manager = BuildManager(self.options.resolve_build_dir(self.project_root))
        self.compiler = compiler or TinyGoCompiler(
            tinygo_path=self.options.tinygo_path,
            optimization=self.options.optimization,
        )
        self.resolver = VirtualModuleResolver(self.build_manager.get_build_dir(), self.compiler)
        self.emitter = emitter or AssetEmitter()
        self.strategy = self._create_strategy(mode)

        self.context = TransformContext(
            build_manager=self.build_manager,
            compiler=self.compiler,
            project_root=self.project_root,
            generate_types=self.options.generate_types,
            validate_exports=self.options.validate_exports,
        )

    def _create_strategy(self, mode: BuildMode) -> ArtifactServingStrategy:
        if mode == "serve":
            return DevServerStrategy(self.resolver)
        if mode == "build":
            return BundleStrategy(self.resolver, self.emitter, base=self.options.base)
        raise ValueError(f"Unknown build mode: {mode!r}")

    async def build_start(self) -> str:
        """
        Prepare the build root and check the toolchain

        Returns:
            TinyGo version string

        Raises:
            TinyGoNotInstalledError: If TinyGo is not available; the build
                must not proceed
        """
        await self.build_manager.init()

        if not await self.compiler.is_installed():
            raise TinyGoNotInstalledError(self.compiler.tinygo_path)

        version = await self.compiler.get_version()
        logger.info(f"[use-golang] Using {version}")
        logger.info(f"[use-golang] Build directory: {self.build_manager.get_build_dir()}")
        return version

    def resolve_id(self, module_id: str) -> Optional[str]:
        if is_virtual_module(module_id):
            return module_id
        return None

    async def load(self, module_id: str) -> Optional[str]:
        return await self.resolver.load(module_id)

    async def transform(self, code: str, module_id: str) -> Optional[TransformResult]:
        return await transform_go_directive(code, module_id, self.context)

    def configure_server(self, app: FastAPI) -> None:
        self.strategy.configure_server(app)

    async def render_chunk(self, code: str) -> str:
        return await self.strategy.finalize(code)

    async def handle_hot_update(self, file: Union[str, Path], send: ReloadSender) -> Optional[List[Any]]:
        return await handle_go_hot_update(file, send)

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "mode": self.mode,
            "tinygo_path": self.compiler.tinygo_path,
            "optimization": self.compiler.optimization,
            "build_dir": str(self.build_manager.get_build_dir()),
        }
