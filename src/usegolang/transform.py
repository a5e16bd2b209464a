"""
Transform orchestration - turns a "use golang" module into its JavaScript glue
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .build_manager import DTS_FILENAME, WASM_FILENAME, BuildManager
from .codegen import ExportedFunction, generate_dts, generate_js_wrapper, parse_go_functions
from .compiler.tinygo import TinyGoCompiler
from .detector import detect_go_directive, extract_go_code
from .errors import TransformError
from .file_utils import slot_name
from .go_wrapper import parse_imports, wrap_go_code

logger = logging.getLogger(__name__)


@dataclass
class TransformContext:
    """Collaborators shared by every transform of a build"""
    build_manager: BuildManager
    compiler: TinyGoCompiler
    project_root: Union[str, Path]
    generate_types: bool = False
    validate_exports: bool = False


@dataclass
class TransformResult:
    """Replacement code for a module plus what was built for it"""
    code: str
    slot_id: str
    wasm_file: Path
    map: None = None
    dts_file: Optional[Path] = None
    functions: List[ExportedFunction] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


async def transform_go_directive(code: str, module_id: str,
                                 context: TransformContext) -> Optional[TransformResult]:
    """
    Compile the Go code embedded in a module and return its replacement

    Args:
        code: Module source
        module_id: Absolute module path; determines the build slot
        context: Build collaborators

    Returns:
        TransformResult, or None when the module has no "use golang" directive

    Raises:
        TransformError: If any stage fails; wraps the stage's error
    """
    if not detect_go_directive(code):
        return None

    logger.info(f"[use-golang] Processing {module_id}")

    try:
        go_code = extract_go_code(code)

        slot_id = slot_name(module_id)
        subdir = await context.build_manager.get_subdirectory(slot_id)

        wrapped_go = wrap_go_code(go_code)
        imports = parse_imports(wrapped_go)
        if imports:
            logger.debug(f"[use-golang] {module_id} imports {', '.join(imports)}")

        functions: List[ExportedFunction] = []
        dts_file = None

        async with context.build_manager.lock(slot_id):
            go_file = await context.build_manager.write_go_file(subdir, wrapped_go)

            wasm_file = subdir / WASM_FILENAME
            result = await context.compiler.compile(go_file, wasm_file)

            if context.generate_types or context.validate_exports:
                functions = parse_go_functions(wrapped_go)

            if context.generate_types:
                dts_file = subdir / DTS_FILENAME
                await asyncio.to_thread(dts_file.write_text, generate_dts(functions), encoding="utf-8")

        exports = [f.name for f in functions] if context.validate_exports else None
        js_wrapper = generate_js_wrapper(
            slot_id,
            context.project_root,
            exports=exports,
            build_dir=context.build_manager.get_build_dir(),
        )
    except Exception as e:
        raise TransformError(module_id, e) from e

    return TransformResult(
        code=js_wrapper,
        slot_id=slot_id,
        wasm_file=result.wasm_file,
        dts_file=dts_file,
        functions=functions,
        warnings=result.warnings,
    )
