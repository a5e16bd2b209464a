"""
use-golang - Embed Go in JavaScript modules, compiled to WebAssembly with TinyGo

A module that starts with the "use golang" directive is replaced by generated
glue that instantiates the compiled WebAssembly binary and default-exports the
functions the Go program installs.
"""

from .config import PluginOptions, load_options
from .errors import UseGolangError, TransformError
from .plugin import GolangPlugin
from .transform import TransformContext, TransformResult, transform_go_directive

__version__ = "0.1.0"

__all__ = [
    "GolangPlugin",
    "PluginOptions",
    "TransformContext",
    "TransformError",
    "TransformResult",
    "UseGolangError",
    "load_options",
    "transform_go_directive",
]
