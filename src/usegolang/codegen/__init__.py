"""
Code generation for compiled Go modules: TypeScript declarations and the
JavaScript glue that replaces a "use golang" module.
"""

from .type_generator import (
    ExportedFunction,
    Parameter,
    generate_dts,
    go_type_to_ts,
    parse_go_functions,
)
from .js_wrapper import generate_js_wrapper

__all__ = [
    "ExportedFunction",
    "Parameter",
    "generate_dts",
    "generate_js_wrapper",
    "go_type_to_ts",
    "parse_go_functions",
]
