"""
use-golang compiler adapters - TinyGo to WebAssembly
"""

from .tinygo import TinyGoCompiler, CompileResult, OPTIMIZATION_LEVELS

__all__ = ['TinyGoCompiler', 'CompileResult', 'OPTIMIZATION_LEVELS']
