"""
Artifact serving for the dev server and for static bundles
"""

from .assets import AssetEmitter
from .middleware import WasmArtifactMiddleware, WASM_MEDIA_TYPE
from .strategies import ArtifactServingStrategy, BundleStrategy, DevServerStrategy

__all__ = [
    "ArtifactServingStrategy",
    "AssetEmitter",
    "BundleStrategy",
    "DevServerStrategy",
    "WASM_MEDIA_TYPE",
    "WasmArtifactMiddleware",
]
