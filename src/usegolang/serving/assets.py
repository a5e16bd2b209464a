"""
Emitted assets for static bundles
"""

import hashlib
import logging
from pathlib import Path, PurePosixPath
from typing import Dict, Union

logger = logging.getLogger(__name__)

ASSETS_DIR = "assets"
HASH_LENGTH = 8


def content_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()[:HASH_LENGTH]


class AssetEmitter:
    """
    Collects files emitted during bundling under content-hashed names.

    Emitting the same bytes twice under the same name yields the same file.
    """

    def __init__(self, assets_dir: str = ASSETS_DIR):
        self.assets_dir = assets_dir
        self.assets: Dict[str, bytes] = {}

    def emit(self, name: str, data: Union[bytes, str]) -> str:
        """
        Register an asset

        Args:
            name: Original file name; its stem and suffix are kept
            data: File contents

        Returns:
            Final file name relative to the bundle root
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        original = PurePosixPath(name)
        file_name = f"{self.assets_dir}/{original.stem}-{content_hash(data)}{original.suffix}"
        if file_name not in self.assets:
            logger.debug(f"[use-golang] Emitted asset {file_name} ({len(data)} bytes)")
        self.assets[file_name] = data
        return file_name

    def write(self, out_dir: Union[str, Path]) -> Dict[str, Path]:
        """Write every emitted asset below out_dir"""
        written = {}
        for file_name, data in self.assets.items():
            target = Path(out_dir) / file_name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
            written[file_name] = target
        return written
