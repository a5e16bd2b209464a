"""
Build slot management - one directory per source module under the build root
"""

import asyncio
import logging
import shutil
import time
from pathlib import Path
from typing import Dict, List, Union

from .file_utils import slot_name

logger = logging.getLogger(__name__)

GO_FILENAME = "main.go"
WASM_FILENAME = "main.wasm"
DTS_FILENAME = "types.d.ts"


class BuildManager:
    """
    Owns the build root and the per-module slots inside it.

    A slot is named from the module path only, so recompiling a module
    overwrites the files of its previous build. Writers of the same slot are
    serialized through ``lock(slot_id)``.
    """

    def __init__(self, build_dir: Union[str, Path]):
        self.build_dir = Path(build_dir)
        self._locks: Dict[str, asyncio.Lock] = {}

    async def init(self) -> None:
        """Create the build root (and parents) if missing"""
        await asyncio.to_thread(self.build_dir.mkdir, parents=True, exist_ok=True)

    async def exists(self) -> bool:
        return await asyncio.to_thread(self.build_dir.is_dir)

    async def get_subdirectory(self, slot_id: str) -> Path:
        """Return the slot directory, creating it on first use"""
        subdir = self.build_dir / slot_id
        await asyncio.to_thread(subdir.mkdir, parents=True, exist_ok=True)
        return subdir

    async def slot_for(self, module_id: str) -> Path:
        return await self.get_subdirectory(slot_name(module_id))

    async def write_go_file(self, subdir: Union[str, Path], go_code: str) -> Path:
        """Write (or overwrite) the slot's main.go"""
        go_file = Path(subdir) / GO_FILENAME
        await asyncio.to_thread(go_file.write_text, go_code, encoding="utf-8")
        return go_file

    def lock(self, slot_id: str) -> asyncio.Lock:
        """Mutual-exclusion region for everything written into one slot"""
        lock = self._locks.get(slot_id)
        if lock is None:
            lock = self._locks[slot_id] = asyncio.Lock()
        return lock

    def get_build_dir(self) -> Path:
        return self.build_dir

    def list_slots(self) -> List[Path]:
        if not self.build_dir.is_dir():
            return []
        return sorted(p for p in self.build_dir.iterdir() if p.is_dir())

    def prune(self, max_age_days: float) -> List[Path]:
        """
        Remove slots whose newest file is older than ``max_age_days``

        Returns:
            The removed slot directories
        """
        cutoff = time.time() - max_age_days * 86400
        removed = []

        for slot in self.list_slots():
            mtimes = [p.stat().st_mtime for p in slot.rglob("*") if p.is_file()]
            newest = max(mtimes, default=slot.stat().st_mtime)
            if newest < cutoff:
                shutil.rmtree(slot)
                removed.append(slot)
                logger.info(f"[use-golang] Removed stale build slot {slot.name}")

        return removed

    def clean(self) -> bool:
        """Remove the whole build root; returns False if there was nothing to remove"""
        if not self.build_dir.exists():
            return False
        shutil.rmtree(self.build_dir)
        return True
