"""Persistent key/value store for deployment state"""

import asyncio
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

import aiofiles

from ..api.exceptions import StateStoreError
from ..constants import STATE_VERSION

logger = logging.getLogger(__name__)


class StateStore:
    """Site identifiers remembered across runs

    The file is loaded lazily on first access. Writes to one key are
    serialised with a per-key lock; loading and flushing hold the store
    lock. Flushing writes a temporary file and replaces the target.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._sites: Dict[str, Dict[str, Any]] = {}
        self._loaded = False
        self._dirty = False
        self._store_lock = asyncio.Lock()
        self._key_locks: Dict[str, asyncio.Lock] = {}

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._key_locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._key_locks[key] = lock
        return lock

    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return

        async with self._store_lock:
            if self._loaded:
                return

            self._sites = await self._read_file()
            self._loaded = True

    async def _read_file(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.exists():
            return {}

        try:
            async with aiofiles.open(self.path, 'r', encoding='utf-8') as f:
                content = await f.read()
        except OSError as e:
            raise StateStoreError(f"Cannot read state file {self.path}: {e}")

        if not content.strip():
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise StateStoreError(f"Corrupt state file {self.path}: {e}")

        sites = data.get("sites") if isinstance(data, dict) else None
        if not isinstance(sites, dict):
            raise StateStoreError(f"Unexpected state file layout in {self.path}")

        return {k: v for k, v in sites.items() if isinstance(v, dict)}

    async def get(self, key: str) -> Optional[str]:
        """Get the site id stored under a key"""
        await self._ensure_loaded()

        entry = self._sites.get(key)
        if not entry:
            return None

        site_id = entry.get("site_id")
        return site_id or None

    async def upsert(self, key: str, site_id: str) -> bool:
        """
        Insert or update a site id

        Args:
            key: State key
            site_id: Site identifier

        Returns:
            True if the stored value changed
        """
        if not site_id:
            raise ValueError("site_id must not be empty")

        await self._ensure_loaded()

        async with self._lock_for(key):
            current = self._sites.get(key, {}).get("site_id")
            if current == site_id:
                return False

            self._sites[key] = {
                "site_id": site_id,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }
            self._dirty = True

        logger.debug(f"State updated for '{key}'")
        return True

    async def remove(self, key: str) -> bool:
        """Remove a key, returning whether it existed"""
        await self._ensure_loaded()

        async with self._lock_for(key):
            if key not in self._sites:
                return False
            del self._sites[key]
            self._dirty = True

        return True

    async def clear(self) -> int:
        """Remove every key, returning how many were removed"""
        await self._ensure_loaded()

        async with self._store_lock:
            count = len(self._sites)
            self._sites = {}
            self._dirty = self._dirty or count > 0

        return count

    async def all(self) -> Dict[str, Dict[str, Any]]:
        """Snapshot of every stored entry"""
        await self._ensure_loaded()
        return {k: dict(v) for k, v in self._sites.items()}

    async def flush(self) -> None:
        """Write pending changes to disk"""
        await self._ensure_loaded()

        async with self._store_lock:
            if not self._dirty:
                return

            payload = {
                "version": STATE_VERSION,
                "sites": self._sites,
            }

            tmp_path = self.path.with_name(self.path.name + ".tmp")

            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                async with aiofiles.open(tmp_path, 'w', encoding='utf-8') as f:
                    await f.write(json.dumps(payload, indent=2, sort_keys=True))
                os.replace(tmp_path, self.path)
            except OSError as e:
                raise StateStoreError(f"Cannot write state file {self.path}: {e}")

            self._dirty = False

        logger.debug(f"State flushed to {self.path}")
