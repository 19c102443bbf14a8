"""
File-backed key-value store for the session payload.

The file holds one JSON object mapping keys to string values. Writes go to a
sibling temp file which then replaces the original.
"""

import json
import logging
from typing import Dict, Iterable, Optional

import anyio

from ims.core.errors import SessionStorageError

logger = logging.getLogger(__name__)


class JsonFileStore:
    def __init__(self, path: str):
        self.path = anyio.Path(path)

    async def _read_items(self) -> Dict[str, str]:
        if not await self.path.exists():
            return {}
        raw = await self.path.read_text(encoding="utf-8")
        items = json.loads(raw) if raw.strip() else {}
        if not isinstance(items, dict):
            raise ValueError(f"Expected a JSON object in {self.path}")
        return items

    async def _write_items(self, items: Dict[str, str]):
        await self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        await tmp_path.write_text(json.dumps(items), encoding="utf-8")
        await tmp_path.replace(self.path)

    async def get_item(self, key: str) -> Optional[str]:
        try:
            items = await self._read_items()
        except (OSError, ValueError, RecursionError) as e:
            raise SessionStorageError(f"Failed to read {self.path}: {e}") from e
        value = items.get(key)
        return value if isinstance(value, str) else None

    async def _read_items_or_empty(self) -> Dict[str, str]:
        try:
            return await self._read_items()
        except (ValueError, RecursionError):
            logger.warning(f"Discarding unreadable store contents at {self.path}")
            return {}

    async def set_items(self, values: Dict[str, str]):
        """Write several keys in one replace of the file"""
        try:
            items = await self._read_items_or_empty()
            items.update(values)
            await self._write_items(items)
        except OSError as e:
            raise SessionStorageError(f"Failed to write {self.path}: {e}") from e

    async def set_item(self, key: str, value: str):
        await self.set_items({key: value})

    async def remove_items(self, keys: Iterable[str]):
        try:
            if not await self.path.exists():
                return
            items = await self._read_items_or_empty()
            for key in keys:
                items.pop(key, None)
            await self._write_items(items)
        except OSError as e:
            raise SessionStorageError(f"Failed to write {self.path}: {e}") from e

    async def remove_item(self, key: str):
        await self.remove_items([key])
