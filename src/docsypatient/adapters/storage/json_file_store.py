"""
JSON file implementation of KeyValueStore.
Keeps every key in one file and replaces the file atomically on each write.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, Optional

from ...application.ports.key_value_store import KeyValueStore
from ...core.exceptions import StorageError

logger = logging.getLogger(__name__)


async def run_blocking(func, *args, **kwargs):
    """
    Run a blocking function in an executor to avoid blocking the event loop.

    Args:
        func: The blocking function to run
        *args: Positional arguments for the function
        **kwargs: Keyword arguments for the function

    Returns:
        Result of the function call
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, lambda: func(*args, **kwargs))


class JsonFileKeyValueStore(KeyValueStore):
    """Durable store backed by a single JSON object file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(
                f"Failed to read state file: {e}", {"path": str(self.path)}
            ) from e
        if not isinstance(data, dict):
            raise StorageError("State file does not contain a JSON object", {"path": str(self.path)})
        return data

    def _write(self, data: Dict[str, str]) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(
                f"Failed to write state file: {e}", {"path": str(self.path)}
            ) from e

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            data = await run_blocking(self._read)
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            data = await run_blocking(self._read)
            data[key] = value
            await run_blocking(self._write, data)

    async def delete(self, key: str) -> None:
        await self.remove_many([key])

    async def remove_many(self, keys: Iterable[str]) -> None:
        keys = list(keys)
        async with self._lock:
            data = await run_blocking(self._read)
            if not any(key in data for key in keys):
                return
            for key in keys:
                data.pop(key, None)
            await run_blocking(self._write, data)
            logger.debug(f"Removed {len(keys)} keys from {self.path}")
