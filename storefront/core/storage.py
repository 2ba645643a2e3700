"""
Cart persistence.

A small key/value storage abstraction (memory or one JSON file per key)
and the CartStore that reads and writes a CartSnapshot under a fixed key.
"""

import os
import re
import logging
import tempfile
from abc import ABC, abstractmethod
from typing import Optional

from ..models.cart import CartSnapshot

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "restaurant_cart_v1"


class CartStorage(ABC):
    """String key/value storage"""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...


class MemoryStorage(CartStorage):
    """In-memory storage, lost on restart"""

    def __init__(self):
        self.values: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.values[key] = value

    def remove_item(self, key: str) -> None:
        self.values.pop(key, None)


class FileStorage(CartStorage):
    """One file per key inside a directory"""

    _UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")

    def __init__(self, directory: str):
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, self._UNSAFE_CHARS.sub("_", key) + ".json")

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def set_item(self, key: str, value: str) -> None:
        # Write to a temp file first so readers never see half a snapshot
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_path, self._path(key))
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        if os.path.exists(path):
            os.remove(path)


class CartStore:
    """Loads and saves one cart snapshot under a storage key"""

    def __init__(self, storage: CartStorage, key: str = DEFAULT_STORAGE_KEY):
        self.storage = storage
        self.key = key

    def load(self) -> CartSnapshot:
        """
        Read the stored snapshot.

        A missing key, an unreadable value or invalid data all produce an
        empty snapshot so the cart can always be rendered.
        """
        try:
            raw = self.storage.get_item(self.key)
            if not raw:
                return CartSnapshot()
            return CartSnapshot.model_validate_json(raw)
        except (OSError, ValueError) as e:
            logger.warning(f"[cart] Failed to hydrate {self.key} from storage: {e}")
            return CartSnapshot()

    def save(self, snapshot: CartSnapshot) -> None:
        """Write the full snapshot, replacing whatever was stored"""
        self.storage.set_item(self.key, snapshot.to_json())

    def clear(self) -> None:
        self.storage.remove_item(self.key)


def create_storage(backend: str, directory: Optional[str] = None) -> CartStorage:
    """Build the configured storage backend"""
    if backend == "file":
        if not directory:
            raise ValueError("cart_storage_dir is required for file storage")
        logger.info(f"Cart storage: files in {directory}")
        return FileStorage(directory)
    if backend != "memory":
        raise ValueError(f"Unknown cart storage backend: {backend}")
    logger.info("Cart storage: memory")
    return MemoryStorage()
