from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from snapcrawler.core import STORAGE_DIR, PUBLIC_BASE_URL, logger
from snapcrawler.errors import StorageFailure


class BlobStore(ABC):
    """
    Abstract object store for captured artifacts.
    Keys are flat "<prefix>/<name>" strings; every object gets a stable public reference.
    """
    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> str:
        """
        Persist data under key and return its public reference.
        Raises StorageFailure.
        """
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the object's bytes, or None if it does not exist."""
        pass


class LocalBlobStore(BlobStore):
    """
    Filesystem-backed store. Objects live under root/<key> and are served
    (by whatever fronts the directory) at public_base_url/<key>.
    """

    def __init__(self, root=STORAGE_DIR, public_base_url=PUBLIC_BASE_URL):
        self.root = Path(root).resolve()
        self.public_base_url = public_base_url.rstrip("/")

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root not in path.parents:
            raise StorageFailure(f"key escapes storage root: {key!r}")
        return path

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def put(self, key, data, content_type):
        if isinstance(data, str):
            data = data.encode("utf-8")
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageFailure(f"could not write {key}: {e.strerror or e}") from e
        logger.info(f"[STORAGE] saved {key} ({content_type}, {len(data)} bytes)", extra={'context': 'storage'})
        return self.public_url(key)

    def get(self, key):
        path = self._path(key)
        if not path.is_file():
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageFailure(f"could not read {key}: {e.strerror or e}") from e
