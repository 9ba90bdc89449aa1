"""Key-value persistence for match state.

Each value is one serialized blob written in a single call, so a reader
always sees either the previous or the next complete snapshot.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Protocol

from google.api_core.exceptions import NotFound
from google.cloud import storage

from riichi_tally.config import Settings, settings
from riichi_tally.exceptions import StorageNotConfiguredError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryStore:
    def __init__(self) -> None:
        self._items: dict[str, str] = {}
        self._lock = Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)


class GCSStore:
    """One JSON object per key under ``<prefix>/`` in a bucket."""

    def __init__(self, bucket_name: str | None = None, prefix: str | None = None) -> None:
        self.bucket_name = bucket_name or settings.gcs_bucket_name
        self.prefix = (prefix or settings.gcs_prefix).strip("/")
        self._client: storage.Client | None = None

    def _get_client(self) -> storage.Client:
        if self._client is None:
            self._client = storage.Client()
        return self._client

    def _blob(self, key: str) -> storage.Blob:
        if not self.bucket_name:
            raise StorageNotConfiguredError("GCS bucket is not configured")
        bucket = self._get_client().bucket(self.bucket_name)
        return bucket.blob(f"{self.prefix}/{key}.json")

    def get(self, key: str) -> str | None:
        try:
            return self._blob(key).download_as_text()
        except NotFound:
            return None

    def set(self, key: str, value: str) -> None:
        self._blob(key).upload_from_string(value, content_type="application/json")

    def remove(self, key: str) -> None:
        try:
            self._blob(key).delete()
        except NotFound:
            logger.debug("Nothing stored under %s", key)


def build_store(config: Settings | None = None) -> KeyValueStore:
    config = config or settings
    if config.storage_backend == "gcs":
        return GCSStore(bucket_name=config.gcs_bucket_name, prefix=config.gcs_prefix)
    return InMemoryStore()
