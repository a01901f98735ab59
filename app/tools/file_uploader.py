# In app/tools/file_uploader.py
import logging
import os
import re
import uuid
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredObject:
    """Result of a put: the opaque key and a URL the file can be fetched from."""
    key: str
    location: str
    bucket: str


def _safe_filename(filename: str) -> str:
    name = os.path.basename(filename or "") or "upload"
    return re.sub(r"[^A-Za-z0-9._-]", "_", name)


class LocalObjectStorage:
    """Mock S3: objects are written under <root>/<bucket>/ and served at /<root>/...

    Keys are `<uuid>-<filename>` so repeated uploads never collide.
    """

    def __init__(self, root: str, bucket: str, url_prefix: str = "/local_storage"):
        self.root = Path(root)
        self.bucket = bucket
        self.url_prefix = url_prefix.rstrip("/")

    @property
    def bucket_path(self) -> Path:
        return self.root / self.bucket

    def path_for(self, key: str) -> Path:
        return self.bucket_path / key

    def put(self, content: bytes, filename: str) -> StoredObject:
        key = f"{uuid.uuid4()}-{_safe_filename(filename)}"
        self.bucket_path.mkdir(parents=True, exist_ok=True)
        self.path_for(key).write_bytes(content)
        logger.info(f"[Storage] Stored {len(content)} bytes at {self.bucket}/{key}")
        return StoredObject(
            key=key,
            location=f"{self.url_prefix}/{self.bucket}/{key}",
            bucket=self.bucket,
        )
