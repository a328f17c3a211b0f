# testimony_core/common/media.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from django.core.files.storage import default_storage
from django.utils.text import get_valid_filename

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredBlob:
    path: str
    url: str


def build_blob_path(prefix: str, filename: str, *, owner_id=None, suffix: str = "") -> str:
    """
    Namespaced blob path: <prefix>/<owner_id>/<timestamp_ms>_<suffix><name>.
    Owner + timestamp keep concurrent uploads from colliding.
    """
    name = get_valid_filename(filename or "upload") or "upload"
    stamp = int(time.time() * 1000)
    parts = [prefix]
    if owner_id is not None:
        parts.append(str(owner_id))
    parts.append(f"{stamp}_{suffix}{name}")
    return "/".join(parts)


def upload_blob(path: str, uploaded_file) -> StoredBlob:
    """
    Store bytes in the blob store and return a fetchable URL.
    The storage backend may alter the path to avoid overwriting.
    """
    saved_path = default_storage.save(path, uploaded_file)
    return StoredBlob(path=saved_path, url=default_storage.url(saved_path))


def discard_blobs(blobs: list[StoredBlob]) -> None:
    """
    Compensating cleanup after a failed record insert. Best-effort.
    """
    for blob in blobs:
        try:
            default_storage.delete(blob.path)
        except Exception:
            logger.warning("Could not delete orphaned blob %s", blob.path, exc_info=True)


def iter_blob_paths(prefix: str):
    """
    Walk every stored file below `prefix` (storage-relative paths).
    """
    if not default_storage.exists(prefix):
        return
    dirs, files = default_storage.listdir(prefix)
    for name in files:
        yield f"{prefix}/{name}"
    for d in dirs:
        yield from iter_blob_paths(f"{prefix}/{d}")
