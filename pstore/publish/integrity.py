"""Content hashing used to verify uploads against the catalog's digest."""

from __future__ import annotations

import hashlib
from typing import BinaryIO

from pstore.publish.config import HASH_CHUNK_SIZE

__all__ = ["sha256_hex"]


def sha256_hex(stream: BinaryIO) -> str:
    """Return the lowercase hex SHA-256 of everything left in ``stream``.

    The stream is read to its end and left there; callers that upload the
    same handle afterwards must seek back to the start first.
    """
    h = hashlib.sha256()
    for chunk in iter(lambda: stream.read(HASH_CHUNK_SIZE), b""):
        h.update(chunk)
    return h.hexdigest()
