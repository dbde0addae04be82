"""Upload stream wrappers.

SourceReader sits between an open file and the catalog client and remembers
a local read failure, so the orchestrator can report it as a file problem
even when the client turns it into a remote error. ProgressReader adds
progress: at most once per interval it tells a callback how far the
transfer has got. Reporting is advisory: a failing callback is switched off
and the upload carries on.
"""

from __future__ import annotations

import os
import time
from typing import TYPE_CHECKING, BinaryIO

from pstore.publish.config import PROGRESS_INTERVAL_SECONDS

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = ["ProgressReader", "SourceReader", "format_bytes"]


class SourceReader:
    """Readable, seekable stream wrapper that records the first local read error.

    The error is re-raised to the caller unchanged and kept in ``read_error``.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self.read_error: OSError | None = None

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return self._stream.seekable()

    def tell(self) -> int:
        return self._stream.tell()

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        return self._stream.seek(offset, whence)

    def read(self, size: int = -1) -> bytes:
        try:
            return self._stream.read(size)
        except OSError as e:
            if self.read_error is None:
                self.read_error = e
            raise


class ProgressReader(SourceReader):
    """SourceReader that reports transferred bytes.

    The reported count is the furthest position read so far, so it never goes
    backwards when a resumable upload seeks back to resend a chunk.

    Usage:
        with fs.open_binary(path) as f:
            reader = ProgressReader(f, total=size, report=lambda done, total: ...)
            client.upload_bundle(reader, package_name, edit_id)
    """

    def __init__(
        self,
        stream: BinaryIO,
        *,
        total: int,
        report: Callable[[int, int], None],
        interval: float = PROGRESS_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(stream)
        self._total = max(0, total)
        self._report = report
        self._interval = interval
        self._clock = clock
        self._last_report = clock()
        self._transferred = 0
        self._reporting = True
        self._finished = False

    @property
    def total(self) -> int:
        return self._total

    @property
    def transferred(self) -> int:
        return self._transferred

    def read(self, size: int = -1) -> bytes:
        data = super().read(size)
        if data:
            self._transferred = max(self._transferred, self._stream.tell())

        done = not data or (self._total > 0 and self._transferred >= self._total)
        now = self._clock()
        if done and not self._finished:
            self._finished = True
            self._emit(now)
        elif not done and now - self._last_report >= self._interval:
            self._emit(now)
        return data

    def _emit(self, now: float) -> None:
        self._last_report = now
        if not self._reporting:
            return
        shown = min(self._transferred, self._total) if self._total else self._transferred
        try:
            self._report(shown, self._total)
        except Exception:
            # Progress output must never fail the transfer.
            self._reporting = False


def format_bytes(count: int) -> str:
    """Format a byte count the way upload progress lines show it."""
    value = float(count)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            if unit == "B":
                return f"{int(value)} {unit}"
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{count} B"
