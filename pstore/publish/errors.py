"""Error types for publishing.

Each failure is a frozen dataclass; ``PublishError`` is the union the
orchestrator returns and ``output.errors`` renders.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

FileRole = Literal["binary", "mapping", "credentials"]
CatalogOperation = Literal[
    "connect",
    "create_edit",
    "validate_edit",
    "commit_edit",
    "delete_edit",
    "upload_bundle",
    "upload_apk",
    "upload_proguard_mapping",
    "create_draft",
]


@dataclass(frozen=True, slots=True)
class InvalidPackageName:
    value: str


@dataclass(frozen=True, slots=True)
class UnsupportedTrack:
    track: str
    allowed: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class NoFiles:
    pass


@dataclass(frozen=True, slots=True)
class FileMissing:
    path: str
    role: FileRole


@dataclass(frozen=True, slots=True)
class NoService:
    pass


@dataclass(frozen=True, slots=True)
class FileUnreadable:
    path: str
    reason: str


@dataclass(frozen=True, slots=True)
class IntegrityMismatch:
    path: str
    local: str
    remote: str


@dataclass(frozen=True, slots=True)
class RemoteCallFailed:
    operation: CatalogOperation
    message: str
    status: int = 0  # HTTP status, 0 when the call never got a response


ValidationError = InvalidPackageName | UnsupportedTrack | NoFiles | FileMissing

PublishError = ValidationError | NoService | FileUnreadable | IntegrityMismatch | RemoteCallFailed
