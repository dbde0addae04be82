from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class BinaryEntry:
    """An app binary (.aab or .apk) and its optional ProGuard mapping."""

    file_path: str
    mapping_path: str = ""

    @property
    def has_mapping(self) -> bool:
        return self.mapping_path != ""


@dataclass(frozen=True, slots=True)
class PublishInput:
    """Unvalidated publish settings, as assembled from flags and config file."""

    package_name: str
    track: str
    credentials_path: str | None
    binaries: tuple[BinaryEntry, ...]
    is_apk: bool = False
    verbose: bool = False


@dataclass(frozen=True, slots=True)
class PublishRequest:
    """Validated publish request.

    Only ``validate_request`` builds these, so holders can rely on a trimmed
    package name, an allowed lower-case track and binaries that existed at
    validation time.
    """

    package_name: str
    track: str
    credentials_path: str | None
    binaries: tuple[BinaryEntry, ...]
    is_apk: bool
    verbose: bool


@dataclass(frozen=True, slots=True)
class UploadResult:
    version_code: int
    sha256: str


@dataclass(frozen=True, slots=True)
class PublishOutcome:
    edit_id: str
    version_codes: tuple[int, ...]


class EditState(Enum):
    OPEN = "open"
    UPLOADING = "uploading"
    VALIDATED = "validated"
    COMMITTED = "committed"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in (EditState.COMMITTED, EditState.ABORTED)


_TRANSITIONS: dict[EditState, frozenset[EditState]] = {
    EditState.OPEN: frozenset({EditState.UPLOADING, EditState.ABORTED}),
    EditState.UPLOADING: frozenset({EditState.VALIDATED, EditState.ABORTED}),
    EditState.VALIDATED: frozenset({EditState.COMMITTED, EditState.ABORTED}),
    EditState.COMMITTED: frozenset(),
    EditState.ABORTED: frozenset(),
}


def can_transition(current: EditState, target: EditState) -> bool:
    return target in _TRANSITIONS[current]
