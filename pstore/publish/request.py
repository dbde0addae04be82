"""Publish request validation.

Turns raw publish settings into a PublishRequest before anything touches the
catalog, so an invalid request can never leave a half-built edit behind.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pstore.core.result import Err, Ok, Result
from pstore.platform.files import FileSystem
from pstore.publish.config import ALLOWED_TRACKS
from pstore.publish.errors import (
    FileMissing,
    InvalidPackageName,
    NoFiles,
    UnsupportedTrack,
    ValidationError,
)
from pstore.publish.model import BinaryEntry, PublishInput, PublishRequest

__all__ = ["collect_binaries", "normalize_track", "validate_request"]


def collect_binaries(
    binary_only: Iterable[str],
    binary_mappings: Mapping[str, str] | Iterable[tuple[str, str]],
) -> tuple[BinaryEntry, ...]:
    """Merge bare binary paths with ``path -> mapping`` pairs.

    A path given both ways keeps its mapping. Mapped entries come first in the
    order given, then bare paths that were not already listed.
    """
    pairs = binary_mappings.items() if isinstance(binary_mappings, Mapping) else binary_mappings

    mapped: dict[str, str] = {}
    for path, mapping in pairs:
        path = path.strip()
        mapping = mapping.strip()
        if not path:
            continue
        # A later empty mapping must not erase an earlier real one.
        if mapping or path not in mapped:
            mapped[path] = mapping

    for path in binary_only:
        path = path.strip()
        if path and path not in mapped:
            mapped[path] = ""

    return tuple(BinaryEntry(file_path=p, mapping_path=m) for p, m in mapped.items())


def normalize_track(track: str) -> str:
    return track.strip().lower()


def validate_request(
    publish: PublishInput, *, fs: FileSystem
) -> Result[PublishRequest, ValidationError]:
    """Validate publish settings.

    Only file existence is checked (stat), no file is opened.

    Args:
        publish: Raw settings from flags and config file
        fs: File access used for existence checks

    Returns:
        Ok(PublishRequest) on success, Err(ValidationError) naming the first problem
    """
    credentials = publish.credentials_path
    if credentials is not None and fs.size(credentials) is None:
        return Err(FileMissing(path=credentials, role="credentials"))

    package_name = publish.package_name.strip()
    if not package_name:
        return Err(InvalidPackageName(value=publish.package_name))

    track = normalize_track(publish.track)
    if track not in ALLOWED_TRACKS:
        return Err(UnsupportedTrack(track=track, allowed=ALLOWED_TRACKS))

    if not publish.binaries:
        return Err(NoFiles())

    for entry in publish.binaries:
        if fs.size(entry.file_path) is None:
            return Err(FileMissing(path=entry.file_path, role="binary"))
        if entry.has_mapping and fs.size(entry.mapping_path) is None:
            return Err(FileMissing(path=entry.mapping_path, role="mapping"))

    return Ok(
        PublishRequest(
            package_name=package_name,
            track=track,
            credentials_path=credentials,
            binaries=tuple(publish.binaries),
            is_apk=publish.is_apk,
            verbose=publish.verbose,
        )
    )
