"""Error presentation utilities.

Centralized error formatting and exit code mapping for publish failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pstore.core.errors import ErrorCode
from pstore.output.console import Style
from pstore.publish.errors import (
    FileMissing,
    FileUnreadable,
    IntegrityMismatch,
    InvalidPackageName,
    NoFiles,
    NoService,
    PublishError,
    RemoteCallFailed,
    UnsupportedTrack,
)

if TYPE_CHECKING:
    from pstore.output.console import ConsoleProtocol

__all__ = ["describe_publish_error", "print_publish_error", "publish_error_exit_code"]


def describe_publish_error(error: PublishError) -> tuple[str, str | None]:
    """Return ``(message, hint)`` for an error."""
    match error:
        case InvalidPackageName():
            return "package name must not be empty", "Pass --app-id, e.g. --app-id com.sample.app"
        case UnsupportedTrack(track="", allowed=allowed):
            return "track name to publish binaries to is required", f"Use one of: {', '.join(allowed)}"
        case UnsupportedTrack(track=track, allowed=allowed):
            return (
                f"track '{track}' is not supported",
                f"Supported tracks: {', '.join(allowed)}",
            )
        case NoFiles():
            return (
                "no binary files to upload provided",
                "Pass --app-bin-only PATH or --app-bin PATH=MAPPING",
            )
        case FileMissing(path=path, role="credentials"):
            return f"authentication file '{path}' does not exist", None
        case FileMissing(path=path, role="mapping"):
            return f"mapping file '{path}' does not exist", None
        case FileMissing(path=path):
            return f"binary file '{path}' does not exist", None
        case NoService():
            return "no catalog service instance provided", None
        case FileUnreadable(path=path, reason=reason):
            return f"cannot read '{path}': {reason}", None
        case IntegrityMismatch(path=path, local=local, remote=remote):
            return (
                f"integrity verification failed for '{path}': local sha256 '{local}', remote '{remote}'",
                "The upload was discarded; retry the publish",
            )
        case RemoteCallFailed(operation=operation, message=message, status=status):
            prefix = f"{operation} failed"
            if status:
                prefix += f" (HTTP {status})"
            return f"{prefix}: {message}", None
    return str(error), None


def print_publish_error(error: PublishError, console: ConsoleProtocol) -> None:
    """Print a publish error with its hint, if any."""
    message, hint = describe_publish_error(error)
    console.error(message)
    if hint:
        console.print(f"hint: {hint}", Style.DIM)


def publish_error_exit_code(error: PublishError) -> int:
    """Get the process exit code for a publish error."""
    match error:
        case InvalidPackageName() | UnsupportedTrack() | NoFiles():
            return int(ErrorCode.USER_ERROR)
        case FileMissing() | FileUnreadable():
            return int(ErrorCode.IO_ERROR)
        case NoService() | RemoteCallFailed(operation="connect"):
            return int(ErrorCode.ENV_ERROR)
        case IntegrityMismatch():
            return int(ErrorCode.INTEGRITY_ERROR)
        case RemoteCallFailed():
            return int(ErrorCode.NETWORK_ERROR)
    return int(ErrorCode.USER_ERROR)
