"""Process exit codes.

Every failure surfaced by the CLI maps to one of these codes so that CI
pipelines can tell a bad invocation from a network or integrity problem.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the pstore CLI.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (bad flags, invalid package name or track)
    - 2: Environment error (credentials unusable, no catalog service)
    - 4: Network error (catalog API call failed)
    - 5: I/O error (file missing or unreadable)
    - 6: Integrity error (remote hash differs from local hash)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    NETWORK_ERROR = 4
    IO_ERROR = 5
    INTEGRITY_ERROR = 6
