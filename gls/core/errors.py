"""Process exit codes.

Every abort path ends in one of these codes. The numeric values are part of
the command line contract and should remain stable:
- 0: Success
- 1: User error (--help, malformed arguments, unsupported options)
- 2: Environment error (existing/missing installation, unusable config)
- 3: Version gate error (target not newer than base, base too old)
- 4: Network error (capability host unreachable, release metadata failures)
- 5: I/O error (working or backup directory could not be managed)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the gls commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    VERSION_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
