"""Process exit codes for relpack commands.

Values are stable because CI pipelines branch on them:
- 0: Success
- 1: User error (bad option value)
- 2: Environment error (missing variable, tool or input tree)
- 3: Signing error (code signing or setup signing failed)
- 4: Packaging error (version lookup, archive or listing failed)
- 5: I/O error (output directory could not be created)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    SIGN_ERROR = 3
    PACKAGE_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
