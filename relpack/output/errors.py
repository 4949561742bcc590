"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from relpack.core.config import ConfigError
from relpack.core.errors import ErrorCode
from relpack.output.console import Style
from relpack.services.packaging_errors import (
    ArchiveFailed,
    ListingFailed,
    OutputDirFailed,
    PackagerError,
    SetupSigningFailed,
    SignFailed,
    VersionLookupFailed,
)

if TYPE_CHECKING:
    from relpack.output.console import ConsoleProtocol

__all__ = ["print_config_error", "print_packager_error", "packager_error_exit_code"]


def print_config_error(error: ConfigError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def print_packager_error(error: PackagerError, console: ConsoleProtocol) -> None:
    """Print packager error to console with appropriate formatting."""
    match error:
        case SignFailed(label=label, process=process):
            console.error(f"{label}: {process}")
        case OutputDirFailed(path=path, reason=reason):
            console.error(f"cannot create output directory {path} ({reason})")
        case VersionLookupFailed(manifest=manifest, reason=reason):
            console.error(f"cannot read product version from {manifest} ({reason})")
        case ArchiveFailed(archive=archive, process=process):
            console.error(f"archiving {archive.name} failed: {process}")
        case ListingFailed(archive=archive, process=process):
            console.error(f"listing {archive.name} failed: {process}")
        case SetupSigningFailed(process=process):
            console.error(f"setup signing failed: {process}")

    process_error = getattr(error, "process", None)
    if process_error is not None and process_error.returncode == -1:
        console.print("hint: run `relpack check` to verify the required tools", Style.DIM)


def packager_error_exit_code(error: PackagerError) -> int:
    """Get exit code for a packager error."""
    match error:
        case SignFailed() | SetupSigningFailed():
            return int(ErrorCode.SIGN_ERROR)
        case VersionLookupFailed() | ArchiveFailed() | ListingFailed():
            return int(ErrorCode.PACKAGE_ERROR)
        case OutputDirFailed():
            return int(ErrorCode.IO_ERROR)
    return int(ErrorCode.PACKAGE_ERROR)
