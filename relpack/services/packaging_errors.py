from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relpack.platform.process import ProcessError


@dataclass(frozen=True, slots=True)
class SignFailed:
    label: str
    process: ProcessError


@dataclass(frozen=True, slots=True)
class OutputDirFailed:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class VersionLookupFailed:
    manifest: Path
    reason: str


@dataclass(frozen=True, slots=True)
class ArchiveFailed:
    archive: Path
    process: ProcessError


@dataclass(frozen=True, slots=True)
class ListingFailed:
    archive: Path
    process: ProcessError


@dataclass(frozen=True, slots=True)
class SetupSigningFailed:
    process: ProcessError


PackagerError = (
    SignFailed
    | OutputDirFailed
    | VersionLookupFailed
    | ArchiveFailed
    | ListingFailed
    | SetupSigningFailed
)
