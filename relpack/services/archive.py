"""Zip archiving through 7-Zip.

Archives are written with `7z a -tzip` and verified by listing them with
`7z l`; both stream their output to the console.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from relpack.core.result import Result
from relpack.platform.process import ProcessError, Sink, run_streaming

__all__ = ["Archiver", "SevenZipArchiver"]


class Archiver(Protocol):
    async def create(
        self, archive: Path, source: str, *, exclude: str | None, sink: Sink
    ) -> Result[None, ProcessError]:
        """Create a zip at archive from source (a path or a wildcard)."""
        ...

    async def list_contents(self, archive: Path, *, sink: Sink) -> Result[None, ProcessError]:
        """Print the archive's manifest."""
        ...


class SevenZipArchiver:
    def __init__(self, root: Path, *, executable: str = "7z.exe") -> None:
        self._root = root
        self._executable = executable

    def create_command(self, archive: Path, source: str, *, exclude: str | None) -> list[str]:
        cmd = [self._executable, "a", "-tzip", archive.as_posix(), source]
        if exclude:
            # Recursive exclusion by wildcard
            cmd.append(f"-xr!{exclude}")
        return cmd

    def list_command(self, archive: Path) -> list[str]:
        return [self._executable, "l", archive.as_posix()]

    async def create(
        self, archive: Path, source: str, *, exclude: str | None, sink: Sink
    ) -> Result[None, ProcessError]:
        return await run_streaming(
            self.create_command(archive, source, exclude=exclude), cwd=self._root, sink=sink
        )

    async def list_contents(self, archive: Path, *, sink: Sink) -> Result[None, ProcessError]:
        return await run_streaming(self.list_command(archive), cwd=self._root, sink=sink)
