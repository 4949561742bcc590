"""Installer (setup package) signing through the task runner."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from relpack.core.result import Result
from relpack.platform.process import ProcessError, Sink, run_streaming

__all__ = ["DEFAULT_NPM", "NpmRunAllTaskRunner", "TaskRunner", "setup_tasks"]

# npm is a batch script on Windows; spawning without a shell needs the .cmd name
DEFAULT_NPM = "npm.cmd" if os.name == "nt" else "npm"


class TaskRunner(Protocol):
    async def run_parallel(self, tasks: Sequence[str], *, sink: Sink) -> Result[None, ProcessError]:
        """Run named build tasks in parallel and stream their combined output."""
        ...


def setup_tasks(arch: str) -> list[str]:
    """Gulp tasks that build and sign the system-wide and per-user installers."""
    return [
        f"gulp vscode-win32-{arch}-system-setup -- --sign",
        f"gulp vscode-win32-{arch}-user-setup -- --sign",
    ]


class NpmRunAllTaskRunner:
    def __init__(self, root: Path, *, npm: str = DEFAULT_NPM) -> None:
        self._root = root
        self._npm = npm

    def command(self, tasks: Sequence[str]) -> list[str]:
        # -l labels each line with its task, -p runs the tasks in parallel
        return [self._npm, "exec", "--", "npm-run-all", "-lp", *tasks]

    async def run_parallel(self, tasks: Sequence[str], *, sink: Sink) -> Result[None, ProcessError]:
        return await run_streaming(self.command(tasks), cwd=self._root, sink=sink)
