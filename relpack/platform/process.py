"""Subprocess execution with Result-based error handling.

External tools are started with stdout and stderr merged into one stream.
Their output is buffered from the moment they start, so a caller can launch
several processes at once and forward each one's output later, in whatever
order it wants, without losing or interleaving lines.

Each process gets a reader thread that owns its pipe and reaps it on exit.
Nothing ties the child's lifetime to the event loop: a process that is
detached, or outlives the loop that started it, keeps running unobserved.

Usage:
    started = await start(["7z.exe", "l", "out.zip"], cwd=root)
    match started:
        case Ok(proc):
            result = await proc.pipe(print)
        case Err(error):
            print(f"Failed: {error.stderr}")
"""

from __future__ import annotations

import asyncio
import codecs
import os
import subprocess
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from relpack.core.result import Err, Ok, Result

__all__ = [
    "OutputSource",
    "ProcessError",
    "RunningProcess",
    "Sink",
    "run_streaming",
    "start",
]

Sink = Callable[[str], None]

_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 when the process could not be started.
        stdout: Captured output (empty when output was streamed).
        stderr: Error details (the OS message for spawn failures).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        if self.returncode == -1:
            return f"{cmd_str} could not be started: {self.stderr}"
        return f"{cmd_str} failed (exit {self.returncode})"


class OutputSource(Protocol):
    """Anything whose output can be forwarded to a sink until it finishes."""

    async def pipe(self, sink: Sink) -> Result[None, ProcessError]: ...

    def detach(self) -> None:
        """Give up on the output; the work itself is left running."""
        ...


class RunningProcess:
    """A started process whose merged output is buffered until piped."""

    def __init__(
        self,
        command: tuple[str, ...],
        proc: subprocess.Popen[bytes],
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self._command = command
        self._proc = proc
        self._loop = loop
        self._lines: asyncio.Queue[str | None] = asyncio.Queue()
        self._detached = threading.Event()
        self._reader = threading.Thread(
            target=self._read, name=f"relpack-output-{proc.pid}", daemon=True
        )
        self._reader.start()

    @property
    def command(self) -> tuple[str, ...]:
        return self._command

    @property
    def pid(self) -> int:
        return self._proc.pid

    @property
    def detached(self) -> bool:
        return self._detached.is_set()

    def _read(self) -> None:
        stream = self._proc.stdout
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        pending = ""
        try:
            if stream is None:
                return
            while chunk := os.read(stream.fileno(), _CHUNK_SIZE):
                # Detached output is still drained so the child never blocks on a full pipe
                if self._detached.is_set():
                    continue
                pending += decoder.decode(chunk)
                *lines, pending = pending.split("\n")
                for line in lines:
                    self._forward(line.rstrip("\r"))
            pending += decoder.decode(b"", final=True)
            if pending:
                self._forward(pending.rstrip("\r"))
        finally:
            if stream is not None:
                stream.close()
            self._proc.wait()
            self._forward(None)

    def _forward(self, line: str | None) -> None:
        if self._detached.is_set():
            return
        try:
            self._loop.call_soon_threadsafe(self._lines.put_nowait, line)
        except RuntimeError:
            # The loop that started this process has closed; nobody is listening
            self._detached.set()

    async def pipe(self, sink: Sink) -> Result[None, ProcessError]:
        """Forward output lines to sink until EOF, then wait for exit.

        Lines produced before this call are replayed first, in order.
        Must not be called after detach().

        Returns:
            Ok(None) on exit code 0, Err(ProcessError) otherwise.
        """
        while (line := await self._lines.get()) is not None:
            sink(line)
        # Set by the reader thread before it queued the end marker
        returncode = self._proc.returncode
        if returncode != 0:
            return Err(
                ProcessError(command=self._command, returncode=returncode, stdout="", stderr="")
            )
        return Ok(None)

    def detach(self) -> None:
        """Stop forwarding output and leave the process running.

        The reader thread keeps draining and discarding output, then reaps the
        process when it exits. The process is never signalled.
        """
        self._detached.set()


async def start(
    cmd: Sequence[str],
    *,
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[RunningProcess, ProcessError]:
    """Spawn a command and begin buffering its output.

    Returns as soon as the process exists; it does not wait for it to finish.

    Args:
        cmd: Command and arguments (no shell is involved).
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).

    Returns:
        Ok(RunningProcess) on success, Err(ProcessError) if spawning failed.
    """
    command = tuple(cmd)
    try:
        proc = subprocess.Popen(
            command,
            cwd=str(cwd),
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
    except OSError as e:
        return Err(ProcessError(command=command, returncode=-1, stdout="", stderr=str(e)))

    return Ok(RunningProcess(command, proc, asyncio.get_running_loop()))


async def run_streaming(
    cmd: Sequence[str],
    *,
    cwd: Path,
    sink: Sink,
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Start a command and forward its output to sink until it exits."""
    started = await start(cmd, cwd=cwd, env=env)
    if isinstance(started, Err):
        return started
    return await started.value.pipe(sink)
