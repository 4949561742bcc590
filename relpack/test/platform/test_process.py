"""Tests for relpack.platform.process module."""

from __future__ import annotations

import asyncio
import sys
import threading
import time
from pathlib import Path

import pytest

from relpack.core.result import Err, Ok
from relpack.platform.process import ProcessError, RunningProcess, run_streaming, start


def _py(code: str) -> list[str]:
    return [sys.executable, "-c", code]


def _wait_for(path: Path, timeout: float = 10.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if path.exists():
            return True
        time.sleep(0.05)
    return False


class TestProcessError:
    """Test ProcessError dataclass."""

    def test_str_short_command(self) -> None:
        error = ProcessError(command=("7z.exe", "l"), returncode=2, stdout="", stderr="")
        assert str(error) == "7z.exe l failed (exit 2)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("node", "build/azure-pipelines/common/sign", "esrp.dll", "sign-windows"),
            returncode=1,
            stdout="",
            stderr="",
        )
        assert str(error) == "node build/azure-pipelines/common/sign esrp.dll ... failed (exit 1)"

    def test_str_spawn_failure(self) -> None:
        error = ProcessError(command=("7z.exe",), returncode=-1, stdout="", stderr="not found")
        assert str(error) == "7z.exe could not be started: not found"

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestStart:
    """Test start + pipe."""

    def test_pipe_forwards_lines_in_order(self, tmp_path: Path) -> None:
        async def scenario() -> tuple[object, list[str]]:
            started = await start(_py("print('one'); print('two')"), cwd=tmp_path)
            assert isinstance(started, Ok)
            lines: list[str] = []
            result = await started.value.pipe(lines.append)
            return result, lines

        result, lines = asyncio.run(scenario())

        assert isinstance(result, Ok)
        assert lines == ["one", "two"]

    def test_output_before_pipe_is_buffered(self, tmp_path: Path) -> None:
        async def scenario() -> list[str]:
            started = await start(_py("print('early', flush=True)"), cwd=tmp_path)
            assert isinstance(started, Ok)
            # Let the process finish before anyone reads its output
            await asyncio.sleep(0.5)
            lines: list[str] = []
            await started.value.pipe(lines.append)
            return lines

        assert asyncio.run(scenario()) == ["early"]

    def test_stderr_is_merged(self, tmp_path: Path) -> None:
        async def scenario() -> list[str]:
            lines: list[str] = []
            await run_streaming(
                _py("import sys; sys.stderr.write('warn\\n')"), cwd=tmp_path, sink=lines.append
            )
            return lines

        assert asyncio.run(scenario()) == ["warn"]

    def test_last_line_without_newline(self, tmp_path: Path) -> None:
        async def scenario() -> list[str]:
            lines: list[str] = []
            await run_streaming(
                _py("import sys; sys.stdout.write('a\\nb')"), cwd=tmp_path, sink=lines.append
            )
            return lines

        assert asyncio.run(scenario()) == ["a", "b"]

    def test_nonzero_exit_is_error(self, tmp_path: Path) -> None:
        result = asyncio.run(
            run_streaming(_py("import sys; sys.exit(3)"), cwd=tmp_path, sink=lambda _: None)
        )

        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert result.error.command[0] == sys.executable

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = asyncio.run(start(["nonexistent_command_12345"], cwd=tmp_path))

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert len(result.error.stderr) > 0

    def test_uses_cwd(self, tmp_path: Path) -> None:
        (tmp_path / "marker.txt").write_text("x")

        async def scenario() -> list[str]:
            lines: list[str] = []
            await run_streaming(
                _py("import os; print(sorted(os.listdir('.')))"), cwd=tmp_path, sink=lines.append
            )
            return lines

        assert "marker.txt" in asyncio.run(scenario())[0]

    def test_started_processes_run_concurrently(self, tmp_path: Path) -> None:
        async def scenario() -> float:
            loop = asyncio.get_running_loop()
            begin = loop.time()
            procs: list[RunningProcess] = []
            for _ in range(3):
                started = await start(_py("import time; time.sleep(0.5)"), cwd=tmp_path)
                assert isinstance(started, Ok)
                procs.append(started.value)
            for proc in procs:
                assert isinstance(await proc.pipe(lambda _: None), Ok)
            return loop.time() - begin

        # Sequential execution would take at least 1.5s
        assert asyncio.run(scenario()) < 1.4


class TestDetach:
    """Processes given up on keep running after the loop is gone."""

    def test_detached_process_keeps_running(self, tmp_path: Path) -> None:
        marker = tmp_path / "done.txt"
        code = (
            "import pathlib, time; time.sleep(0.5); "
            f"pathlib.Path({str(marker)!r}).write_text('x')"
        )

        async def scenario() -> RunningProcess:
            started = await start(_py(code), cwd=tmp_path)
            assert isinstance(started, Ok)
            started.value.detach()
            return started.value

        proc = asyncio.run(scenario())

        assert proc.detached
        assert not marker.exists()
        assert _wait_for(marker)

    def test_detached_output_is_drained(self, tmp_path: Path) -> None:
        marker = tmp_path / "done.txt"
        # Far more than a pipe buffer holds
        code = (
            "import pathlib; [print('x' * 100) for _ in range(50000)]; "
            f"pathlib.Path({str(marker)!r}).write_text('x')"
        )

        async def scenario() -> None:
            started = await start(_py(code), cwd=tmp_path)
            assert isinstance(started, Ok)
            started.value.detach()

        asyncio.run(scenario())

        assert _wait_for(marker)

    def test_closing_the_loop_under_a_running_process_is_quiet(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        unraisable: list[object] = []
        thread_errors: list[object] = []
        monkeypatch.setattr(sys, "unraisablehook", unraisable.append)
        monkeypatch.setattr(threading, "excepthook", thread_errors.append)
        marker = tmp_path / "done.txt"
        code = (
            "import pathlib, time; print('started', flush=True); time.sleep(0.5); "
            f"print('finishing'); pathlib.Path({str(marker)!r}).write_text('x')"
        )

        async def scenario() -> None:
            # Neither piped nor detached
            started = await start(_py(code), cwd=tmp_path)
            assert isinstance(started, Ok)

        asyncio.run(scenario())

        assert _wait_for(marker)
        # Give the reader thread time to see EOF and reap the child
        time.sleep(0.3)
        assert unraisable == []
        assert thread_errors == []
