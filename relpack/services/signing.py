"""Code signing plan and the external signing collaborator.

Signing is the slow part of a release, so every plan entry is started up
front and the entries are then drained one by one. Draining in plan order
keeps each banner directly above its own tool output even though the signing
invocations overlap.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from relpack.core.config import PackagerConfig
from relpack.core.result import Err, Ok, Result
from relpack.output.banner import print_banner
from relpack.output.console import ConsoleProtocol
from relpack.platform.process import OutputSource, ProcessError, start

__all__ = [
    "BINARIES_GLOB",
    "SCRIPTS_GLOB",
    "APPX_GLOB",
    "EsrpSigner",
    "SignKind",
    "SignTask",
    "Signer",
    "SigningStep",
    "build_signing_plan",
    "describe_step",
    "drain_signing_tasks",
    "launch_signing_plan",
]

BINARIES_GLOB = "*.dll,*.exe,*.node"
SCRIPTS_GLOB = "*.ps1"
APPX_GLOB = "*.appx"

# Relative to the repository root
SIGN_SCRIPT = "build/azure-pipelines/common/sign"


class SignKind(Enum):
    """Operation kind understood by the signing script."""

    BINARIES = "sign-windows"
    PACKAGES = "sign-windows-appx"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class SigningStep:
    label: str
    kind: SignKind
    glob: str


@dataclass(frozen=True, slots=True)
class SignTask:
    """A plan entry whose signing invocation is already running."""

    label: str
    process: OutputSource


class Signer(Protocol):
    async def sign(self, kind: SignKind, glob: str) -> Result[OutputSource, ProcessError]:
        """Start signing files matching glob; return once the invocation is running."""
        ...


class EsrpSigner:
    """Runs the repository's signing script against the staging folder."""

    def __init__(self, config: PackagerConfig, *, node: str = "node") -> None:
        self._config = config
        self._node = node

    def command(self, kind: SignKind, glob: str) -> list[str]:
        return [
            self._node,
            SIGN_SCRIPT,
            self._config.esrp_cli_dll,
            str(kind),
            self._config.signing_folder,
            glob,
        ]

    async def sign(self, kind: SignKind, glob: str) -> Result[OutputSource, ProcessError]:
        started = await start(self.command(kind, glob), cwd=self._config.root)
        if isinstance(started, Err):
            return started
        return Ok(started.value)


def build_signing_plan(config: PackagerConfig) -> list[SigningStep]:
    """Ordered signing steps; the appx step only exists on the insider channel."""
    plan = [
        SigningStep("Codesign executables and shared libraries", SignKind.BINARIES, BINARIES_GLOB),
        SigningStep("Codesign Powershell scripts", SignKind.PACKAGES, SCRIPTS_GLOB),
    ]
    if config.is_insider:
        plan.append(
            SigningStep("Codesign context menu appx package", SignKind.PACKAGES, APPX_GLOB)
        )
    return plan


async def launch_signing_plan(
    plan: list[SigningStep], signer: Signer
) -> Result[list[SignTask], tuple[SigningStep, ProcessError]]:
    """Start every step before any is awaited.

    A spawn failure stops the launch; steps started before it are detached and
    keep running.
    """
    tasks: list[SignTask] = []
    for step in plan:
        started = await signer.sign(step.kind, step.glob)
        if isinstance(started, Err):
            _detach(tasks)
            return Err((step, started.error))
        tasks.append(SignTask(label=step.label, process=started.value))
    return Ok(tasks)


async def drain_signing_tasks(
    tasks: list[SignTask], console: ConsoleProtocol
) -> Result[list[str], tuple[SignTask, ProcessError]]:
    """Print each banner, then forward that task's output until it exits.

    Stops at the first non-zero exit. Later tasks are detached, not drained:
    their invocations keep running and their output is dropped.

    Returns:
        Ok(labels drained) or Err((failed task, process error)).
    """
    drained: list[str] = []
    for index, task in enumerate(tasks):
        print_banner(console, task.label)
        result = await task.process.pipe(console.raw)
        if isinstance(result, Err):
            _detach(tasks[index + 1 :])
            return Err((task, result.error))
        drained.append(task.label)
    return Ok(drained)


def _detach(tasks: list[SignTask]) -> None:
    for task in tasks:
        task.process.detach()


def describe_step(step: SigningStep, staging: Path | str) -> str:
    return f"{step.label}: {step.kind} {step.glob} in {staging}"
