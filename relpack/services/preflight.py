"""Read-only checks that a packaging run has what it needs.

Nothing here runs an external tool; it only looks at PATH and the filesystem.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

from relpack.core.config import PackagerConfig
from relpack.core.result import Err
from relpack.services.installers import DEFAULT_NPM
from relpack.services.layout import ReleaseLayout
from relpack.services.metadata import PackageJsonReader
from relpack.services.signing import SIGN_SCRIPT

__all__ = ["CheckResult", "CheckStatus", "PreflightReport", "PreflightService"]


class CheckStatus(Enum):
    OK = auto()
    WARNING = auto()
    ERROR = auto()


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Result of a single check.

    Attributes:
        name: What was checked (e.g. "7z.exe", "client tree")
        status: Whether the check passed, warned, or failed
        message: Human-readable result message
        hint: Optional fix suggestion
    """

    name: str
    status: CheckStatus
    message: str
    hint: str | None = None

    @property
    def is_error(self) -> bool:
        return self.status == CheckStatus.ERROR

    @classmethod
    def success(cls, name: str, message: str) -> CheckResult:
        return cls(name=name, status=CheckStatus.OK, message=message)

    @classmethod
    def warning(cls, name: str, message: str, hint: str | None = None) -> CheckResult:
        return cls(name=name, status=CheckStatus.WARNING, message=message, hint=hint)

    @classmethod
    def error(cls, name: str, message: str, hint: str | None = None) -> CheckResult:
        return cls(name=name, status=CheckStatus.ERROR, message=message, hint=hint)


@dataclass(frozen=True, slots=True)
class PreflightReport:
    tools: list[CheckResult]
    signing: list[CheckResult]
    inputs: list[CheckResult]

    def all_results(self) -> list[CheckResult]:
        return [*self.tools, *self.signing, *self.inputs]

    def has_errors(self) -> bool:
        return any(r.is_error for r in self.all_results())


class PreflightService:
    def __init__(
        self,
        *,
        config: PackagerConfig,
        node: str = "node",
        sevenzip: str = "7z.exe",
        npm: str = DEFAULT_NPM,
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        self._config = config
        self._node = node
        self._sevenzip = sevenzip
        self._npm = npm
        self._which = which
        self._layout = ReleaseLayout(arch=config.arch)

    def run(self) -> PreflightReport:
        return PreflightReport(
            tools=self._check_tools(),
            signing=self._check_signing(),
            inputs=self._check_inputs(),
        )

    def _check_tools(self) -> list[CheckResult]:
        results = [self._check_tool(self._node, required=True)]
        results.append(self._check_tool(self._sevenzip, required=self._config.built_anything))
        results.append(self._check_tool(self._npm, required=self._config.built_client))
        return results

    def _check_tool(self, name: str, *, required: bool) -> CheckResult:
        found = self._which(name)
        if found:
            return CheckResult.success(name, found)
        if required:
            return CheckResult.error(
                name, "not found on PATH", hint=f"Install {name} or pass its path"
            )
        return CheckResult.warning(name, "not found on PATH (not needed for this run)")

    def _check_signing(self) -> list[CheckResult]:
        root = self._config.root
        results: list[CheckResult] = []

        script = root / SIGN_SCRIPT
        if script.exists() or script.with_suffix(".js").exists():
            results.append(CheckResult.success("sign script", str(script)))
        else:
            results.append(
                CheckResult.error(
                    "sign script", f"missing: {script}", hint="Run from the repository root"
                )
            )

        dll = Path(self._config.esrp_cli_dll)
        if dll.is_file():
            results.append(CheckResult.success("signing tool", str(dll)))
        else:
            results.append(CheckResult.error("signing tool", f"missing: {dll}"))

        folder = Path(self._config.signing_folder)
        if folder.is_dir():
            results.append(CheckResult.success("staging folder", str(folder)))
        else:
            results.append(CheckResult.error("staging folder", f"not a directory: {folder}"))

        return results

    def _check_inputs(self) -> list[CheckResult]:
        root = self._config.root
        results: list[CheckResult] = []

        if self._config.built_client:
            results.append(self._check_tree("client tree", root / self._layout.client_dir))
            version = PackageJsonReader(root).read_version(self._layout.client_manifest)
            if isinstance(version, Err):
                results.append(CheckResult.error("client version", version.error.reason))
            else:
                results.append(CheckResult.success("client version", version.value))

        if self._config.built_server:
            results.append(self._check_tree("server tree", root / self._layout.server_dir))

        if self._config.built_web:
            results.append(self._check_tree("web tree", root / self._layout.web_dir))

        if not self._config.built_anything:
            results.append(
                CheckResult.warning("artifacts", "no BUILT_* flag set; only signing will run")
            )

        return results

    def _check_tree(self, name: str, path: Path) -> CheckResult:
        if path.is_dir():
            return CheckResult.success(name, str(path))
        return CheckResult.error(name, f"missing: {path}")
