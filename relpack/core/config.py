"""Packager configuration sourced from the process environment.

The pipeline communicates everything through environment variables. They are
read once, validated, and frozen into a PackagerConfig that is handed to the
packager explicitly.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import get_flag, get_str

__all__ = [
    "PackagerConfig",
    "ConfigError",
    "load_config",
    "with_overrides",
    "SUPPORTED_ARCHES",
    "INSIDER_QUALITY",
    # Environment variable names
    "ENV_ARCH",
    "ENV_ESRP_CLI_DLL",
    "ENV_SIGNING_FOLDER",
    "ENV_QUALITY",
    "ENV_BUILT_CLIENT",
    "ENV_BUILT_SERVER",
    "ENV_BUILT_WEB",
]

# -----------------------------------------------------------------------------
# Environment variable names
# -----------------------------------------------------------------------------

ENV_ARCH = "VSCODE_ARCH"
ENV_ESRP_CLI_DLL = "EsrpCliDllPath"
ENV_SIGNING_FOLDER = "CodeSigningFolderPath"
ENV_QUALITY = "VSCODE_QUALITY"
ENV_BUILT_CLIENT = "BUILT_CLIENT"
ENV_BUILT_SERVER = "BUILT_SERVER"
ENV_BUILT_WEB = "BUILT_WEB"

SUPPORTED_ARCHES = ("x64", "arm64")

# Release channel that also signs the context menu appx package
INSIDER_QUALITY = "insider"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the environment does not describe a valid run."""

    message: str
    missing: tuple[str, ...] = ()
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class PackagerConfig:
    """Validated, read-only parameters for one packaging run."""

    arch: str
    esrp_cli_dll: str
    signing_folder: str
    quality: str
    built_client: bool = False
    built_server: bool = False
    built_web: bool = False
    root: Path = Path(".")

    @property
    def is_insider(self) -> bool:
        return self.quality == INSIDER_QUALITY

    @property
    def built_anything(self) -> bool:
        return self.built_client or self.built_server or self.built_web


def with_overrides(env: Mapping[str, str], **overrides: str | None) -> dict[str, str]:
    """Return a copy of env with non-None overrides applied.

    Keys are environment variable names, e.g. with_overrides(env, VSCODE_ARCH="arm64").
    """
    out = dict(env)
    for key, value in overrides.items():
        if value is not None:
            out[key] = value
    return out


def load_config(env: Mapping[str, str], *, root: Path) -> Result[PackagerConfig, ConfigError]:
    """Build a PackagerConfig from an environment mapping.

    Args:
        env: Environment variables (usually os.environ)
        root: Working directory every external command runs in

    Returns:
        Ok(PackagerConfig) on success, Err(ConfigError) listing every missing
        variable on failure
    """
    required = (ENV_ARCH, ENV_ESRP_CLI_DLL, ENV_SIGNING_FOLDER, ENV_QUALITY)
    values = {key: get_str(env, key) for key in required}

    missing = tuple(key for key, value in values.items() if value is None)
    if missing:
        return Err(
            ConfigError(
                f"Missing required environment variable(s): {', '.join(missing)}",
                missing=missing,
                hint="These are normally set by the build pipeline",
            )
        )

    arch = values[ENV_ARCH] or ""
    if arch not in SUPPORTED_ARCHES:
        return Err(
            ConfigError(
                f"Unsupported {ENV_ARCH}: {arch}",
                hint=f"Expected one of: {', '.join(SUPPORTED_ARCHES)}",
            )
        )

    return Ok(
        PackagerConfig(
            arch=arch,
            esrp_cli_dll=values[ENV_ESRP_CLI_DLL] or "",
            signing_folder=values[ENV_SIGNING_FOLDER] or "",
            quality=values[ENV_QUALITY] or "",
            built_client=get_flag(env, ENV_BUILT_CLIENT),
            built_server=get_flag(env, ENV_BUILT_SERVER),
            built_web=get_flag(env, ENV_BUILT_WEB),
            root=root,
        )
    )
