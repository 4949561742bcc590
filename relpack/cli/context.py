from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from relpack.core.config import (
    ENV_ARCH,
    ENV_QUALITY,
    PackagerConfig,
    load_config,
    with_overrides,
)
from relpack.core.errors import ErrorCode
from relpack.core.result import Err
from relpack.output.console import ConsoleProtocol, RichConsole
from relpack.output.errors import print_config_error


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: PackagerConfig
    console: ConsoleProtocol


def build_context(
    *,
    arch: str | None = None,
    quality: str | None = None,
    root: Path | None = None,
) -> CLIContext:
    console = RichConsole()

    try:
        root_path = (root or Path.cwd()).expanduser().resolve()
    except OSError as e:
        console.error(f"invalid --root: {e}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if not root_path.is_dir():
        console.error(f"--root '{root_path}' is not a directory")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    env = with_overrides(os.environ, **{ENV_ARCH: arch, ENV_QUALITY: quality})
    config_result = load_config(env, root=root_path)
    if isinstance(config_result, Err):
        print_config_error(config_result.error, console)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(config=config_result.value, console=console)
