from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from relpack.cli.commands._options import (
    ARCH_OPTION,
    NODE_OPTION,
    NPM_OPTION,
    QUALITY_OPTION,
    ROOT_OPTION,
    SEVENZIP_OPTION,
)
from relpack.cli.context import build_context
from relpack.core.result import Err
from relpack.output.errors import packager_error_exit_code, print_packager_error
from relpack.services.packager import ReleasePackager


def package(
    arch: str | None = ARCH_OPTION,
    quality: str | None = QUALITY_OPTION,
    root: Path | None = ROOT_OPTION,
    node: str = NODE_OPTION,
    sevenzip: str = SEVENZIP_OPTION,
    npm: str = NPM_OPTION,
) -> None:
    """Sign the staging folder, archive built trees and sign the installers."""
    ctx = build_context(arch=arch, quality=quality, root=root)
    packager = ReleasePackager.with_tools(
        ctx.config, ctx.console, node=node, sevenzip=sevenzip, npm=npm
    )

    result = asyncio.run(packager.run())
    if isinstance(result, Err):
        print_packager_error(result.error, ctx.console)
        raise typer.Exit(code=packager_error_exit_code(result.error))

    report = result.value
    ctx.console.newline()
    for archive in report.archives:
        ctx.console.success(str(archive))
    if report.setup_signed:
        ctx.console.success("setup packages signed (system, user)")
