from __future__ import annotations

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
from relpack.cli.context import CLIContext, build_context
from relpack.core.errors import ErrorCode
from relpack.output.console import Style
from relpack.services.preflight import CheckResult, CheckStatus, PreflightService


def check(
    arch: str | None = ARCH_OPTION,
    quality: str | None = QUALITY_OPTION,
    root: Path | None = ROOT_OPTION,
    node: str = NODE_OPTION,
    sevenzip: str = SEVENZIP_OPTION,
    npm: str = NPM_OPTION,
) -> None:
    """Check tools, signing inputs and built trees before packaging."""
    ctx = build_context(arch=arch, quality=quality, root=root)

    service = PreflightService(config=ctx.config, node=node, sevenzip=sevenzip, npm=npm)
    report = service.run()

    ctx.console.print(f"root: {ctx.config.root}", Style.DIM)

    _print_group(ctx, "Tools", report.tools)
    _print_group(ctx, "Signing", report.signing)
    _print_group(ctx, "Inputs", report.inputs)

    if report.has_errors():
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))


def _print_group(ctx: CLIContext, title: str, results: list[CheckResult]) -> None:
    console = ctx.console
    console.header(title)
    for r in results:
        console.print(f"{r.name}: {r.message}", _style_for_status(r.status))
        if r.hint and r.status != CheckStatus.OK:
            console.print(f"hint: {r.hint}", Style.DIM)


def _style_for_status(status: CheckStatus) -> Style:
    if status == CheckStatus.OK:
        return Style.SUCCESS
    if status == CheckStatus.WARNING:
        return Style.WARNING
    return Style.ERROR
