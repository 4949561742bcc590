from __future__ import annotations

from pathlib import Path

from relpack.cli.commands._options import ARCH_OPTION, QUALITY_OPTION, ROOT_OPTION
from relpack.cli.context import build_context
from relpack.core.result import Ok
from relpack.output.console import Style
from relpack.services.layout import ReleaseLayout
from relpack.services.metadata import PackageJsonReader
from relpack.services.signing import build_signing_plan, describe_step


def plan(
    arch: str | None = ARCH_OPTION,
    quality: str | None = QUALITY_OPTION,
    root: Path | None = ROOT_OPTION,
) -> None:
    """Show what `package` would sign and produce, without running any tool."""
    ctx = build_context(arch=arch, quality=quality, root=root)
    config = ctx.config
    console = ctx.console
    layout = ReleaseLayout(arch=config.arch)

    console.print(f"root: {config.root}", Style.DIM)
    console.print(f"arch: {config.arch}  quality: {config.quality}", Style.DIM)

    console.header("Signing")
    for step in build_signing_plan(config):
        console.print(describe_step(step, config.signing_folder))

    console.header("Archives")
    if config.built_client:
        version = PackageJsonReader(config.root).read_version(layout.client_manifest)
        label = version.value if isinstance(version, Ok) else "<version>"
        console.print(str(layout.client_archive(label)))
    if config.built_server:
        console.print(str(layout.server_archive))
    if config.built_web:
        console.print(str(layout.web_archive))
    if not config.built_anything:
        console.print("none (no BUILT_* flag set)", Style.DIM)

    if config.built_client:
        console.header("Setup packages")
        console.print("system, user (signed)")
