"""Options shared by every command."""

from __future__ import annotations

import typer

from relpack.services.installers import DEFAULT_NPM

ARCH_OPTION = typer.Option(None, "--arch", help="Target architecture (overrides VSCODE_ARCH)")
QUALITY_OPTION = typer.Option(
    None, "--quality", help="Release channel (overrides VSCODE_QUALITY)"
)
ROOT_OPTION = typer.Option(
    None, "--root", help="Repository root to run from (defaults to the current directory)"
)
NODE_OPTION = typer.Option("node", "--node", help="Node.js executable")
SEVENZIP_OPTION = typer.Option("7z.exe", "--sevenzip", help="7-Zip executable")
NPM_OPTION = typer.Option(DEFAULT_NPM, "--npm", help="npm executable")
