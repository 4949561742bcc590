from __future__ import annotations

from pathlib import Path

from relpack.services.layout import ReleaseLayout


def test_archive_names_are_deterministic() -> None:
    layout = ReleaseLayout(arch="x64")

    assert layout.client_archive("1.90.0") == Path(".build/win32-x64/VSCode-win32-x64-1.90.0.zip")
    assert layout.server_archive == Path(".build/win32-x64/vscode-server-win32-x64.zip")
    assert layout.web_archive == Path(".build/win32-x64/vscode-server-win32-x64-web.zip")


def test_arm64_paths() -> None:
    layout = ReleaseLayout(arch="arm64")

    assert layout.output_dir == Path(".build/win32-arm64")
    assert layout.client_dir == Path("../VSCode-win32-arm64")
    assert layout.server_dir == Path("../vscode-server-win32-arm64")
    assert layout.web_dir == Path("../vscode-server-win32-arm64-web")


def test_client_manifest() -> None:
    layout = ReleaseLayout(arch="x64")
    assert layout.client_manifest == Path("../VSCode-win32-x64/resources/app/package.json")


def test_archive_sources() -> None:
    layout = ReleaseLayout(arch="x64")

    assert layout.client_source == "../VSCode-win32-x64/*"
    assert layout.server_source == "../vscode-server-win32-x64"
    assert layout.web_source == "../vscode-server-win32-x64-web"
