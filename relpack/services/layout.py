"""Where built trees live and where archives go.

Names are deterministic given {arch, version} so downstream release jobs can
address assets without listing the output directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

__all__ = ["CODESIGN_SUMMARY_PATTERN", "ReleaseLayout"]

# Reports dropped into the client tree by the signing service
CODESIGN_SUMMARY_PATTERN = "CodeSignSummary*.md"


@dataclass(frozen=True, slots=True)
class ReleaseLayout:
    """Paths for one architecture, relative to the repository root.

    Built trees sit next to the repository (`../VSCode-win32-x64`), archives
    go under `.build/win32-<arch>`.
    """

    arch: str

    @property
    def output_dir(self) -> Path:
        return Path(".build") / f"win32-{self.arch}"

    @property
    def client_dir(self) -> Path:
        return Path("..") / f"VSCode-win32-{self.arch}"

    @property
    def client_manifest(self) -> Path:
        return self.client_dir / "resources" / "app" / "package.json"

    @property
    def server_dir(self) -> Path:
        return Path("..") / f"vscode-server-win32-{self.arch}"

    @property
    def web_dir(self) -> Path:
        return Path("..") / f"vscode-server-win32-{self.arch}-web"

    def client_archive(self, version: str) -> Path:
        return self.output_dir / f"VSCode-win32-{self.arch}-{version}.zip"

    @property
    def server_archive(self) -> Path:
        return self.output_dir / f"vscode-server-win32-{self.arch}.zip"

    @property
    def web_archive(self) -> Path:
        return self.output_dir / f"vscode-server-win32-{self.arch}-web.zip"

    @property
    def client_source(self) -> str:
        """Archive input for the client: the tree's contents, not the tree itself."""
        return f"{self.client_dir.as_posix()}/*"

    @property
    def server_source(self) -> str:
        return self.server_dir.as_posix()

    @property
    def web_source(self) -> str:
        return self.web_dir.as_posix()
