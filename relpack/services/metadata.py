"""Product version lookup from the built client's package.json."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

from relpack.core.result import Err, Ok, Result
from relpack.services.packaging_errors import VersionLookupFailed

__all__ = ["MetadataReader", "PackageJsonReader"]


class MetadataReader(Protocol):
    def read_version(self, manifest: Path) -> Result[str, VersionLookupFailed]: ...


class PackageJsonReader:
    """Reads `version` from a package.json, resolving relative paths against root."""

    def __init__(self, root: Path) -> None:
        self._root = root

    def read_version(self, manifest: Path) -> Result[str, VersionLookupFailed]:
        path = manifest if manifest.is_absolute() else self._root / manifest
        try:
            data: object = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return Err(VersionLookupFailed(manifest, "file not found"))
        except OSError as e:
            return Err(VersionLookupFailed(manifest, str(e)))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(VersionLookupFailed(manifest, f"invalid JSON: {e}"))

        if not isinstance(data, dict):
            return Err(VersionLookupFailed(manifest, "root must be an object"))
        version = data.get("version")
        if not isinstance(version, str) or not version.strip():
            return Err(VersionLookupFailed(manifest, "missing 'version'"))
        return Ok(version.strip())
