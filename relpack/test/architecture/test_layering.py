from __future__ import annotations

import ast
from pathlib import Path

import pytest


def _package_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _source_files(base: Path) -> list[Path]:
    root = _package_root()
    files: list[Path] = []
    for path in sorted(base.rglob("*.py")):
        rel = path.relative_to(root)
        if rel.parts[0] == "test" or "__pycache__" in rel.parts:
            continue
        files.append(path)
    return files


def _tree(path: Path) -> ast.AST:
    return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))


def _imports(path: Path) -> list[tuple[str, int]]:
    found: list[tuple[str, int]] = []
    for node in ast.walk(_tree(path)):
        if isinstance(node, ast.Import):
            found.extend((alias.name, node.lineno) for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and not node.level and node.module:
            found.append((node.module, node.lineno))
    return found


def _matches(module: str, prefix: str) -> bool:
    return module == prefix or module.startswith(prefix + ".")


@pytest.mark.parametrize(
    ("layer", "forbidden"),
    [
        ("core", ("relpack.platform", "relpack.output", "relpack.services", "relpack.cli")),
        ("platform", ("relpack.output", "relpack.services", "relpack.cli")),
        ("output", ("relpack.cli",)),
        ("services", ("relpack.cli",)),
    ],
)
def test_layer_does_not_import_higher_layers(layer: str, forbidden: tuple[str, ...]) -> None:
    root = _package_root()
    offenders: list[str] = []

    for file_path in _source_files(root / layer):
        rel = file_path.relative_to(root)
        for module, line in _imports(file_path):
            if any(_matches(module, prefix) for prefix in forbidden):
                offenders.append(f"{rel}:{line}: forbidden import '{module}'")

    assert not offenders, f"{layer} dependency violations:\n" + "\n".join(offenders)


def test_processes_are_only_spawned_by_the_process_module() -> None:
    root = _package_root()
    spawners = {
        "asyncio": {"create_subprocess_exec", "create_subprocess_shell"},
        "subprocess": {"run", "call", "Popen", "check_call", "check_output"},
    }
    allowlist = {"platform/process.py"}

    offenders: list[str] = []
    for file_path in _source_files(root):
        rel = file_path.relative_to(root).as_posix()
        if rel in allowlist:
            continue
        for node in ast.walk(_tree(file_path)):
            if not isinstance(node, ast.Call) or not isinstance(node.func, ast.Attribute):
                continue
            owner = node.func.value
            if not isinstance(owner, ast.Name) or owner.id not in spawners:
                continue
            if node.func.attr in spawners[owner.id]:
                offenders.append(f"{rel}:{node.lineno}: direct process spawn outside allowlist")

    assert not offenders, "Subprocess policy violations:\n" + "\n".join(offenders)
