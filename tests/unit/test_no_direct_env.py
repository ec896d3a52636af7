"""Conformance: environment variables are read only through core/config/base.py.

Settings reach the rest of newsdesk as `Config` fields (see `Config.load`),
so a module that reads `os.environ` directly bypasses settings.toml and the
documented override order. This test walks every module's AST and fails on:

  - os.getenv(...)
  - os.environ[...] / os.environ.get(...) / os.environ.setdefault(...)
  - from os import environ / getenv
"""

from __future__ import annotations

import ast
from pathlib import Path

_PKG_ROOT = Path(__file__).resolve().parents[2] / "src" / "newsdesk"

_ALLOWED_FILES = {_PKG_ROOT / "core" / "config" / "base.py"}


def _is_os_attr(node: ast.AST, attr: str) -> bool:
    return (
        isinstance(node, ast.Attribute)
        and node.attr == attr
        and isinstance(node.value, ast.Name)
        and node.value.id == "os"
    )


class _EnvAccessFinder(ast.NodeVisitor):
    def __init__(self) -> None:
        self.found: list[tuple[int, str]] = []

    def visit_Call(self, node: ast.Call) -> None:
        func = node.func
        if _is_os_attr(func, "getenv"):
            self.found.append((node.lineno, "os.getenv(...)"))
        elif isinstance(func, ast.Attribute) and _is_os_attr(func.value, "environ"):
            self.found.append((node.lineno, f"os.environ.{func.attr}(...)"))
        self.generic_visit(node)

    def visit_Subscript(self, node: ast.Subscript) -> None:
        if _is_os_attr(node.value, "environ"):
            self.found.append((node.lineno, "os.environ[...]"))
        self.generic_visit(node)

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        if node.module == "os":
            for alias in node.names:
                if alias.name in {"environ", "getenv"}:
                    self.found.append((node.lineno, f"from os import {alias.name}"))
        self.generic_visit(node)


def _scan(path: Path) -> list[tuple[int, str]]:
    finder = _EnvAccessFinder()
    finder.visit(ast.parse(path.read_text(encoding="utf-8"), filename=str(path)))
    return finder.found


def test_no_direct_os_environ_usage():
    offenders: list[str] = []
    for py_file in sorted(_PKG_ROOT.rglob("*.py")):
        if py_file.resolve() in _ALLOWED_FILES:
            continue
        rel = py_file.relative_to(_PKG_ROOT)
        offenders.extend(f"  {rel}:{lineno} {snippet}" for lineno, snippet in _scan(py_file))

    assert not offenders, (
        "Direct environment access outside core/config/base.py:\n"
        + "\n".join(offenders)
        + "\nAdd a Config field and read it via get_core_config() instead."
    )


def test_allowed_files_exist():
    for path in _ALLOWED_FILES:
        assert path.exists(), f"Sanctioned config file missing: {path}"


def test_finder_flags_every_access_form():
    source = (
        "import os\n"
        "from os import environ\n"
        "a = os.getenv('A')\n"
        "b = os.environ['B']\n"
        "c = os.environ.get('C')\n"
    )
    finder = _EnvAccessFinder()
    finder.visit(ast.parse(source))

    assert [lineno for lineno, _ in finder.found] == [2, 3, 4, 5]
