from __future__ import annotations

import ast
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

# High-level orchestrator modules.
# The core (tree/codes/codec/bit I/O) must NEVER import these, nor the
# container/config layer: it only knows symbols, bits and huffkit.errors.
ORCH_PREFIXES: tuple[str, ...] = (
    "huffkit.cli",
    "huffkit.files",
    "huffkit.verify",
    "huffkit.stats",
)

CORE_PREFIX = "huffkit.core"
CORE_ALLOWED: tuple[str, ...] = (CORE_PREFIX, "huffkit.errors")

PACKAGE_ROOT = "huffkit"


@dataclass(frozen=True)
class ImportEdge:
    src: str
    dst: str
    file: Path
    lineno: int


def _has_prefix(mod: str, prefixes: Iterable[str]) -> bool:
    return any(mod == p or mod.startswith(p + ".") for p in prefixes)


def _module_name_from_path(src_dir: Path, py_file: Path) -> str | None:
    try:
        rel = py_file.relative_to(src_dir)
    except ValueError:
        return None

    parts = list(rel.parts)
    if not parts or parts[0] != PACKAGE_ROOT:
        return None

    if py_file.name == "__init__.py":
        parts = parts[:-1]
    else:
        parts[-1] = py_file.stem

    if not parts:
        return None
    return ".".join(parts)


def _resolve_relative(current_mod: str, level: int, module: str | None) -> str | None:
    if level <= 0:
        return module

    base = current_mod.split(".")[:-1]
    if level > len(base) + 1:
        return None
    base = base[: len(base) - level + 1]

    if module:
        return ".".join(base + module.split("."))
    return ".".join(base)


def _iter_import_edges(src_dir: Path) -> Iterable[ImportEdge]:
    for py in src_dir.rglob("*.py"):
        mod = _module_name_from_path(src_dir, py)
        if not mod:
            continue

        tree = ast.parse(py.read_text(encoding="utf-8"), filename=str(py))

        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    name = alias.name
                    if _has_prefix(name, (PACKAGE_ROOT,)):
                        yield ImportEdge(src=mod, dst=name, file=py, lineno=getattr(node, "lineno", 0))

            elif isinstance(node, ast.ImportFrom):
                if node.module is None and node.level == 0:
                    continue
                abs_mod = _resolve_relative(mod, node.level, node.module)
                if abs_mod and _has_prefix(abs_mod, (PACKAGE_ROOT,)):
                    yield ImportEdge(src=mod, dst=abs_mod, file=py, lineno=getattr(node, "lineno", 0))


def _edges() -> list[ImportEdge]:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if not src_dir.is_dir():
        raise AssertionError(f"Expected src/ directory at: {src_dir}")
    return [e for e in _iter_import_edges(src_dir) if e.src != e.dst]


def _fail(title: str, violations: list[ImportEdge], fix: str) -> None:
    if not violations:
        return
    lines = [title]
    for v in sorted(violations, key=lambda e: (str(e.file), e.lineno, e.src, e.dst)):
        lines.append(f"  {v.file}:{v.lineno}  {v.src}  ->  {v.dst}")
    lines.append("")
    lines.append(fix)
    raise AssertionError("\n".join(lines))


def test_no_low_level_imports_orchestrator() -> None:
    """
    Hard dependency direction:
      ORCH -> may depend on everything else
      LOW  -> must NOT depend on ORCH
    """
    violations = [
        e for e in _edges() if not _has_prefix(e.src, ORCH_PREFIXES) and _has_prefix(e.dst, ORCH_PREFIXES)
    ]
    _fail(
        "Forbidden imports detected (LOW -> ORCH):",
        violations,
        "Fix: move high-level logic out of LOW modules, or invert the dependency.",
    )


def test_core_is_self_contained() -> None:
    violations = [
        e for e in _edges() if _has_prefix(e.src, (CORE_PREFIX,)) and not _has_prefix(e.dst, CORE_ALLOWED)
    ]
    _fail(
        "Forbidden imports detected (core -> outside core):",
        violations,
        "Fix: the core only deals with symbols and bits; keep formats and files outside it.",
    )
