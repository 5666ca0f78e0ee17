"""
BlockClone — duplicate code block detector with
line-level similarity scoring.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .cfamily import BraceBlockExtractor
from .errors import ValidationError
from .extractor import BlockExtractor, PythonBlockExtractor

DEFAULT_EXCLUDES = (
    ".git",
    ".venv",
    "venv",
    "__pycache__",
    "site-packages",
    "node_modules",
    "dist",
    "build",
    "target",
    ".tox",
)

PYTHON_SUFFIXES = frozenset({".py"})
BRACE_SUFFIXES = frozenset(
    {
        ".java",
        ".cc",
        ".cpp",
        ".cs",
        ".h",
        ".hpp",
        ".js",
        ".kt",
        ".scala",
        ".ts",
    }
)
SOURCE_SUFFIXES = PYTHON_SUFFIXES | BRACE_SUFFIXES


def extractor_for_path(path: str | Path) -> BlockExtractor:
    if Path(path).suffix.lower() in BRACE_SUFFIXES:
        return BraceBlockExtractor()
    return PythonBlockExtractor()


def iter_source_files(
    root: str | Path,
    excludes: tuple[str, ...] = DEFAULT_EXCLUDES,
    *,
    suffixes: frozenset[str] = SOURCE_SUFFIXES,
    max_files: int = 100_000,
) -> Iterable[str]:
    try:
        rootp = Path(root).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise ValidationError(f"Cannot scan {root}: {e}") from e

    if rootp.is_file():
        yield str(rootp)
        return

    file_count = 0
    for p in sorted(rootp.rglob("*")):
        if p.suffix.lower() not in suffixes or not p.is_file():
            continue
        # Symlinks may point outside the scanned tree.
        try:
            p.resolve().relative_to(rootp)
        except ValueError:
            continue

        parts = set(p.relative_to(rootp).parts)
        if any(ex in parts for ex in excludes):
            continue

        file_count += 1
        if file_count > max_files:
            raise ValidationError(
                f"More than {max_files} source files under {rootp}; "
                "pass narrower paths."
            )
        yield str(p)


def collect_source_files(paths: Iterable[str | Path]) -> list[str]:
    """Expand files and directories into a de-duplicated, ordered file list."""
    seen: dict[str, None] = {}
    for path in paths:
        for fp in iter_source_files(path):
            seen.setdefault(fp, None)
    return list(seen)
