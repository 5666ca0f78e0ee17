"""
BlockClone — duplicate code block detector with
line-level similarity scoring.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

import ast
from collections.abc import Iterator, Mapping
from typing import Protocol, runtime_checkable

from .blocks import LOOP_KINDS, BlockKind
from .errors import ExtractionError, InvalidLoopKindError

# =========================
# Capability
# =========================


@runtime_checkable
class BlockExtractor(Protocol):
    """
    Source reader that locates block boundaries.

    Every returned map goes from absolute (1-based) line number to the raw
    text of that line.
    """

    comment_prefixes: tuple[str, ...]

    def class_span(self, source: str) -> dict[int, str]: ...

    def method_spans(self, class_lines: Mapping[int, str]) -> list[dict[int, str]]: ...

    def loop_spans(
        self, block_lines: Mapping[int, str], kind: BlockKind
    ) -> list[dict[int, str]]: ...


# =========================
# Helpers
# =========================


def require_loop_kind(kind: object) -> BlockKind:
    if not isinstance(kind, BlockKind) or kind not in LOOP_KINDS:
        raise InvalidLoopKindError(f"Unsupported loop kind: {kind!r}")
    return kind


def line_map_from_source(source: str) -> dict[int, str]:
    return dict(enumerate(source.splitlines(), start=1))


def slice_lines(lines: Mapping[int, str], start: int, end: int) -> dict[int, str]:
    return {n: lines[n] for n in range(start, end + 1) if n in lines}


_LOOP_NODES: dict[BlockKind, tuple[type[ast.stmt], ...]] = {
    BlockKind.FOR_LOOP: (ast.For, ast.AsyncFor),
    BlockKind.WHILE_LOOP: (ast.While,),
}
_ANY_LOOP = (ast.For, ast.AsyncFor, ast.While)


def _parse_fragment(lines: Mapping[int, str]) -> tuple[list[ast.stmt], int]:
    """
    Parse a line map cut out of a larger file.

    Returns the top-level statements and the offset that turns a fragment
    line number into an absolute one. Indented fragments are wrapped in a
    dummy ``if`` so their indentation stays valid.
    """
    if not lines:
        raise ExtractionError("Cannot parse an empty fragment")
    first = min(lines)
    last = max(lines)
    body = [lines.get(n, "") for n in range(first, last + 1)]
    head = body[0]
    indented = head[: len(head) - len(head.lstrip())] != ""

    text = "\n".join(body) + "\n"
    offset = first - 1
    if indented:
        text = "if True:\n" + text
        offset -= 1

    try:
        tree = ast.parse(text)
    except SyntaxError as e:
        raise ExtractionError(
            f"Failed to parse fragment at lines {first}-{last}: {e.msg}"
        ) from e

    stmts: list[ast.stmt] = tree.body
    if indented:
        wrapper = stmts[0]
        assert isinstance(wrapper, ast.If)
        stmts = wrapper.body
    return stmts, offset


def _node_span(node: ast.stmt, offset: int) -> tuple[int, int]:
    end = getattr(node, "end_lineno", None) or node.lineno
    return node.lineno + offset, end + offset


def _iter_outer_loops(
    roots: list[ast.stmt], offset: int, block_start: int
) -> Iterator[ast.stmt]:
    # The fragment's own loop header is the block itself: look inside it.
    stack: list[ast.AST] = []
    for root in reversed(roots):
        if isinstance(root, _ANY_LOOP) and root.lineno + offset == block_start:
            stack.extend(reversed(list(ast.iter_child_nodes(root))))
        else:
            stack.append(root)

    while stack:
        node = stack.pop()
        if isinstance(node, _ANY_LOOP):
            yield node
            continue
        stack.extend(reversed(list(ast.iter_child_nodes(node))))


# =========================
# Python sources
# =========================


class PythonBlockExtractor:
    """Block boundaries for Python modules, read with :mod:`ast`."""

    __slots__ = ()

    comment_prefixes = ("#",)

    def class_span(self, source: str) -> dict[int, str]:
        try:
            tree = ast.parse(source)
        except SyntaxError as e:
            raise ExtractionError(f"Failed to parse source: {e.msg}") from e

        for node in tree.body:
            if isinstance(node, ast.ClassDef):
                start, end = _node_span(node, 0)
                return slice_lines(line_map_from_source(source), start, end)
        raise ExtractionError("No class declaration found")

    def method_spans(self, class_lines: Mapping[int, str]) -> list[dict[int, str]]:
        stmts, offset = _parse_fragment(class_lines)
        cls = next((s for s in stmts if isinstance(s, ast.ClassDef)), None)
        if cls is None:
            raise ExtractionError("Fragment does not hold a class declaration")

        spans: list[dict[int, str]] = []
        for node in cls.body:
            if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                start, end = _node_span(node, offset)
                spans.append(slice_lines(class_lines, start, end))
        return spans

    def loop_spans(
        self, block_lines: Mapping[int, str], kind: BlockKind
    ) -> list[dict[int, str]]:
        loop_kind = require_loop_kind(kind)
        stmts, offset = _parse_fragment(block_lines)
        wanted = _LOOP_NODES[loop_kind]

        spans: list[dict[int, str]] = []
        for node in _iter_outer_loops(stmts, offset, min(block_lines)):
            if not isinstance(node, wanted):
                continue
            start, end = _node_span(node, offset)
            spans.append(slice_lines(block_lines, start, end))
        return spans
