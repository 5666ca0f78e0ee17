"""
BlockClone — duplicate code block detector with
line-level similarity scoring.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType

from .errors import ExtractionError

LineMap = Mapping[int, str]


class BlockKind(str, Enum):
    TYPE = "type"
    METHOD = "method"
    FOR_LOOP = "for_loop"
    WHILE_LOOP = "while_loop"

    @property
    def is_loop(self) -> bool:
        return self in LOOP_KINDS


LOOP_KINDS: frozenset[BlockKind] = frozenset(
    {BlockKind.FOR_LOOP, BlockKind.WHILE_LOOP}
)


@dataclass(frozen=True, slots=True)
class BlockSpan:
    """Identity of a block inside its file: what the registry keeps."""

    kind: BlockKind
    start_line: int
    end_line: int

    def contains(self, other: BlockSpan) -> bool:
        return self.start_line <= other.start_line and other.end_line <= self.end_line


@dataclass(frozen=True, slots=True)
class Block:
    kind: BlockKind
    start_line: int
    end_line: int
    content: LineMap
    normalized: LineMap | None = None

    @classmethod
    def from_lines(cls, kind: BlockKind, lines: Mapping[int, str]) -> Block:
        """
        Build a block from a line map in ascending line order.

        Bounds come from the smallest and largest keys; gaps between keys are
        kept as-is.
        """
        if not lines:
            raise ExtractionError(f"Empty line map for {kind.value} block")
        ordered = dict(sorted(lines.items()))
        keys = list(ordered)
        return cls(
            kind=kind,
            start_line=keys[0],
            end_line=keys[-1],
            content=MappingProxyType(ordered),
        )

    @property
    def span(self) -> BlockSpan:
        return BlockSpan(self.kind, self.start_line, self.end_line)

    @property
    def loc(self) -> int:
        return self.end_line - self.start_line + 1

    def with_normalized(self, normalized: Mapping[int, str]) -> Block:
        return replace(self, normalized=MappingProxyType(dict(normalized)))

    def normalized_lines(self) -> list[str]:
        if self.normalized is None:
            return []
        return [line for _, line in sorted(self.normalized.items()) if line]
