"""
BlockClone — duplicate code block detector with
line-level similarity scoring.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from .blocks import Block, BlockSpan
from .errors import ScoreLookupError, SourceReadError
from .source_unit import read_source


@dataclass(frozen=True, slots=True)
class SimilarityScore:
    id: int
    score: int
    file1: Path
    file2: Path
    block1: BlockSpan
    block2: BlockSpan


@dataclass(frozen=True, slots=True)
class SimilarityLines:
    score_id: int
    lines1: dict[int, str]
    lines2: dict[int, str]


@dataclass(frozen=True, slots=True)
class LinesUnavailable:
    score_id: int
    reason: str


def _literal_lines(path: Path, span: BlockSpan) -> dict[int, str]:
    rows = read_source(path).splitlines()
    return {
        n: rows[n - 1]
        for n in range(span.start_line, span.end_line + 1)
        if 0 < n <= len(rows)
    }


def _as_span(block: Block | BlockSpan) -> BlockSpan:
    return block.span if isinstance(block, Block) else block


class ScoreRegistry:
    """
    Append-only store of similarity scores.

    Ids start at 0 and equal the record's position; appends are serialized so
    ids stay gapless when several threads register scores.
    """

    __slots__ = ("_lock", "_scores")

    def __init__(self) -> None:
        self._scores: list[SimilarityScore] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._scores)

    def __iter__(self) -> Iterator[SimilarityScore]:
        return iter(tuple(self._scores))

    def __getitem__(self, score_id: int) -> SimilarityScore:
        return self._get(score_id)

    @property
    def scores(self) -> tuple[SimilarityScore, ...]:
        return tuple(self._scores)

    def add_similarity_score(
        self,
        score: int,
        file1: str | Path,
        file2: str | Path,
        block1: Block | BlockSpan,
        block2: Block | BlockSpan,
    ) -> SimilarityScore:
        with self._lock:
            record = SimilarityScore(
                id=len(self._scores),
                score=score,
                file1=Path(file1),
                file2=Path(file2),
                block1=_as_span(block1),
                block2=_as_span(block2),
            )
            self._scores.append(record)
        return record

    def get_similarity_score_lines(
        self, score_id: int
    ) -> SimilarityLines | LinesUnavailable:
        """
        Re-read both files and return the literal lines behind a score.

        Files that can no longer be read yield ``LinesUnavailable``; the score
        itself stays registered.
        """
        record = self._get(score_id)
        try:
            lines1 = _literal_lines(record.file1, record.block1)
            lines2 = _literal_lines(record.file2, record.block2)
        except SourceReadError as e:
            logger.error("Could not get lines for score {}: {}", score_id, e)
            return LinesUnavailable(score_id=score_id, reason=str(e))
        return SimilarityLines(score_id=score_id, lines1=lines1, lines2=lines2)

    def _get(self, score_id: int) -> SimilarityScore:
        if not isinstance(score_id, int) or not 0 <= score_id < len(self._scores):
            raise ScoreLookupError(score_id, len(self._scores))
        return self._scores[score_id]
