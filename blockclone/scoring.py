"""
BlockClone — duplicate code block detector with
line-level similarity scoring.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from .blocks import Block
from .contracts import MAX_SCORE, MIN_SCORE


def common_line_count(a: Counter[str], b: Counter[str]) -> int:
    return sum((a & b).values())


class SimilarityScorer:
    """
    Integer similarity of two normalized blocks.

    The score is the multiset Dice coefficient of the blocks' non-empty
    normalized lines, scaled to ``MIN_SCORE..MAX_SCORE``:

        score = MAX_SCORE * 2 * |A & B| // (|A| + |B|)

    Line order is ignored, so the score is symmetric. A block scored against
    itself gets ``MAX_SCORE``; blocks with no line in common get ``MIN_SCORE``.
    """

    __slots__ = ()

    min_score = MIN_SCORE
    max_score = MAX_SCORE

    def score(self, a: Block, b: Block) -> int:
        return self.score_lines(a.normalized_lines(), b.normalized_lines())

    def score_lines(self, lines_a: Sequence[str], lines_b: Sequence[str]) -> int:
        bag_a = Counter(line for line in lines_a if line)
        bag_b = Counter(line for line in lines_b if line)
        if not bag_a or not bag_b:
            return MIN_SCORE
        total = bag_a.total() + bag_b.total()
        return (MAX_SCORE * 2 * common_line_count(bag_a, bag_b)) // total
