import itertools

import pytest

from blockclone.blocks import Block, BlockKind
from blockclone.contracts import MAX_SCORE, MIN_SCORE
from blockclone.normalize import NormalizationConfig, normalize_block
from blockclone.scoring import SimilarityScorer


def _block(*lines: str, kind: BlockKind = BlockKind.METHOD, start: int = 1) -> Block:
    raw = Block.from_lines(kind, dict(enumerate(lines, start=start)))
    return normalize_block(raw, NormalizationConfig())


SAMPLES = [
    _block("def f(a):", "    return a"),
    _block("def g(b):", "    b += 1", "    return b"),
    _block("while x:", "    x -= 1", kind=BlockKind.WHILE_LOOP),
    _block("for i in r:", "    print(i)", "    print(i)", kind=BlockKind.FOR_LOOP),
    _block("import os"),
    _block("", "   "),
]


def test_score_bounds_constants() -> None:
    scorer = SimilarityScorer()
    assert scorer.min_score == MIN_SCORE == 0
    assert scorer.max_score == MAX_SCORE == 100


@pytest.mark.parametrize(("a", "b"), list(itertools.product(SAMPLES, repeat=2)))
def test_score_is_symmetric_and_bounded(a: Block, b: Block) -> None:
    scorer = SimilarityScorer()
    value = scorer.score(a, b)
    assert value == scorer.score(b, a)
    assert MIN_SCORE <= value <= MAX_SCORE


@pytest.mark.parametrize("block", SAMPLES[:5])
def test_self_similarity_is_maximal(block: Block) -> None:
    assert SimilarityScorer().score(block, block) == MAX_SCORE


def test_renamed_blocks_score_maximal() -> None:
    a = _block("def total(self):", "    result = 0", "    return result", start=8)
    b = _block("def compute(self):", "    acc = 0", "    return acc", start=40)
    assert SimilarityScorer().score(a, b) == MAX_SCORE


def test_disjoint_blocks_score_zero() -> None:
    a = _block("import os")
    b = _block("while x:", "    pass", kind=BlockKind.WHILE_LOOP)
    assert SimilarityScorer().score(a, b) == MIN_SCORE


def test_empty_normalized_content_scores_minimum() -> None:
    scorer = SimilarityScorer()
    blank = _block("", "  # comment only")
    full = SAMPLES[0]
    assert scorer.score(blank, full) == MIN_SCORE
    assert scorer.score(blank, blank) == MIN_SCORE

    raw = Block.from_lines(BlockKind.METHOD, {1: "def f(a):", 2: "    return a"})
    assert raw.normalized is None
    assert scorer.score(raw, full) == MIN_SCORE


def test_partial_overlap_uses_dice_coefficient() -> None:
    scorer = SimilarityScorer()
    assert scorer.score_lines(["a", "b", "c"], ["a", "b", "d"]) == 66
    assert scorer.score_lines(["a", "a"], ["a"]) == 66
    assert scorer.score_lines(["a", "b"], ["b", "a"]) == MAX_SCORE
    assert scorer.score_lines(["a", "", "b"], ["a", "b"]) == MAX_SCORE


def test_adding_matching_lines_never_lowers_score() -> None:
    scorer = SimilarityScorer()
    left = ["x", "y", "z"]
    right = ["x", "q"]
    previous = scorer.score_lines(left, right)
    for extra in ("m1", "m2", "m3", "m4"):
        left.append(extra)
        right.append(extra)
        current = scorer.score_lines(left, right)
        assert current >= previous
        previous = current
