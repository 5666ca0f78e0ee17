"""
BlockClone — duplicate code block detector with
line-level similarity scoring.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from itertools import combinations

from loguru import logger

from .contracts import DEFAULT_THRESHOLD
from .normalize import NormalizationConfig
from .registry import ScoreRegistry, SimilarityScore
from .scoring import SimilarityScorer
from .source_unit import SourceUnit


def compare_units(
    unit_a: SourceUnit,
    unit_b: SourceUnit,
    *,
    scorer: SimilarityScorer,
    registry: ScoreRegistry,
    threshold: int = DEFAULT_THRESHOLD,
    same_kind_only: bool = False,
) -> list[SimilarityScore]:
    """
    Score every comparable block of ``unit_a`` against every one of ``unit_b``.

    Pairs scoring at least ``threshold`` are registered, in discovery order
    with ``unit_a`` as the outer loop. A unit without blocks yields nothing.
    """
    found: list[SimilarityScore] = []
    blocks_b = unit_b.comparable_blocks
    for block_a in unit_a.comparable_blocks:
        for block_b in blocks_b:
            if same_kind_only and block_a.kind is not block_b.kind:
                continue
            value = scorer.score(block_a, block_b)
            if value < threshold:
                continue
            found.append(
                registry.add_similarity_score(
                    value, unit_a.path, unit_b.path, block_a, block_b
                )
            )
    logger.debug(
        "Compared {} with {}: {} matches", unit_a.path, unit_b.path, len(found)
    )
    return found


def compare_all(
    units: Sequence[SourceUnit],
    *,
    scorer: SimilarityScorer,
    registry: ScoreRegistry,
    threshold: int = DEFAULT_THRESHOLD,
    same_kind_only: bool = False,
) -> list[SimilarityScore]:
    found: list[SimilarityScore] = []
    for unit_a, unit_b in combinations(units, 2):
        found.extend(
            compare_units(
                unit_a,
                unit_b,
                scorer=scorer,
                registry=registry,
                threshold=threshold,
                same_kind_only=same_kind_only,
            )
        )
    return found


def build_units(
    paths: Iterable[str], cfg: NormalizationConfig | None = None
) -> list[SourceUnit]:
    return [SourceUnit(p, cfg=cfg).build_all() for p in paths]
