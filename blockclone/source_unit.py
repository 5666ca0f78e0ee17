"""
BlockClone — duplicate code block detector with
line-level similarity scoring.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path

from loguru import logger

from .blocks import Block, BlockKind
from .errors import ExtractionError, SourceReadError
from .extractor import BlockExtractor
from .normalize import NormalizationConfig, normalize_block
from .scanner import extractor_for_path

# Fixed so that discovery order is reproducible.
_LOOP_SCAN_ORDER = (BlockKind.FOR_LOOP, BlockKind.WHILE_LOOP)


def read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"Cannot read {path}: {e}") from e


class SourceUnit:
    """
    One source file split into a flat list of typed blocks.

    The list is built in discovery order: the type block, then its methods,
    then loops as they are found. Blocks are only ever appended.
    """

    __slots__ = ("_blocks", "cfg", "extractor", "path")

    def __init__(
        self,
        path: str | Path,
        extractor: BlockExtractor | None = None,
        cfg: NormalizationConfig | None = None,
    ) -> None:
        self.path = Path(path)
        self.extractor = extractor if extractor is not None else extractor_for_path(
            self.path
        )
        cfg = cfg if cfg is not None else NormalizationConfig()
        if cfg.line_comments is None:
            cfg = replace(cfg, line_comments=self.extractor.comment_prefixes)
        self.cfg = cfg
        self._blocks: list[Block] = []

    def __repr__(self) -> str:
        return f"SourceUnit({str(self.path)!r}, blocks={len(self._blocks)})"

    # =========================
    # Accessors
    # =========================

    @property
    def blocks(self) -> tuple[Block, ...]:
        return tuple(self._blocks)

    @property
    def type_block(self) -> Block | None:
        return next((b for b in self._blocks if b.kind is BlockKind.TYPE), None)

    @property
    def comparable_blocks(self) -> tuple[Block, ...]:
        return tuple(b for b in self._blocks if b.kind is not BlockKind.TYPE)

    # =========================
    # Decomposition steps
    # =========================

    def extract_type(self) -> None:
        if self.type_block is not None:
            return
        try:
            source = read_source(self.path)
            lines = self.extractor.class_span(source)
            block = Block.from_lines(BlockKind.TYPE, lines)
        except (SourceReadError, ExtractionError) as e:
            logger.warning("No type block for {}: {}", self.path, e)
            return
        self._blocks.insert(0, block)

    def extract_methods(self) -> None:
        if any(b.kind is BlockKind.METHOD for b in self._blocks):
            return
        type_block = self.type_block
        if type_block is None:
            logger.warning("Skipping methods for {}: no type block", self.path)
            return
        try:
            spans = self.extractor.method_spans(type_block.content)
        except ExtractionError as e:
            logger.warning("Method extraction failed for {}: {}", self.path, e)
            return
        for span in spans:
            self._append_span(BlockKind.METHOD, span, type_block)

    def extract_loops(self, seen_start_lines: set[int] | None = None) -> int:
        """
        Discover loops nested in every non-type block until none are left.

        Each newly found loop is queued and scanned in turn, so loops nested
        at any depth are reached. A loop whose first line is already in
        ``seen_start_lines`` or taken by an existing loop block is dropped;
        the set is updated in place.

        Returns the number of loop blocks added.
        """
        seen = set() if seen_start_lines is None else seen_start_lines
        seen.update(b.start_line for b in self._blocks if b.kind.is_loop)
        worklist = deque(b for b in self._blocks if b.kind is not BlockKind.TYPE)
        added = 0

        while worklist:
            parent = worklist.popleft()
            for kind in _LOOP_SCAN_ORDER:
                try:
                    spans = self.extractor.loop_spans(parent.content, kind)
                except ExtractionError as e:
                    logger.warning(
                        "Loop extraction failed in {} lines {}-{}: {}",
                        self.path,
                        parent.start_line,
                        parent.end_line,
                        e,
                    )
                    continue
                for span in spans:
                    if not span:
                        logger.debug(
                            "Skipping empty {} span in {}", kind.value, self.path
                        )
                        continue
                    start = min(span)
                    if start in seen:
                        continue
                    block = self._append_span(kind, span, parent)
                    if block is None:
                        continue
                    seen.add(start)
                    worklist.append(block)
                    added += 1
        return added

    def normalize_all(self) -> None:
        self._blocks = [
            b if b.kind is BlockKind.TYPE else normalize_block(b, self.cfg)
            for b in self._blocks
        ]

    def build_all(self) -> SourceUnit:
        self.extract_type()
        self.extract_methods()
        self.extract_loops()
        self.normalize_all()
        return self

    # =========================
    # Helpers
    # =========================

    def _append_span(
        self, kind: BlockKind, span: Mapping[int, str], parent: Block
    ) -> Block | None:
        try:
            block = Block.from_lines(kind, span)
        except ExtractionError as e:
            logger.warning(
                "Skipping malformed {} span in {}: {}", kind.value, self.path, e
            )
            return None
        if not parent.span.contains(block.span):
            logger.warning(
                "Skipping {} span {}-{} outside lines {}-{} in {}",
                kind.value,
                block.start_line,
                block.end_line,
                parent.start_line,
                parent.end_line,
                self.path,
            )
            return None
        self._blocks.append(block)
        return block
