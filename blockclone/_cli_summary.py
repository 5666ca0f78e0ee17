"""
BlockClone — duplicate code block detector with
line-level similarity scoring.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from . import ui_messages as ui
from .registry import SimilarityScore


def _summary_value_style(*, label: str, value: int) -> str:
    if value == 0:
        return "dim"
    if label == ui.SUMMARY_LABEL_MATCHES:
        return "bold yellow"
    if label == ui.SUMMARY_LABEL_FILES_SKIPPED:
        return "yellow"
    return "bold"


def _build_summary_table(rows: list[tuple[str, int]]) -> Table:
    summary_table = Table(
        title=ui.SUMMARY_TITLE,
        show_header=True,
        width=ui.CLI_LAYOUT_WIDTH,
    )
    summary_table.add_column("Metric")
    summary_table.add_column("Value", justify="right")
    for label, value in rows:
        summary_table.add_row(
            label,
            Text(str(value), style=_summary_value_style(label=label, value=value)),
        )
    return summary_table


def _score_style(score: int) -> str:
    if score >= 95:
        return "bold red"
    if score >= 85:
        return "yellow"
    return "cyan"


def _build_matches_table(scores: Sequence[SimilarityScore]) -> Table:
    table = Table(title=ui.MATCHES_TITLE, show_header=True)
    table.add_column("ID", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("First block")
    table.add_column("Second block")
    for s in scores:
        table.add_row(
            str(s.id),
            Text(str(s.score), style=_score_style(s.score)),
            f"{s.file1.name}:{s.block1.start_line}-{s.block1.end_line} "
            f"({s.block1.kind.value})",
            f"{s.file2.name}:{s.block2.start_line}-{s.block2.end_line} "
            f"({s.block2.kind.value})",
        )
    return table


def _print_matches(
    *, console: Console, scores: Sequence[SimilarityScore], threshold: int
) -> None:
    if not scores:
        console.print(ui.fmt_no_matches(threshold))
        return
    console.print(_build_matches_table(scores))


def _print_summary(
    *,
    console: Console,
    quiet: bool,
    files_found: int,
    files_analyzed: int,
    files_skipped: int,
    blocks_count: int,
    matches_count: int,
) -> None:
    if quiet:
        console.print(ui.SUMMARY_TITLE)
        console.print(
            ui.fmt_summary_compact(
                found=files_found,
                analyzed=files_analyzed,
                skipped=files_skipped,
                blocks=blocks_count,
                matches=matches_count,
            )
        )
        return

    rows = [
        (ui.SUMMARY_LABEL_FILES_FOUND, files_found),
        (ui.SUMMARY_LABEL_FILES_ANALYZED, files_analyzed),
        (ui.SUMMARY_LABEL_FILES_SKIPPED, files_skipped),
        (ui.SUMMARY_LABEL_BLOCKS, blocks_count),
        (ui.SUMMARY_LABEL_MATCHES, matches_count),
    ]
    console.print(_build_summary_table(rows))
