from __future__ import annotations

import os
import sys
import time
from collections.abc import Mapping, Sequence
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text
from rich.theme import Theme

from . import __version__
from . import ui_messages as ui
from ._cli_args import build_parser
from ._cli_summary import _print_matches, _print_summary
from .contracts import ISSUES_URL, MAX_SCORE, MIN_SCORE, ExitCode
from .detector import build_units, compare_all
from .errors import ValidationError
from .normalize import NormalizationConfig
from .registry import LinesUnavailable, ScoreRegistry, SimilarityScore
from .scanner import collect_source_files
from .scoring import SimilarityScorer

# Custom theme for Rich
custom_theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "dim": "dim",
    }
)

LOG_FORMAT = "{time:HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"


def _make_console(*, no_color: bool) -> Console:
    return Console(theme=custom_theme, width=100, no_color=no_color)


console = _make_console(no_color=False)


def print_banner() -> None:
    console.print(
        Panel(
            ui.banner_title(__version__),
            border_style="blue",
            padding=(0, 2),
            width=ui.CLI_LAYOUT_WIDTH,
            expand=False,
        )
    )


def configure_logging(*, verbose: bool) -> None:
    if not verbose:
        logger.disable("blockclone")
        return
    logger.remove()
    logger.add(sys.stderr, level="DEBUG", format=LOG_FORMAT, colorize=False)
    logger.enable("blockclone")


def _is_debug_enabled(
    *,
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> bool:
    args = list(sys.argv[1:] if argv is None else argv)
    debug_from_flag = any(arg == "--debug" for arg in args)
    env = os.environ if environ is None else environ
    debug_from_env = env.get("BLOCKCLONE_DEBUG") == "1"
    return debug_from_flag or debug_from_env


def _print_score_lines(registry: ScoreRegistry, score: SimilarityScore) -> None:
    result = registry.get_similarity_score_lines(score.id)
    if isinstance(result, LinesUnavailable):
        console.print(
            ui.fmt_lines_unavailable(score_id=result.score_id, reason=result.reason)
        )
        return
    console.print(Rule(f"#{score.id} score={score.score}", style="dim"))
    for path, lines in ((score.file1, result.lines1), (score.file2, result.lines2)):
        console.print(f"[info]{path}[/info]")
        for lineno, text in lines.items():
            console.print(Text.assemble((f"{lineno:>5} ", "dim"), text))


def _main_impl() -> None:
    ap = build_parser(__version__)
    args = ap.parse_args()

    global console
    console = _make_console(no_color=args.no_color)
    configure_logging(verbose=args.verbose)

    if not MIN_SCORE <= args.threshold <= MAX_SCORE:
        console.print(
            ui.fmt_contract_error(
                ui.ERR_INVALID_THRESHOLD.format(
                    low=MIN_SCORE, high=MAX_SCORE, value=args.threshold
                )
            )
        )
        sys.exit(ExitCode.CONTRACT_ERROR)

    t0 = time.monotonic()

    if not args.quiet:
        print_banner()

    for raw in args.paths:
        if not Path(raw).exists():
            console.print(
                ui.fmt_contract_error(ui.ERR_PATH_NOT_FOUND.format(path=raw))
            )
            sys.exit(ExitCode.CONTRACT_ERROR)

    try:
        files = collect_source_files(args.paths)
    except ValidationError as e:
        console.print(ui.fmt_contract_error(ui.ERR_INVALID_PATH.format(error=e)))
        sys.exit(ExitCode.CONTRACT_ERROR)

    if len(files) < 2:
        console.print(
            ui.fmt_contract_error(ui.ERR_NOT_ENOUGH_FILES.format(count=len(files)))
        )
        sys.exit(ExitCode.CONTRACT_ERROR)

    cfg = NormalizationConfig(
        normalize_names=not args.no_normalize_names,
        normalize_constants=not args.no_normalize_constants,
        strip_comments=not args.keep_comments,
    )

    if not args.quiet:
        console.print(ui.fmt_comparing(len(files)))

    with console.status(ui.STATUS_DECOMPOSING):
        units = build_units(files, cfg=cfg)

    skipped = [u for u in units if u.type_block is None]
    for unit in skipped:
        console.print(ui.fmt_skipped_file(unit.path))

    registry = ScoreRegistry()
    with console.status(ui.STATUS_COMPARING):
        scores = compare_all(
            units,
            scorer=SimilarityScorer(),
            registry=registry,
            threshold=args.threshold,
            same_kind_only=args.same_kind_only,
        )

    if not args.quiet:
        _print_matches(console=console, scores=scores, threshold=args.threshold)
    if args.show_lines:
        for score in scores:
            _print_score_lines(registry, score)

    _print_summary(
        console=console,
        quiet=args.quiet,
        files_found=len(files),
        files_analyzed=len(units) - len(skipped),
        files_skipped=len(skipped),
        blocks_count=sum(len(u.comparable_blocks) for u in units),
        matches_count=len(scores),
    )

    if not args.quiet:
        elapsed = time.monotonic() - t0
        console.print(f"\n[dim]Done in {elapsed:.1f}s[/dim]")


def main() -> None:
    try:
        _main_impl()
    except SystemExit:
        raise
    except Exception as e:
        console.print(
            ui.fmt_internal_error(
                e,
                issues_url=ISSUES_URL,
                debug=_is_debug_enabled(),
            )
        )
        sys.exit(ExitCode.INTERNAL_ERROR)


if __name__ == "__main__":
    main()
