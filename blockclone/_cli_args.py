"""
BlockClone — duplicate code block detector with
line-level similarity scoring.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

import argparse

from . import ui_messages as ui
from .contracts import DEFAULT_THRESHOLD, cli_help_epilog


class _HelpFormatter(
    argparse.ArgumentDefaultsHelpFormatter, argparse.RawDescriptionHelpFormatter
):
    pass


def build_parser(version: str) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="blockclone",
        description="Duplicate code block detector with similarity scoring.",
        epilog=cli_help_epilog(),
        formatter_class=_HelpFormatter,
    )
    ap.add_argument(
        "--version",
        action="version",
        version=ui.version_output(version),
        help=ui.HELP_VERSION,
    )

    core_group = ap.add_argument_group("Target")
    core_group.add_argument(
        "paths",
        nargs="+",
        metavar="PATH",
        help=ui.HELP_PATHS,
    )

    tune_group = ap.add_argument_group("Analysis Tuning")
    tune_group.add_argument(
        "--threshold",
        type=int,
        default=DEFAULT_THRESHOLD,
        help=ui.HELP_THRESHOLD,
    )
    tune_group.add_argument(
        "--same-kind-only",
        action="store_true",
        help=ui.HELP_SAME_KIND_ONLY,
    )
    tune_group.add_argument(
        "--no-normalize-names",
        action="store_true",
        help=ui.HELP_NO_NORMALIZE_NAMES,
    )
    tune_group.add_argument(
        "--no-normalize-constants",
        action="store_true",
        help=ui.HELP_NO_NORMALIZE_CONSTANTS,
    )
    tune_group.add_argument(
        "--keep-comments",
        action="store_true",
        help=ui.HELP_KEEP_COMMENTS,
    )

    out_group = ap.add_argument_group("Reporting")
    out_group.add_argument(
        "--show-lines",
        action="store_true",
        help=ui.HELP_SHOW_LINES,
    )
    out_group.add_argument(
        "--no-color",
        action="store_true",
        help=ui.HELP_NO_COLOR,
    )
    out_group.add_argument(
        "--quiet",
        action="store_true",
        help=ui.HELP_QUIET,
    )
    out_group.add_argument(
        "--verbose",
        action="store_true",
        help=ui.HELP_VERBOSE,
    )
    out_group.add_argument(
        "--debug",
        action="store_true",
        help=ui.HELP_DEBUG,
    )
    return ap
