from __future__ import annotations

import platform
import shlex
import sys
import traceback
from pathlib import Path

from . import __version__
from .contracts import ISSUES_URL

BANNER_SUBTITLE = "[italic]Duplicate code block detector[/italic]"

MARKER_CONTRACT_ERROR = "[error]CONTRACT ERROR:[/error]"
MARKER_INTERNAL_ERROR = "[error]INTERNAL ERROR:[/error]"

HELP_VERSION = "Print the BlockClone version and exit."
HELP_PATHS = "Source files or directories to compare (at least two files)."
HELP_THRESHOLD = "Minimum similarity score (0-100) for a block pair to be reported."
HELP_SAME_KIND_ONLY = "Only compare blocks of the same kind (method/loop)."
HELP_NO_NORMALIZE_NAMES = "Compare identifiers literally instead of as placeholders."
HELP_NO_NORMALIZE_CONSTANTS = "Compare literals as written instead of as placeholders."
HELP_KEEP_COMMENTS = "Keep comments when comparing lines."
HELP_SHOW_LINES = "Print the source lines behind every reported match."
HELP_NO_COLOR = "Disable ANSI colors in output."
HELP_QUIET = "Minimize output (still shows warnings and errors)."
HELP_VERBOSE = "Log decomposition details to stderr."
HELP_DEBUG = "Print debug details (traceback and environment) on internal errors."

SUMMARY_TITLE = "Analysis Summary"
MATCHES_TITLE = "Similar Blocks"
CLI_LAYOUT_WIDTH = 40
SUMMARY_LABEL_FILES_FOUND = "Files found"
SUMMARY_LABEL_FILES_ANALYZED = "Files analyzed"
SUMMARY_LABEL_FILES_SKIPPED = "Files skipped"
SUMMARY_LABEL_BLOCKS = "Comparable blocks"
SUMMARY_LABEL_MATCHES = "Similar block pairs"
SUMMARY_COMPACT = (
    "Input: found={found} analyzed={analyzed} skipped={skipped} "
    "blocks={blocks} matches={matches}"
)

STATUS_DECOMPOSING = "[bold green]Decomposing source files..."
STATUS_COMPARING = "[bold green]Comparing blocks..."

INFO_COMPARING = "[info]Comparing {count} files[/info]"
INFO_NO_MATCHES = "[success]No similar blocks at threshold {threshold}.[/success]"

WARN_SKIPPED_FILE = "[warning]No comparable blocks in {path}[/warning]"
WARN_LINES_UNAVAILABLE = (
    "[warning]Lines for score {score_id} unavailable: {reason}[/warning]"
)

ERR_PATH_NOT_FOUND = "Path does not exist: {path}"
ERR_INVALID_PATH = "Invalid path: {error}"
ERR_NOT_ENOUGH_FILES = "At least two source files are required, found {count}."
ERR_INVALID_THRESHOLD = "Threshold must be between {low} and {high}, got {value}."


def version_output(version: str) -> str:
    return f"BlockClone {version}"


def banner_title(version: str) -> str:
    return (
        f"[bold white]BlockClone[/bold white] [dim]v{version}[/dim]\n{BANNER_SUBTITLE}"
    )


def fmt_comparing(count: int) -> str:
    return INFO_COMPARING.format(count=count)


def fmt_skipped_file(path: Path) -> str:
    return WARN_SKIPPED_FILE.format(path=path)


def fmt_lines_unavailable(*, score_id: int, reason: str) -> str:
    return WARN_LINES_UNAVAILABLE.format(score_id=score_id, reason=reason)


def fmt_no_matches(threshold: int) -> str:
    return INFO_NO_MATCHES.format(threshold=threshold)


def fmt_summary_compact(
    *, found: int, analyzed: int, skipped: int, blocks: int, matches: int
) -> str:
    return SUMMARY_COMPACT.format(
        found=found, analyzed=analyzed, skipped=skipped, blocks=blocks, matches=matches
    )


def fmt_contract_error(message: str) -> str:
    return f"{MARKER_CONTRACT_ERROR}\n{message}"


def fmt_internal_error(
    error: BaseException,
    *,
    issues_url: str = ISSUES_URL,
    debug: bool = False,
) -> str:
    bug_report_url = issues_url.rstrip("/") + "/new"
    error_name = type(error).__name__
    error_text = str(error).strip() or "<no message>"
    lines = [
        MARKER_INTERNAL_ERROR,
        "Unexpected exception.",
        f"Reason: {error_name}: {error_text}",
        "",
        "Next steps:",
        "- Re-run with --debug to include a traceback.",
        f"- If this is reproducible, open an issue: {bug_report_url}.",
    ]
    if not debug:
        return "\n".join(lines)

    traceback_lines = traceback.format_exception(
        type(error), error, error.__traceback__
    )
    lines.extend(
        [
            "",
            "DEBUG DETAILS",
            f"Platform: {platform.platform()}",
            f"Python: {sys.version.split()[0]}",
            f"BlockClone: {__version__}",
            f"Command: {shlex.join(sys.argv)}",
            f"CWD: {Path.cwd()}",
            "Traceback:",
            "".join(traceback_lines).rstrip(),
        ]
    )
    return "\n".join(lines)
