"""
BlockClone — duplicate code block detector with
line-level similarity scoring.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final

MIN_SCORE: Final = 0
MAX_SCORE: Final = 100
DEFAULT_THRESHOLD: Final = 80


class ExitCode(IntEnum):
    SUCCESS = 0
    CONTRACT_ERROR = 2
    INTERNAL_ERROR = 5


REPOSITORY_URL: Final = "https://github.com/orenlab/blockclone"
ISSUES_URL: Final = "https://github.com/orenlab/blockclone/issues"

EXIT_CODE_DESCRIPTIONS: Final[tuple[tuple[ExitCode, str], ...]] = (
    (ExitCode.SUCCESS, "success"),
    (
        ExitCode.CONTRACT_ERROR,
        (
            "contract error (missing paths, fewer than two analyzable files, "
            "invalid threshold)"
        ),
    ),
    (
        ExitCode.INTERNAL_ERROR,
        "internal error (unexpected exception; please report)",
    ),
)


def cli_help_epilog() -> str:
    lines = ["Exit codes"]
    for code, description in EXIT_CODE_DESCRIPTIONS:
        lines.append(f"  - {int(code)} - {description}")
    lines.extend(
        [
            "",
            f"Repository: {REPOSITORY_URL}",
            f"Issues: {ISSUES_URL}",
        ]
    )
    return "\n".join(lines)
