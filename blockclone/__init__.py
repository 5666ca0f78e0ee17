"""
BlockClone — duplicate code block detector with
line-level similarity scoring.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""

from importlib.metadata import PackageNotFoundError, version

from loguru import logger

try:
    __version__ = version("blockclone")
except PackageNotFoundError:
    __version__ = "dev"

# Library logging stays silent until an application opts in.
logger.disable("blockclone")

__all__ = ["__version__"]
