"""
BlockClone — duplicate code block detector with
line-level similarity scoring.

Copyright (c) 2026 Den Rozhnovskiy
Licensed under the MIT License.
"""


class BlockCloneError(Exception):
    """Base exception for BlockClone."""


class FileProcessingError(BlockCloneError):
    """Error processing a source file."""


class SourceReadError(FileProcessingError):
    """Source file could not be read."""


class ExtractionError(FileProcessingError):
    """Extractor could not locate an expected span."""


class InvalidLoopKindError(ExtractionError, ValueError):
    """Requested loop kind is not a loop kind."""


class ValidationError(BlockCloneError):
    """Input validation failed."""


class ScoreLookupError(BlockCloneError, IndexError):
    """No similarity score exists for the requested id."""

    def __init__(self, score_id: int, size: int) -> None:
        super().__init__(
            f"Similarity score id {score_id} out of range (registry holds {size})"
        )
        self.score_id = score_id
