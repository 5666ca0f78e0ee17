from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from tests._sources import SourceWriter


@pytest.fixture
def write_source(tmp_path: Path) -> SourceWriter:
    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, "utf-8")
        return path

    return _write


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    messages: list[str] = []
    logger.enable("blockclone")
    handler_id = logger.add(
        lambda message: messages.append(message.record["message"]),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)
    logger.disable("blockclone")
