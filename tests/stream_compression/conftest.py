"""
Shared pytest fixtures for stream_compression tests.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from stream_compression import Algorithm, EngineConfig, StreamEngine, compress
from tests.stream_compression.helpers import make_text


@pytest.fixture
def sample_text() -> bytes:
    """Plain-text payload, a few scratch buffers long."""
    return make_text(10_000)


@pytest.fixture
def engine() -> StreamEngine:
    """Engine with default settings, independent of the environment."""
    return StreamEngine(EngineConfig())


@pytest.fixture
def write_archive(tmp_path: Path) -> Callable[[str, bytes, Algorithm], Path]:
    """
    Factory writing `data` compressed with `algorithm` to tmp_path / name.

    Returns the path of the written archive.
    """

    def _write(name: str, data: bytes, algorithm: Algorithm) -> Path:
        compressed = compress(data, algorithm)
        assert compressed is not None
        path = tmp_path / name
        path.write_bytes(compressed)
        return path

    return _write
