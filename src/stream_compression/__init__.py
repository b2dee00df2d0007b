"""
Streaming compression over interchangeable algorithms.

Four algorithms share one interface:

    FAST              speed first (LZ4)
    BALANCED          speed and ratio (zlib)
    HIGH_RATIO        ratio first (LZMA)
    HIGH_PERFORMANCE  good ratio at near-FAST speed (FSE entropy coding)

Usage::

    from stream_compression import Algorithm, compress, decompress, load_archive

    compressed = compress(data, Algorithm.HIGH_PERFORMANCE)
    original = decompress(compressed, Algorithm.HIGH_PERFORMANCE)

    # Algorithm inferred from the extension.
    contents = load_archive("TestData.lzfse")

Every entry point returns None instead of raising when there is no result.
StreamEngine.run and read_archive raise the classified errors instead.
"""

from __future__ import annotations

from .api import compress, decompress
from .archive import load_archive, read_archive, resolve_algorithm
from .config import EngineConfig
from .engine import StreamEngine, StreamSession, default_engine, open_session, process
from .exceptions import (
    ArchiveError,
    ArchiveReadError,
    CompressionError,
    EmptyInputError,
    TransformError,
    TransformInitError,
    TransformStepError,
    UnsupportedExtensionError,
)
from .transforms import TRANSFORMS, Transform, TransformFactory, create_transform
from .types import Algorithm, Operation, Status

__all__ = [
    # Core API
    "compress",
    "decompress",
    "load_archive",
    # Engine
    "StreamEngine",
    "StreamSession",
    "EngineConfig",
    "default_engine",
    "open_session",
    "process",
    # Archive resolver
    "read_archive",
    "resolve_algorithm",
    # Transforms
    "TRANSFORMS",
    "Transform",
    "TransformFactory",
    "create_transform",
    # Types
    "Algorithm",
    "Operation",
    "Status",
    # Exceptions
    "CompressionError",
    "EmptyInputError",
    "TransformError",
    "TransformInitError",
    "TransformStepError",
    "ArchiveError",
    "ArchiveReadError",
    "UnsupportedExtensionError",
]
