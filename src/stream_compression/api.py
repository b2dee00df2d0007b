"""
Convenience entry points over the stream engine.

Both functions return None when there is nothing to return: an empty input,
a transform that cannot be built, or data that does not decode under the
given algorithm. Failures are logged at DEBUG level; empty input is not.
"""

from __future__ import annotations

import logging

from .engine import StreamEngine, default_engine
from .exceptions import CompressionError, EmptyInputError
from .types import Algorithm, Operation

logger = logging.getLogger(__name__)


def compress(
    data: bytes | bytearray | memoryview,
    algorithm: Algorithm,
    *,
    engine: StreamEngine | None = None,
) -> bytes | None:
    """
    Compress `data` with the given algorithm.

    Example::

        compressed = compress(b"Hello World", Algorithm.HIGH_PERFORMANCE)

    Returns:
        The compressed bytes, or None if `data` is empty or compression fails.
    """
    return _transform(data, algorithm, Operation.ENCODE, engine)


def decompress(
    data: bytes | bytearray | memoryview,
    algorithm: Algorithm,
    *,
    engine: StreamEngine | None = None,
) -> bytes | None:
    """
    Decompress `data` that was compressed with the given algorithm.

    Returns:
        The original bytes, or None if `data` is empty, is not valid for
        `algorithm`, or is truncated.
    """
    return _transform(data, algorithm, Operation.DECODE, engine)


def _transform(
    data: bytes | bytearray | memoryview,
    algorithm: Algorithm,
    operation: Operation,
    engine: StreamEngine | None,
) -> bytes | None:
    engine = engine if engine is not None else default_engine()
    try:
        return engine.run(data, algorithm, operation)
    except EmptyInputError:
        return None
    except CompressionError as exc:
        logger.debug("%s with %s returned no result: %s", operation.value, algorithm.name, exc)
        return None
