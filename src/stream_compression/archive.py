"""
Archive resolver: load a compressed file and decode it.

The algorithm comes from the caller when given, otherwise from the file's
extension::

    .lz4   -> FAST
    .zlib  -> BALANCED
    .lzma  -> HIGH_RATIO
    .lzfse -> HIGH_PERFORMANCE

Matching is case-insensitive. An explicit algorithm is used verbatim, even
when it disagrees with the extension; a wrong choice then fails inside the
decode, not here. The whole file is read into memory before decoding.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .engine import StreamEngine, default_engine
from .exceptions import ArchiveReadError, CompressionError, UnsupportedExtensionError
from .types import Algorithm, Operation, StrPath

logger = logging.getLogger(__name__)


def resolve_algorithm(path: StrPath, algorithm: Algorithm | None = None) -> Algorithm:
    """
    Pick the algorithm to decode `path` with.

    Raises:
        UnsupportedExtensionError: If no algorithm is given and the extension
            is not one of lz4, zlib, lzma, lzfse.
    """
    if algorithm is not None:
        return algorithm

    extension = Path(path).suffix.removeprefix(".")
    inferred = Algorithm.from_extension(extension)
    if inferred is None:
        raise UnsupportedExtensionError(path, extension)
    return inferred


def read_archive(
    path: StrPath,
    algorithm: Algorithm | None = None,
    *,
    engine: StreamEngine | None = None,
) -> bytes:
    """
    Read and decode an archive file.

    The file is not opened when the algorithm cannot be resolved.

    Raises:
        UnsupportedExtensionError: If the algorithm cannot be inferred.
        ArchiveReadError: If the file cannot be read.
        EmptyInputError: If the file is empty.
        TransformInitError: If the decoder cannot be built.
        TransformStepError: If the contents do not decode under the algorithm.
    """
    resolved = resolve_algorithm(path, algorithm)

    try:
        contents = Path(path).read_bytes()
    except OSError as exc:
        raise ArchiveReadError(path, exc.strerror or str(exc)) from exc

    engine = engine if engine is not None else default_engine()
    return engine.run(contents, resolved, Operation.DECODE)


def load_archive(
    path: StrPath,
    algorithm: Algorithm | None = None,
    *,
    engine: StreamEngine | None = None,
) -> bytes | None:
    """
    Read and decode an archive file, or return None.

    Example::

        data = load_archive("TestData.lzfse")
        data = load_archive("payload.bin", Algorithm.FAST)

    Returns:
        The decoded contents. None if the extension is unsupported, the file
        cannot be read or is empty, or its contents do not decode.
    """
    try:
        return read_archive(path, algorithm, engine=engine)
    except CompressionError as exc:
        logger.debug("Archive %s returned no result: %s", path, exc)
        return None
