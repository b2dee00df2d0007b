"""
Core value types shared by the engine, the transforms and the public API.

Three small closed enumerations describe one stream run:

- Algorithm: which codec backs the transform.
- Operation: which direction the codec runs in.
- Status: what a single drive step reported back to the engine.

StrictBaseModel is the immutable pydantic base used by configuration objects.
"""

from __future__ import annotations

from enum import Enum
from os import PathLike

from pydantic import BaseModel, ConfigDict

StrPath = str | PathLike[str]
"""Anything accepted as a filesystem path by the archive helpers."""


class StrictBaseModel(BaseModel):
    """
    A strict, immutable pydantic base model.

    Unknown fields are rejected and values are never coerced, so a
    configuration object always holds exactly what the caller passed.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        strict=True,
        validate_default=True,
    )


class Algorithm(Enum):
    """
    Compression algorithms supported by the engine.

    Each member's value is the archive extension it is stored under, which
    lets the archive resolver map a file name straight to an algorithm.
    """

    FAST = "lz4"
    """Fast compression with a modest ratio (LZ4 frame)."""

    BALANCED = "zlib"
    """Balanced between speed and ratio (zlib stream)."""

    HIGH_RATIO = "lzma"
    """Best ratio, slowest to encode (LZMA in an .xz container)."""

    HIGH_PERFORMANCE = "lzfse"
    """
    Better ratio than BALANCED while staying close to FAST in speed.

    LZFSE: Lempel-Ziv matching with Finite State Entropy coding.
    """

    @property
    def extension(self) -> str:
        """Archive extension used for this algorithm, without the leading dot."""
        return self.value

    @classmethod
    def from_extension(cls, extension: str) -> Algorithm | None:
        """
        Look up an algorithm by archive extension.

        The lookup is case-insensitive and tolerates a leading dot, so
        "LZ4", ".lz4" and "lz4" all resolve to FAST.

        Returns:
            The matching algorithm, or None for an unsupported extension.
        """
        normalized = extension.lower().removeprefix(".")
        for algorithm in cls:
            if algorithm.value == normalized:
                return algorithm
        return None


class Operation(Enum):
    """Direction of a stream run."""

    ENCODE = "encode"
    """Compress the source."""

    DECODE = "decode"
    """Decompress the source."""

    @property
    def finalize(self) -> bool:
        """
        Whether the engine signals end-of-input to the transform.

        The whole source is present up front for both directions, but only
        the encoder needs to be told so: it has to flush its final block.
        Decoders stop on the end-of-stream marker inside the data itself.
        """
        return self is Operation.ENCODE


class Status(Enum):
    """Progress reported by one drive step of a transform."""

    CONTINUE = "continue"
    """More work remains; call step again."""

    FINISHED = "finished"
    """The transform reached the end of its output."""

    FAILED = "failed"
    """The transform hit an unrecoverable error."""
