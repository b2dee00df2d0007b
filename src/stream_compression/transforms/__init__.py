"""
Algorithm transforms and the registry that maps algorithms to them.

The registry is a plain lookup table from Algorithm to transform factory.
Engines take it as a parameter, so any object honouring the Transform
protocol can be plugged in for testing or for a different codec backend.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from ..constants import DEFAULT_INPUT_CHUNK_SIZE
from ..exceptions import TransformInitError
from ..types import Algorithm, Operation
from .base import (
    DecoderTransform,
    EncoderTransform,
    Transform,
    TransformFactory,
)
from .codecs import lz4_transform, lzfse_transform, lzma_transform, zlib_transform

TRANSFORMS: Mapping[Algorithm, TransformFactory] = MappingProxyType(
    {
        Algorithm.FAST: lz4_transform,
        Algorithm.BALANCED: zlib_transform,
        Algorithm.HIGH_RATIO: lzma_transform,
        Algorithm.HIGH_PERFORMANCE: lzfse_transform,
    }
)
"""Default transform factory for every algorithm."""


def create_transform(
    algorithm: Algorithm,
    operation: Operation,
    *,
    registry: Mapping[Algorithm, TransformFactory] = TRANSFORMS,
    input_chunk_size: int = DEFAULT_INPUT_CHUNK_SIZE,
) -> Transform:
    """
    Instantiate the transform bound to (algorithm, operation).

    Raises:
        TransformInitError: If no factory is registered for the algorithm or
            the factory cannot set up its codec.
    """
    factory = registry.get(algorithm)
    if factory is None:
        raise TransformInitError(algorithm, operation, "no transform registered")
    try:
        return factory(operation, input_chunk_size=input_chunk_size)
    except Exception as exc:
        raise TransformInitError(algorithm, operation, str(exc) or type(exc).__name__) from exc


__all__ = [
    "TRANSFORMS",
    "DecoderTransform",
    "EncoderTransform",
    "Transform",
    "TransformFactory",
    "create_transform",
]
