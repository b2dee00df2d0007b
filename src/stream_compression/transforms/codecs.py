"""
Codec-backed transforms, one encode/decode pair per algorithm.

  FAST              lz4.frame       LZ4 frame with content checksum
  BALANCED          zlib            RFC 1950 zlib stream (Adler-32 trailer)
  HIGH_RATIO        lzma            .xz container with CRC64
  HIGH_PERFORMANCE  liblzfse        LZFSE block stream (see lzfse.py)

The codecs are used as-is; this module only picks their container settings
and tells the adapters which exceptions mean "this data is bad".

The .lz4 and .zlib files written here are LZ4 frames and zlib streams. They
are not interchangeable with raw DEFLATE or bare LZ4 block archives, so such
archives do not load under FAST or BALANCED.
"""

from __future__ import annotations

import lzma
import zlib

import lz4.frame

from ..constants import (
    LZ4_COMPRESSION_LEVEL,
    LZMA_PRESET,
    ZLIB_COMPRESSION_LEVEL,
    ZLIB_WBITS,
)
from ..types import Operation
from .base import DecoderTransform, EncoderTransform, Transform
from .lzfse import LzfseDecoder, LzfseEncoder, LzfseFormatError


# ===========================================================================
# FAST: LZ4 frame
# ===========================================================================


class Lz4EncodeTransform(EncoderTransform):
    errors = (RuntimeError,)


class Lz4DecodeTransform(DecoderTransform):
    errors = (RuntimeError,)


def lz4_transform(operation: Operation, *, input_chunk_size: int) -> Transform:
    """Build an LZ4 frame transform."""
    if operation is Operation.ENCODE:
        compressor = lz4.frame.LZ4FrameCompressor(
            compression_level=LZ4_COMPRESSION_LEVEL,
            content_checksum=True,
        )
        # The frame header is emitted by begin(), before any data.
        header = compressor.begin()
        return Lz4EncodeTransform(compressor, header=header, input_chunk_size=input_chunk_size)
    return Lz4DecodeTransform(
        lz4.frame.LZ4FrameDecompressor(),
        input_chunk_size=input_chunk_size,
    )


# ===========================================================================
# BALANCED: zlib
# ===========================================================================


class _ZlibDecoder:
    """
    zlib.decompressobj with the needs_input attribute the other codecs have.

    zlib keeps input it could not process in unconsumed_tail and expects
    the caller to hand it back. It also may have more output ready when the
    last call was cut short by max_length.
    """

    def __init__(self) -> None:
        self._obj = zlib.decompressobj(ZLIB_WBITS)
        self._capped = False

    @property
    def eof(self) -> bool:
        return self._obj.eof

    @property
    def needs_input(self) -> bool:
        return not self._obj.unconsumed_tail and not self._capped

    @property
    def unused_data(self) -> bytes:
        return self._obj.unused_data

    def decompress(self, data: bytes, max_length: int, /) -> bytes:
        if not data:
            data = self._obj.unconsumed_tail
        produced = self._obj.decompress(data, max_length)
        self._capped = len(produced) == max_length
        return produced


class ZlibEncodeTransform(EncoderTransform):
    errors = (zlib.error,)


class ZlibDecodeTransform(DecoderTransform):
    errors = (zlib.error,)


def zlib_transform(operation: Operation, *, input_chunk_size: int) -> Transform:
    """Build a zlib stream transform."""
    if operation is Operation.ENCODE:
        compressor = zlib.compressobj(ZLIB_COMPRESSION_LEVEL, zlib.DEFLATED, ZLIB_WBITS)
        return ZlibEncodeTransform(compressor, input_chunk_size=input_chunk_size)
    return ZlibDecodeTransform(_ZlibDecoder(), input_chunk_size=input_chunk_size)


# ===========================================================================
# HIGH_RATIO: LZMA in an .xz container
# ===========================================================================


class LzmaEncodeTransform(EncoderTransform):
    errors = (lzma.LZMAError,)


class LzmaDecodeTransform(DecoderTransform):
    errors = (lzma.LZMAError,)


def lzma_transform(operation: Operation, *, input_chunk_size: int) -> Transform:
    """Build an .xz transform."""
    if operation is Operation.ENCODE:
        compressor = lzma.LZMACompressor(
            format=lzma.FORMAT_XZ,
            check=lzma.CHECK_CRC64,
            preset=LZMA_PRESET,
        )
        return LzmaEncodeTransform(compressor, input_chunk_size=input_chunk_size)
    return LzmaDecodeTransform(
        lzma.LZMADecompressor(format=lzma.FORMAT_XZ),
        input_chunk_size=input_chunk_size,
    )


# ===========================================================================
# HIGH_PERFORMANCE: LZFSE
# ===========================================================================


class LzfseEncodeTransform(EncoderTransform):
    """The whole input is held by the encoder until the finalize flush."""


class LzfseDecodeTransform(DecoderTransform):
    errors = (LzfseFormatError,)


def lzfse_transform(operation: Operation, *, input_chunk_size: int) -> Transform:
    """Build an LZFSE stream transform."""
    if operation is Operation.ENCODE:
        return LzfseEncodeTransform(LzfseEncoder(), input_chunk_size=input_chunk_size)
    return LzfseDecodeTransform(LzfseDecoder(), input_chunk_size=input_chunk_size)
