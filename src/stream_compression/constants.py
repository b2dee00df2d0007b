"""
Constants for the stream engine and its codec transforms.
"""

from __future__ import annotations

from typing import Final

# ===========================================================================
# Engine Buffer Sizes
# ===========================================================================
#
# The engine never holds more than one scratch buffer of output per run.
# Encoders additionally read the source in bounded chunks so that the
# output queued inside a transform stays proportional to the chunk size.

DEFAULT_SCRATCH_SIZE: Final = 4096
"""Capacity of the scratch buffer between a transform and the output accumulator."""

DEFAULT_INPUT_CHUNK_SIZE: Final = 64 * 1024
"""Maximum number of source bytes a transform reads per codec call (64 KiB)."""

# ===========================================================================
# Environment Variables
# ===========================================================================

SCRATCH_SIZE_ENV: Final = "STREAM_COMPRESSION_SCRATCH_SIZE"
"""Overrides DEFAULT_SCRATCH_SIZE for engines built from the environment."""

INPUT_CHUNK_SIZE_ENV: Final = "STREAM_COMPRESSION_INPUT_CHUNK_SIZE"
"""Overrides DEFAULT_INPUT_CHUNK_SIZE for engines built from the environment."""

# ===========================================================================
# Codec Tuning
# ===========================================================================
#
# Every container starts with its own magic number, so a decoder handed
# another algorithm's output fails on the first header bytes. The LZ4, zlib
# and xz containers also end with a checksum.

LZ4_COMPRESSION_LEVEL: Final = 0
"""LZ4 frame level. 0 selects the fast (non-HC) compressor."""

ZLIB_COMPRESSION_LEVEL: Final = 6
"""zlib level. The library's own default trade-off between speed and ratio."""

ZLIB_WBITS: Final = 15
"""Window bits for a zlib-wrapped (RFC 1950) stream with Adler-32 trailer."""

LZMA_PRESET: Final = 6
"""xz preset. Same as the xz command line default."""

# ===========================================================================
# LZFSE Block Framing
# ===========================================================================
#
# An LZFSE stream is a sequence of blocks, each starting with a 4-byte magic,
# terminated by an end-of-stream block. All header integers are little-endian.
#
#   bvx-   uncompressed   magic | n_raw_bytes | raw bytes
#   bvxn   LZVN           magic | n_raw_bytes | n_payload_bytes | payload
#   bvx1   LZFSE v1       fixed-size header, payload sizes at offsets 20, 24
#   bvx2   LZFSE v2       packed header, header size in the third packed word
#   bvx$   end of stream  magic only

LZFSE_UNCOMPRESSED_MAGIC: Final = b"bvx-"
"""Block holding raw bytes."""

LZFSE_LZVN_MAGIC: Final = b"bvxn"
"""Block compressed with LZVN (used for small inputs)."""

LZFSE_V1_MAGIC: Final = b"bvx1"
"""LZFSE block with the uncompressed v1 header."""

LZFSE_V2_MAGIC: Final = b"bvx2"
"""LZFSE block with the packed v2 header. The reference encoder writes these."""

LZFSE_END_OF_STREAM_MAGIC: Final = b"bvx$"
"""End-of-stream marker. Nothing may follow it."""

LZFSE_V1_HEADER_SIZE: Final = 772
"""Size of the v1 header, frequency tables included."""

LZFSE_V2_FIXED_HEADER_SIZE: Final = 32
"""Magic, raw size and three packed 64-bit words. Frequency tables follow."""
