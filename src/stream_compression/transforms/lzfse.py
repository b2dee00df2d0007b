"""
LZFSE streams over the one-shot liblzfse binding.

liblzfse converts whole buffers only. To run it under the step-driven
engine, both sides buffer:

  LzfseEncoder
      Collects the input and compresses all of it in one call on flush().

  LzfseDecoder
      Collects input while walking the block headers. Once the
      end-of-stream block has arrived, the stream is decoded in one call
      and handed out in max_length slices.

Walking the headers gives the decoder what the incremental codecs know for
free: where the stream ends, whether bytes follow it, and whether it was
cut short. The raw sizes announced by the headers double as a length check
on the decoded output.
"""

from __future__ import annotations

from typing import NamedTuple

import liblzfse

from ..constants import (
    LZFSE_END_OF_STREAM_MAGIC,
    LZFSE_LZVN_MAGIC,
    LZFSE_UNCOMPRESSED_MAGIC,
    LZFSE_V1_HEADER_SIZE,
    LZFSE_V1_MAGIC,
    LZFSE_V2_FIXED_HEADER_SIZE,
    LZFSE_V2_MAGIC,
)


class LzfseFormatError(Exception):
    """Raised when an LZFSE stream is malformed or does not decode."""


class BlockHeader(NamedTuple):
    """Sizes read from one block header."""

    size: int
    """Length of the whole block in the stream, header included."""

    raw_size: int
    """Number of bytes the block decodes to."""

    last: bool
    """True for the end-of-stream block."""


def _u32(data: bytes | bytearray, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 4], "little")


def _u64(data: bytes | bytearray, offset: int) -> int:
    return int.from_bytes(data[offset : offset + 8], "little")


def _field(word: int, start: int, width: int) -> int:
    return (word >> start) & ((1 << width) - 1)


def read_block_header(data: bytes | bytearray, offset: int) -> BlockHeader | None:
    """
    Read the header of the block starting at `offset`.

    Args:
        data: Stream bytes received so far.
        offset: Position of the block's magic.

    Returns:
        The block's sizes, or None while the header is still incomplete.

    Raises:
        LzfseFormatError: If the block magic is unknown or the header is invalid.
    """
    available = len(data) - offset
    if available < 4:
        return None
    magic = bytes(data[offset : offset + 4])

    if magic == LZFSE_END_OF_STREAM_MAGIC:
        return BlockHeader(size=4, raw_size=0, last=True)

    if magic == LZFSE_UNCOMPRESSED_MAGIC:
        if available < 8:
            return None
        raw_size = _u32(data, offset + 4)
        return BlockHeader(size=8 + raw_size, raw_size=raw_size, last=False)

    if magic == LZFSE_LZVN_MAGIC:
        if available < 12:
            return None
        payload = _u32(data, offset + 8)
        return BlockHeader(size=12 + payload, raw_size=_u32(data, offset + 4), last=False)

    if magic == LZFSE_V1_MAGIC:
        if available < 28:
            return None
        # Literal payload bytes at 20, LMD payload bytes at 24.
        payload = _u32(data, offset + 20) + _u32(data, offset + 24)
        return BlockHeader(
            size=LZFSE_V1_HEADER_SIZE + payload,
            raw_size=_u32(data, offset + 4),
            last=False,
        )

    if magic == LZFSE_V2_MAGIC:
        if available < LZFSE_V2_FIXED_HEADER_SIZE:
            return None
        # Three packed words follow the raw size:
        #
        #   word 0: n_literals:20 | n_literal_payload_bytes:20 | n_matches:20 | ...
        #   word 1: literal_state:4x10 | n_lmd_payload_bytes:20 | ...
        #   word 2: header_size:32 | l_state:10 | m_state:10 | d_state:10
        literal_payload = _field(_u64(data, offset + 8), 20, 20)
        lmd_payload = _field(_u64(data, offset + 16), 40, 20)
        header_size = _field(_u64(data, offset + 24), 0, 32)
        if header_size < LZFSE_V2_FIXED_HEADER_SIZE:
            raise LzfseFormatError(f"Invalid LZFSE v2 header size {header_size} at {offset}")
        return BlockHeader(
            size=header_size + literal_payload + lmd_payload,
            raw_size=_u32(data, offset + 4),
            last=False,
        )

    raise LzfseFormatError(f"Unknown LZFSE block magic {magic!r} at offset {offset}")


class LzfseEncoder:
    """Compressor object that holds all input until flush()."""

    def __init__(self) -> None:
        self._input = bytearray()

    def compress(self, data: bytes, /) -> bytes:
        self._input += data
        return b""

    def flush(self) -> bytes:
        data = bytes(self._input)
        self._input.clear()
        return liblzfse.compress(data)


class LzfseDecoder:
    """Decompressor object that decodes once the end-of-stream block arrives."""

    def __init__(self) -> None:
        self._input = bytearray()
        # Start of the first block whose end has not arrived yet.
        self._scanned = 0
        # Decoded size announced by the complete blocks so far.
        self._expected = 0
        self._ended = False
        self._output = b""
        self._delivered = 0
        self.unused_data = b""

    @property
    def eof(self) -> bool:
        return self._ended and self._delivered == len(self._output)

    @property
    def needs_input(self) -> bool:
        return not self._ended

    def decompress(self, data: bytes, max_length: int, /) -> bytes:
        if not self._ended:
            self._input += data
            self._scan()
            if not self._ended:
                return b""

        start = self._delivered
        self._delivered = min(start + max_length, len(self._output))
        return self._output[start : self._delivered]

    def _scan(self) -> None:
        # Step 1: Skip over every block that has fully arrived.
        while True:
            header = read_block_header(self._input, self._scanned)
            if header is None or self._scanned + header.size > len(self._input):
                return
            self._scanned += header.size
            self._expected += header.raw_size
            if header.last:
                break

        # Step 2: Split off whatever follows the end-of-stream block.
        stream = bytes(self._input[: self._scanned])
        self.unused_data = bytes(self._input[self._scanned :])
        self._input.clear()

        # Step 3: Decode the whole stream in one call.
        #
        # An empty stream is only the end-of-stream block.
        if self._expected:
            try:
                output = liblzfse.decompress(stream)
            except Exception as exc:
                raise LzfseFormatError(f"LZFSE stream does not decode: {exc}") from exc
            if len(output) != self._expected:
                raise LzfseFormatError(
                    f"LZFSE stream decoded to {len(output)} bytes, "
                    f"headers announce {self._expected}"
                )
            self._output = output
        self._ended = True
