"""
Algorithm transform contract and the adapters that implement it.


THE CONTRACT
------------
A transform is a stateful object bound to one algorithm and one direction.
The engine calls step() repeatedly, handing it:

  - the remaining source (a SourceView the transform advances itself),
  - the scratch buffer's writable region (a ScratchBuffer it writes into),
  - the finalize flag (no more source will ever arrive).

Each call consumes whatever source the transform wants, writes whatever
output fits, and returns CONTINUE, FINISHED or FAILED. A step that writes
nothing and still returns CONTINUE is legal: the codec may be buffering.


WHY ADAPTERS?
-------------
Python codec objects (zlib.compressobj, lzma.LZMADecompressor, ...) do not
write into a caller-owned buffer. Compressors return whatever bytes they
have ready; decompressors accept a max_length bound on their output.

The two adapters bridge that gap:

  EncoderTransform
      Queues the compressor's output and meters it into the destination.
      Input is only fed once the queue is empty, so at most one chunk's
      worth of output is ever held inside the transform.

  DecoderTransform
      Asks the decompressor for at most destination.writable bytes, so
      output never needs queueing. Input is fed only when the decompressor
      asks for it. The stream ends on the container's end-of-stream marker.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..buffers import ScratchBuffer, SourceView
from ..constants import DEFAULT_INPUT_CHUNK_SIZE
from ..types import Operation, Status


@runtime_checkable
class Transform(Protocol):
    """A stateful algorithm transform driven by the stream engine."""

    @property
    def failure(self) -> str | None:
        """Description of the error behind the last FAILED step, if any."""
        ...

    def step(self, source: SourceView, destination: ScratchBuffer, *, finalize: bool) -> Status:
        """
        Run one drive step.

        Args:
            source: Remaining input. The transform advances it as it consumes.
            destination: Writable output region. The transform writes at its cursor.
            finalize: True when no source will arrive beyond what `source` holds.

        Returns:
            CONTINUE, FINISHED or FAILED.
        """
        ...

    def release(self) -> None:
        """Free any internal codec state. Must be safe to call more than once."""
        ...


class TransformFactory(Protocol):
    """Builds a transform for one direction. Raises if the codec cannot be set up."""

    def __call__(self, operation: Operation, *, input_chunk_size: int) -> Transform: ...


class Encoder(Protocol):
    """The incremental compressor interface of zlib, lzma and lz4 objects and LzfseEncoder."""

    def compress(self, data: bytes, /) -> bytes: ...

    def flush(self) -> bytes: ...


class Decoder(Protocol):
    """The incremental decompressor interface, normalized across codecs."""

    @property
    def eof(self) -> bool:
        """True once the end-of-stream marker has been decoded."""
        ...

    @property
    def needs_input(self) -> bool:
        """False while the decoder can still produce output without new input."""
        ...

    @property
    def unused_data(self) -> bytes | None:
        """Bytes found after the end-of-stream marker."""
        ...

    def decompress(self, data: bytes, max_length: int, /) -> bytes: ...


class EncoderTransform:
    """
    Compress-side adapter over an incremental encoder.

    Subclasses only need to build the codec object; see codecs.py.
    """

    errors: tuple[type[Exception], ...] = ()
    """Codec exceptions that turn a step into FAILED instead of propagating."""

    def __init__(
        self,
        encoder: Encoder,
        *,
        header: bytes = b"",
        input_chunk_size: int = DEFAULT_INPUT_CHUNK_SIZE,
    ) -> None:
        self._encoder: Encoder | None = encoder
        self._input_chunk_size = input_chunk_size
        # Output waiting to be written to a destination, and how much of it
        # has already been delivered.
        self._pending = header
        self._pending_offset = 0
        self._flushed = False
        self._failure: str | None = None

    @property
    def failure(self) -> str | None:
        return self._failure

    def step(self, source: SourceView, destination: ScratchBuffer, *, finalize: bool) -> Status:
        if self._encoder is None:
            self._failure = "transform used after release"
            return Status.FAILED

        # Step 1: Refill the queue if everything produced so far was delivered.
        #
        # Feeding only into an empty queue bounds the memory held here.
        if self._pending_offset == len(self._pending) and not self._flushed:
            try:
                if source.remaining:
                    produced = self._encoder.compress(source.take(self._input_chunk_size))
                elif finalize:
                    produced = self._encoder.flush()
                    self._flushed = True
                else:
                    # All input seen but end of input not signalled yet.
                    produced = b""
            except self.errors as exc:
                self._failure = str(exc) or type(exc).__name__
                return Status.FAILED
            self._pending = produced
            self._pending_offset = 0

        # Step 2: Deliver as much queued output as the destination accepts.
        self._pending_offset += destination.write(self._pending[self._pending_offset :])

        # Step 3: Done once the final flush has been delivered in full.
        if self._flushed and self._pending_offset == len(self._pending):
            return Status.FINISHED
        return Status.CONTINUE

    def release(self) -> None:
        self._encoder = None
        self._pending = b""
        self._pending_offset = 0


class DecoderTransform:
    """
    Decompress-side adapter over an incremental decoder.

    The finalize flag is ignored: decoding stops on the end-of-stream marker
    carried by the data itself.
    """

    errors: tuple[type[Exception], ...] = ()
    """Codec exceptions that turn a step into FAILED instead of propagating."""

    def __init__(
        self,
        decoder: Decoder,
        *,
        input_chunk_size: int = DEFAULT_INPUT_CHUNK_SIZE,
    ) -> None:
        self._decoder: Decoder | None = decoder
        self._input_chunk_size = input_chunk_size
        self._failure: str | None = None

    @property
    def failure(self) -> str | None:
        return self._failure

    def step(
        self,
        source: SourceView,
        destination: ScratchBuffer,
        *,
        finalize: bool,  # noqa: ARG002
    ) -> Status:
        decoder = self._decoder
        if decoder is None:
            self._failure = "transform used after release"
            return Status.FAILED

        if decoder.eof:
            return self._finish(decoder, source)

        # A full destination has to be drained by the engine first.
        #
        # Asking a codec for zero bytes means "unbounded" for some of them.
        if destination.writable == 0:
            return Status.CONTINUE

        # Step 1: Feed input only when the decoder has run dry.
        #
        # Otherwise it still holds input and only wants room for output.
        chunk = b""
        if decoder.needs_input:
            if not source.remaining:
                self._failure = "compressed stream is truncated"
                return Status.FAILED
            chunk = source.take(self._input_chunk_size)

        # Step 2: Decode at most what fits in the destination.
        try:
            produced = decoder.decompress(chunk, destination.writable)
        except self.errors as exc:
            self._failure = str(exc) or type(exc).__name__
            return Status.FAILED
        destination.write(produced)

        # Step 3: The end-of-stream marker finishes the run.
        if decoder.eof:
            return self._finish(decoder, source)
        return Status.CONTINUE

    def _finish(self, decoder: Decoder, source: SourceView) -> Status:
        # lz4 reports None rather than b"" when nothing followed the frame.
        trailing = len(decoder.unused_data or b"") + source.remaining
        if trailing:
            self._failure = f"{trailing} trailing bytes after end of stream"
            return Status.FAILED
        return Status.FINISHED

    def release(self) -> None:
        self._decoder = None
