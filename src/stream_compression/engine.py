"""
Chunked stream-transform engine.

This module drives an algorithm transform over a complete source buffer and
collects what it produces, using one fixed-size scratch buffer in between.


ONE RUN, START TO FINISH
------------------------
A run is one call to StreamEngine.run() (or process()). It owns:

  - the transform for (algorithm, operation),
  - a SourceView over the caller's bytes (borrowed, never copied whole),
  - a ScratchBuffer of config.scratch_size bytes,
  - the output accumulator.

Nothing outlives the call. All three resources are released on every exit
path: success, a failed step, an exception from the transform, or a failure
while the run was still being set up.


THE DRIVE LOOP
--------------
::

    status = step(source, scratch, finalize)
        |
        +-- CONTINUE  -> scratch full?  yes: flush it, reset cursor
        |                               no:  just step again
        |
        +-- FINISHED  -> flush whatever scratch holds (may be nothing), done
        |
        +-- FAILED    -> drop the accumulator, raise TransformStepError

The source is handed over whole on every step. The transform advances the
view itself, so the engine never slices it.

Only a full scratch buffer is flushed while the run is in progress. A step
that produced a few bytes (or none) leaves them in place for the next step
to add to.


FINALIZE
--------
finalize is True for ENCODE and False for DECODE. The whole source is
present up front in both directions, but only the encoder needs to be told:
it must flush its last block. Decoders stop on the end-of-stream marker
carried by the data.


ERRORS
------
run() raises a CompressionError subclass:

  EmptyInputError       source has zero length (no transform is created)
  TransformInitError    the transform could not be built
  TransformStepError    a step reported FAILED; partial output is discarded

process() returns None for all three. Neither logs nor retries.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field

from .buffers import ScratchBuffer, SourceView
from .config import EngineConfig
from .exceptions import CompressionError, EmptyInputError, TransformStepError
from .transforms import TRANSFORMS, Transform, TransformFactory, create_transform
from .types import Algorithm, Operation, Status


@dataclass(slots=True)
class StreamSession:
    """Mutable state of one run. Owned by a single engine call."""

    transform: Transform
    """The active algorithm transform."""

    source: SourceView
    """Cursor over the unconsumed source bytes."""

    scratch: ScratchBuffer
    """Fixed-capacity intermediate buffer, reused for the whole run."""

    output: bytearray = field(default_factory=bytearray)
    """Accumulated output, in emission order."""

    steps: int = 0
    """Number of drive steps taken so far."""

    def step(self, *, finalize: bool) -> Status:
        """Run one drive step of the transform."""
        self.steps += 1
        return self.transform.step(self.source, self.scratch, finalize=finalize)

    def flush(self) -> None:
        """Move the scratch buffer's written region into the accumulator."""
        self.output += self.scratch.drain()

    @property
    def produced(self) -> int:
        """Total output so far, including bytes still in the scratch buffer."""
        return len(self.output) + self.scratch.cursor

    def result(self) -> bytes:
        """Hand the accumulated output over to the caller."""
        result = bytes(self.output)
        self.output.clear()
        return result


@contextmanager
def open_session(
    source: bytes | bytearray | memoryview,
    algorithm: Algorithm,
    operation: Operation,
    *,
    config: EngineConfig,
    registry: Mapping[Algorithm, TransformFactory] = TRANSFORMS,
) -> Iterator[StreamSession]:
    """
    Acquire the resources of one run and release them on exit.

    Each resource is registered for release as soon as it exists, so a
    failure halfway through set-up still frees what was already acquired.

    Raises:
        TransformInitError: If the transform cannot be built.
    """
    with ExitStack() as stack:
        transform = create_transform(
            algorithm,
            operation,
            registry=registry,
            input_chunk_size=config.input_chunk_size,
        )
        stack.callback(transform.release)

        view = SourceView(source)
        stack.callback(view.release)

        scratch = ScratchBuffer(config.scratch_size)
        stack.callback(scratch.release)

        yield StreamSession(transform=transform, source=view, scratch=scratch)


class StreamEngine:
    """
    Drives algorithm transforms through a bounded scratch buffer.

    An engine holds only immutable settings. Every call builds its own
    session, so one engine can serve any number of threads at once.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        registry: Mapping[Algorithm, TransformFactory] | None = None,
    ) -> None:
        self.config = config if config is not None else EngineConfig()
        self.registry = registry if registry is not None else TRANSFORMS

    def run(
        self,
        source: bytes | bytearray | memoryview,
        algorithm: Algorithm,
        operation: Operation,
    ) -> bytes:
        """
        Transform `source` completely.

        Args:
            source: Input bytes. Borrowed for the duration of the call.
            algorithm: Algorithm backing the transform.
            operation: ENCODE to compress, DECODE to decompress.

        Returns:
            The complete transformed bytes.

        Raises:
            EmptyInputError: If `source` is empty.
            TransformInitError: If the transform cannot be built.
            TransformStepError: If a drive step fails.
        """
        # Step 1: Nothing to do for an empty source.
        #
        # Checked before anything is acquired: no transform, no buffer.
        if _nbytes(source) == 0:
            raise EmptyInputError(operation)

        finalize = operation.finalize

        # Step 2: Acquire the session and drive it to completion.
        with open_session(
            source,
            algorithm,
            operation,
            config=self.config,
            registry=self.registry,
        ) as session:
            while True:
                status = session.step(finalize=finalize)

                if status is Status.CONTINUE:
                    # Flush only a full buffer; partial output stays for the next step.
                    if session.scratch.is_full:
                        session.flush()
                    continue

                if status is Status.FINISHED:
                    session.flush()
                    return session.result()

                # FAILED: whatever was accumulated is dropped with the session.
                raise TransformStepError(
                    algorithm,
                    operation,
                    detail=session.transform.failure,
                    consumed=session.source.consumed,
                    produced=session.produced,
                )

    def process(
        self,
        source: bytes | bytearray | memoryview,
        algorithm: Algorithm,
        operation: Operation,
    ) -> bytes | None:
        """
        Transform `source` completely, or return None.

        None covers an empty source, a transform that cannot be built, and
        a failed step. Partial output is never returned.
        """
        try:
            return self.run(source, algorithm, operation)
        except CompressionError:
            return None


def _nbytes(source: bytes | bytearray | memoryview) -> int:
    with memoryview(source) as view:
        return view.nbytes


_default_engine: StreamEngine | None = None


def default_engine() -> StreamEngine:
    """
    Return the shared engine configured from the environment.

    Built on first use. See EngineConfig.from_env for the variables read.
    """
    global _default_engine
    if _default_engine is None:
        _default_engine = StreamEngine(EngineConfig.from_env())
    return _default_engine


def process(
    source: bytes | bytearray | memoryview,
    algorithm: Algorithm,
    operation: Operation,
) -> bytes | None:
    """Transform `source` with the default engine. Returns None on any failure."""
    return default_engine().process(source, algorithm, operation)
