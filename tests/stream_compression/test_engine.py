"""Tests for the stream engine drive loop."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from stream_compression import (
    Algorithm,
    EmptyInputError,
    EngineConfig,
    Operation,
    Status,
    StreamEngine,
    TransformInitError,
    TransformStepError,
    open_session,
)
from tests.stream_compression.helpers import (
    ScriptedFactory,
    ScriptStep,
    make_mixed,
    make_random_bytes,
    make_text,
    scripted_registry,
)

CONTINUE = Status.CONTINUE
FINISHED = Status.FINISHED
FAILED = Status.FAILED


def scripted_engine(factory: ScriptedFactory, scratch_size: int = 4) -> StreamEngine:
    """Engine routing every algorithm to `factory`."""
    return StreamEngine(EngineConfig(scratch_size=scratch_size), scripted_registry(factory))


class TestDriveLoop:
    """Tests for step sequencing and flushing."""

    def test_single_step(self) -> None:
        """A transform may finish on its first step."""
        factory = ScriptedFactory([ScriptStep(b"done", FINISHED)])
        engine = scripted_engine(factory)
        assert engine.run(b"x", Algorithm.FAST, Operation.ENCODE) == b"done"

    def test_accumulates_in_emission_order(self) -> None:
        """Output from many steps is concatenated in order."""
        factory = ScriptedFactory(
            [
                ScriptStep(b"ab", CONTINUE),
                ScriptStep(b"", CONTINUE),
                ScriptStep(b"cd", CONTINUE),
                ScriptStep(b"e", FINISHED),
            ]
        )
        engine = scripted_engine(factory, scratch_size=4)
        assert engine.run(b"input", Algorithm.FAST, Operation.ENCODE) == b"abcde"

    def test_flushes_only_when_full(self) -> None:
        """Partial output stays in the scratch buffer between steps."""
        factory = ScriptedFactory(
            [
                ScriptStep(b"a", CONTINUE),
                ScriptStep(b"b", CONTINUE),
                ScriptStep(b"cd", CONTINUE),
                ScriptStep(b"", CONTINUE),
                ScriptStep(b"", FINISHED),
            ]
        )
        engine = scripted_engine(factory, scratch_size=4)
        assert engine.run(b"input", Algorithm.FAST, Operation.ENCODE) == b"abcd"
        # Cursor grows 0 -> 1 -> 2, then resets after the buffer filled.
        assert factory.last.cursors_seen == [0, 1, 2, 0, 0]

    def test_zero_output_steps_tolerated(self) -> None:
        """Steps that write nothing and continue are legal."""
        script = [ScriptStep(b"", CONTINUE)] * 50 + [ScriptStep(b"z", FINISHED)]
        factory = ScriptedFactory(script)
        engine = scripted_engine(factory)
        assert engine.run(b"input", Algorithm.FAST, Operation.ENCODE) == b"z"

    def test_finished_with_empty_buffer(self) -> None:
        """FINISHED right after a flush adds nothing."""
        factory = ScriptedFactory([ScriptStep(b"abcd", CONTINUE), ScriptStep(b"", FINISHED)])
        engine = scripted_engine(factory, scratch_size=4)
        assert engine.run(b"input", Algorithm.FAST, Operation.ENCODE) == b"abcd"

    def test_whole_source_handed_over(self) -> None:
        """The engine never slices the source; the transform advances it."""
        factory = ScriptedFactory(
            [
                ScriptStep(b"", CONTINUE, consume=3),
                ScriptStep(b"", CONTINUE),
                ScriptStep(b"", CONTINUE, consume=10),
                ScriptStep(b"", FINISHED),
            ]
        )
        engine = scripted_engine(factory)
        engine.run(b"0123456789", Algorithm.FAST, Operation.ENCODE)
        assert factory.last.remaining_seen == [10, 7, 7, 0]

    @pytest.mark.parametrize(
        ("operation", "expected"),
        [(Operation.ENCODE, True), (Operation.DECODE, False)],
    )
    def test_finalize_flag(self, operation: Operation, expected: bool) -> None:
        """ENCODE finalizes on every step; DECODE never does."""
        factory = ScriptedFactory([ScriptStep(b"", CONTINUE)] * 3 + [ScriptStep(b"", FINISHED)])
        engine = scripted_engine(factory)
        engine.run(b"input", Algorithm.BALANCED, operation)
        assert factory.operations == [operation]
        assert factory.last.finalize_flags == [expected] * 4

    def test_step_count(self) -> None:
        """Every drive step is counted on the session."""
        factory = ScriptedFactory([ScriptStep(b"", CONTINUE)] * 2 + [ScriptStep(b"", FINISHED)])
        with open_session(
            b"input",
            Algorithm.FAST,
            Operation.ENCODE,
            config=EngineConfig(),
            registry=scripted_registry(factory),
        ) as session:
            while session.step(finalize=True) is CONTINUE:
                pass
            assert session.steps == 3


class TestFailures:
    """Tests for failure classification and cleanup."""

    def test_failed_step_discards_partial_output(self) -> None:
        """Output produced before a FAILED step is never returned."""
        factory = ScriptedFactory(
            [
                ScriptStep(b"abcd", CONTINUE, consume=2),
                ScriptStep(b"ef", CONTINUE),
                ScriptStep(b"", FAILED),
            ]
        )
        engine = scripted_engine(factory)
        with pytest.raises(TransformStepError) as info:
            engine.run(b"input", Algorithm.HIGH_RATIO, Operation.DECODE)

        error = info.value
        assert error.algorithm is Algorithm.HIGH_RATIO
        assert error.operation is Operation.DECODE
        assert error.consumed == 2
        assert error.produced == 6
        assert error.detail == "scripted failure at step 2"
        assert factory.last.release_count == 1

    def test_process_returns_none_on_failed_step(self) -> None:
        """process() reports a failed step as None."""
        factory = ScriptedFactory([ScriptStep(b"ab", CONTINUE), ScriptStep(b"", FAILED)])
        engine = scripted_engine(factory)
        assert engine.process(b"input", Algorithm.FAST, Operation.ENCODE) is None

    def test_init_error(self) -> None:
        """A factory that cannot build its transform yields TransformInitError."""
        factory = ScriptedFactory([], error=RuntimeError("out of codec contexts"))
        engine = scripted_engine(factory)
        with pytest.raises(TransformInitError, match="out of codec contexts"):
            engine.run(b"input", Algorithm.FAST, Operation.ENCODE)
        assert engine.process(b"input", Algorithm.FAST, Operation.ENCODE) is None

    @pytest.mark.parametrize("source", [b"", bytearray(), memoryview(b"")])
    @pytest.mark.parametrize("operation", list(Operation))
    def test_empty_source_never_creates_transform(
        self, source: bytes | bytearray | memoryview, operation: Operation
    ) -> None:
        """An empty source is rejected before any resource is acquired."""
        factory = ScriptedFactory([ScriptStep(b"", FINISHED)])
        engine = scripted_engine(factory)
        with pytest.raises(EmptyInputError):
            engine.run(source, Algorithm.FAST, operation)
        assert engine.process(source, Algorithm.FAST, operation) is None
        assert factory.operations == []

    def test_released_on_success(self) -> None:
        """The transform is released exactly once after a normal finish."""
        factory = ScriptedFactory([ScriptStep(b"ok", FINISHED)])
        scripted_engine(factory).run(b"input", Algorithm.FAST, Operation.ENCODE)
        assert factory.last.release_count == 1

    def test_released_when_step_raises(self) -> None:
        """An exception escaping a step still releases every resource."""
        source = bytearray(b"input")
        # The script runs out after one step, so the second step raises IndexError.
        factory = ScriptedFactory([ScriptStep(b"", CONTINUE)])
        engine = scripted_engine(factory)
        with pytest.raises(IndexError):
            engine.run(source, Algorithm.FAST, Operation.ENCODE)
        assert factory.last.release_count == 1
        # The borrowed source buffer was released too.
        source.extend(b"!")

    def test_source_released_after_run(self) -> None:
        """The caller's buffer is no longer exported once run() returns."""
        source = bytearray(make_text(1000))
        engine = StreamEngine(EngineConfig())
        assert engine.run(source, Algorithm.FAST, Operation.ENCODE)
        source.extend(b"more")


class TestRealCodecs:
    """Drive-loop behaviour with the real codec transforms."""

    @pytest.mark.parametrize("algorithm", list(Algorithm))
    def test_one_byte_scratch_buffer(self, algorithm: Algorithm) -> None:
        """A 1-byte scratch buffer still round-trips."""
        engine = StreamEngine(EngineConfig(scratch_size=1))
        data = make_mixed(2000)
        compressed = engine.run(data, algorithm, Operation.ENCODE)
        assert engine.run(compressed, algorithm, Operation.DECODE) == data

    @pytest.mark.parametrize("algorithm", list(Algorithm))
    def test_large_input_through_default_scratch(self, algorithm: Algorithm) -> None:
        """100,000 bytes pass through a 4096-byte scratch buffer."""
        engine = StreamEngine(EngineConfig())
        assert engine.config.scratch_size == 4096
        data = make_mixed(100_000)
        compressed = engine.run(data, algorithm, Operation.ENCODE)
        assert engine.run(compressed, algorithm, Operation.DECODE) == data

    @pytest.mark.parametrize("algorithm", list(Algorithm))
    def test_output_larger_than_scratch_on_finish(self, algorithm: Algorithm) -> None:
        """Decoded output many times the scratch size is collected in full."""
        engine = StreamEngine(EngineConfig(scratch_size=16))
        data = b"\x00" * 50_000
        compressed = engine.run(data, algorithm, Operation.ENCODE)
        assert len(compressed) < len(data)
        assert engine.run(compressed, algorithm, Operation.DECODE) == data

    def test_shared_engine_across_threads(self) -> None:
        """Concurrent runs on one engine do not interfere."""
        engine = StreamEngine(EngineConfig(scratch_size=256))
        payloads = [make_random_bytes(5000 + i * 100, seed=i) for i in range(16)]
        algorithms = [list(Algorithm)[i % len(Algorithm)] for i in range(16)]

        def round_trip(index: int) -> bool:
            data, algorithm = payloads[index], algorithms[index]
            compressed = engine.run(data, algorithm, Operation.ENCODE)
            return engine.run(compressed, algorithm, Operation.DECODE) == data

        with ThreadPoolExecutor(max_workers=8) as pool:
            assert all(pool.map(round_trip, range(16)))
