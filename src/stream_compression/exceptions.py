"""Exception hierarchy for stream compression."""

from __future__ import annotations

from os import fspath

from .types import Algorithm, Operation, StrPath


class CompressionError(Exception):
    """
    Base exception for all stream compression errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class EmptyInputError(CompressionError):
    """
    Raised when a run is requested on an empty source.

    Not a failure as such: there is simply nothing to transform, and no
    transform is ever created for it.

    Attributes:
        operation: The operation that was requested.
    """

    def __init__(self, operation: Operation) -> None:
        self.operation = operation
        super().__init__(f"Nothing to {operation.value}: source is empty")


class TransformError(CompressionError):
    """
    Base class for errors raised while driving an algorithm transform.

    Attributes:
        algorithm: The algorithm backing the transform.
        operation: The direction the transform was running in.
    """

    def __init__(self, algorithm: Algorithm, operation: Operation, message: str) -> None:
        self.algorithm = algorithm
        self.operation = operation
        super().__init__(message)


class TransformInitError(TransformError):
    """
    Raised when a transform cannot be instantiated.

    This is the only failure that happens before any byte is processed.

    Attributes:
        detail: Description of what went wrong.
    """

    def __init__(self, algorithm: Algorithm, operation: Operation, detail: str) -> None:
        self.detail = detail
        super().__init__(
            algorithm,
            operation,
            f"Cannot create {algorithm.name} {operation.value} transform: {detail}",
        )


class TransformStepError(TransformError):
    """
    Raised when a drive step reports failure.

    Any output produced before the failing step is discarded.

    Attributes:
        detail: Description of what went wrong (if the transform gave one).
        consumed: Source bytes consumed when the step failed.
        produced: Output bytes produced when the step failed.
    """

    def __init__(
        self,
        algorithm: Algorithm,
        operation: Operation,
        *,
        detail: str | None = None,
        consumed: int = 0,
        produced: int = 0,
    ) -> None:
        self.detail = detail
        self.consumed = consumed
        self.produced = produced

        msg = (
            f"{algorithm.name} {operation.value} failed "
            f"(consumed {consumed} bytes, produced {produced} bytes)"
        )
        if detail:
            msg = f"{msg}: {detail}"

        super().__init__(algorithm, operation, msg)


class ArchiveError(CompressionError):
    """
    Base class for archive resolver errors.

    Attributes:
        path: The archive path as a string.
    """

    def __init__(self, path: StrPath, message: str) -> None:
        self.path = fspath(path)
        super().__init__(message)


class UnsupportedExtensionError(ArchiveError):
    """
    Raised when no algorithm is registered for an archive's extension.

    Attributes:
        extension: The extension found on the path (may be empty).
    """

    def __init__(self, path: StrPath, extension: str) -> None:
        self.extension = extension
        if extension:
            msg = f"Unsupported archive extension {extension!r} for {fspath(path)}"
        else:
            msg = f"Archive {fspath(path)} has no extension to infer an algorithm from"
        super().__init__(path, msg)


class ArchiveReadError(ArchiveError):
    """
    Raised when an archive file cannot be read.

    Attributes:
        detail: Description of the underlying I/O error.
    """

    def __init__(self, path: StrPath, detail: str) -> None:
        self.detail = detail
        super().__init__(path, f"Cannot read archive {fspath(path)}: {detail}")
