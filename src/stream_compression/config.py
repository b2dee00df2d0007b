"""
Engine configuration.

Settings come from keyword arguments or, for the default engine, from the
process environment. Values are validated once, when the configuration
is built, so a bad setting fails loudly at startup rather than mid-run.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import Field

from .constants import (
    DEFAULT_INPUT_CHUNK_SIZE,
    DEFAULT_SCRATCH_SIZE,
    INPUT_CHUNK_SIZE_ENV,
    SCRATCH_SIZE_ENV,
)
from .types import StrictBaseModel


class EngineConfig(StrictBaseModel):
    """Runtime configuration for a StreamEngine."""

    scratch_size: int = Field(default=DEFAULT_SCRATCH_SIZE, gt=0)
    """Capacity of the per-run scratch buffer in bytes. Constant for a run."""

    input_chunk_size: int = Field(default=DEFAULT_INPUT_CHUNK_SIZE, gt=0)
    """Maximum number of source bytes handed to a codec in one call."""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        """
        Build a configuration from environment variables.

        Unset variables fall back to the defaults.

        Args:
            environ: Variables to read. Defaults to os.environ.

        Raises:
            ValueError: If a variable is set but is not an integer.
            pydantic.ValidationError: If a value is not strictly positive.
        """
        env = os.environ if environ is None else environ
        return cls(
            scratch_size=_int_from_env(env, SCRATCH_SIZE_ENV, DEFAULT_SCRATCH_SIZE),
            input_chunk_size=_int_from_env(env, INPUT_CHUNK_SIZE_ENV, DEFAULT_INPUT_CHUNK_SIZE),
        )


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(
            f"Invalid {name} environment variable: {raw!r}. Expected an integer."
        ) from None
