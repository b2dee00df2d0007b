"""Test helpers for stream_compression unit tests."""

from __future__ import annotations

from .builders import TEST_TEXT, make_mixed, make_random_bytes, make_text
from .mocks import ScriptedFactory, ScriptedTransform, ScriptStep, scripted_registry

__all__ = [
    "TEST_TEXT",
    "ScriptStep",
    "ScriptedFactory",
    "ScriptedTransform",
    "make_mixed",
    "make_random_bytes",
    "make_text",
    "scripted_registry",
]
