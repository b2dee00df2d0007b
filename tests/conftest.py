"""Pytest configuration and shared fixtures."""

import logging

from hypothesis import settings

# Compression of multi-kilobyte examples can exceed hypothesis' default deadline.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")

logging.getLogger("stream_compression").setLevel(logging.DEBUG)
