"""Shared pytest markers."""

import sys

import pytest

posix_only = pytest.mark.skipif(
    sys.platform.startswith("win"), reason="needs a POSIX shell"
)
