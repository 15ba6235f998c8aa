"""Emulate the shell ``source`` operation across POSIX, batch and PowerShell."""

from .dialects import Dialect, Invocation, build_invocation, capture, stream_environment
from .engine import EnvironmentSourcer, SourceRequest, source_script
from .parser import decode_lines, iter_entries, parse_environment

__all__ = [
    "Dialect",
    "Invocation",
    "build_invocation",
    "capture",
    "stream_environment",
    "EnvironmentSourcer",
    "SourceRequest",
    "source_script",
    "decode_lines",
    "iter_entries",
    "parse_environment",
]
