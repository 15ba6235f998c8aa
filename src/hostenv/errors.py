"""Exceptions raised by hostenv."""

from __future__ import annotations

from typing import Optional, Sequence


class HostEnvError(Exception):
    """Base class for all hostenv errors."""


class NotFoundError(HostEnvError, LookupError):
    """Raised when no candidate executable can be located."""

    def __init__(self, candidates: Sequence[str], reason: Optional[str] = None):
        self.candidates = list(candidates)
        self.reason = reason
        super().__init__(self._format_error_message())

    def _format_error_message(self) -> str:
        names = ", ".join(self.candidates) or "<none>"
        message = f"executable not found (tried: {names})"
        if self.reason:
            message += f": {self.reason}"
        return message


class ScriptExecutionError(HostEnvError, RuntimeError):
    """Raised when a sourced script or queued command fails.

    Attributes:
        target: Script path or command string that failed
        dialect: Dialect name for sourced scripts, None for plain commands
        returncode: Exit status if the process ran, None if it never started
        stderr: Captured standard error, if it was captured
    """

    def __init__(
        self,
        target: str,
        detail: str,
        *,
        dialect: Optional[str] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ):
        self.target = target
        self.detail = detail
        self.dialect = dialect
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(self._format_error_message())

    def _format_error_message(self) -> str:
        kind = f"{self.dialect} script" if self.dialect else "command"
        lines = [f"Failed to execute {kind} {self.target!r}: {self.detail}"]
        if self.stderr and self.stderr.strip():
            lines.append(self.stderr.strip())
        return "\n".join(lines)
