"""Host and shell detection.

Detection is best-effort: every probe that fails (missing tool, non-zero
exit, timeout) counts as "no". One strategy per host family is selected at
startup by ``select_detector``.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from typing import List, Optional, Sequence

from ..sourcing.dialects import Dialect

logger = logging.getLogger(__name__)

DEFAULT_COMPAT_SIGNATURES = ("microsoft",)
POWERSHELL_EXECUTABLES = ("powershell.exe", "pwsh.exe")
PROBE_TIMEOUT = 5


def _probe(args: List[str]) -> Optional[str]:
    """Run an introspection command, returning stdout or None on any failure."""
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=PROBE_TIMEOUT,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Probe {args[0]} failed: {e}")
        return None

    if result.returncode != 0:
        logger.debug(f"Probe {args[0]} exited with status {result.returncode}")
        return None

    return result.stdout


class HostDetector:
    """Default strategy: assume a POSIX host not running under PowerShell."""

    def is_native_windows(self) -> bool:
        return False

    def is_running_under_powershell(self) -> bool:
        return False


class PosixHostDetector(HostDetector):
    """Linux, macOS and other POSIX hosts."""


class WindowsHostDetector(HostDetector):
    """Hosts that report themselves as Windows."""

    def __init__(self, signatures: Sequence[str] = DEFAULT_COMPAT_SIGNATURES):
        self.signatures = [s.lower() for s in signatures]

    def is_native_windows(self) -> bool:
        """True unless ``uname -a`` reveals a compatibility layer such as WSL."""
        if not shutil.which("uname"):
            return True

        output = _probe(["uname", "-a"])
        if output is None:
            return True

        lowered = output.lower()
        return not any(signature in lowered for signature in self.signatures)

    def is_running_under_powershell(self) -> bool:
        """Check whether the parent process's command line names PowerShell."""
        output = _probe([
            "wmic", "process", "where", f"ProcessId={os.getppid()}",
            "get", "CommandLine",
        ])
        if output is None:
            return False

        command_line = output.lower()
        return any(exe in command_line for exe in POWERSHELL_EXECUTABLES)


def select_detector(
    platform: Optional[str] = None,
    signatures: Sequence[str] = DEFAULT_COMPAT_SIGNATURES,
) -> HostDetector:
    """Pick the detection strategy for ``platform`` (``sys.platform`` by default)."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return WindowsHostDetector(signatures)
    return PosixHostDetector()


def detect_dialect(detector: Optional[HostDetector] = None) -> Dialect:
    """Choose the sourcing dialect for the current host."""
    detector = detector if detector is not None else select_detector()
    if not detector.is_native_windows():
        return Dialect.POSIX
    if detector.is_running_under_powershell():
        return Dialect.POWERSHELL
    return Dialect.BATCH


def is_native_windows(signatures: Sequence[str] = DEFAULT_COMPAT_SIGNATURES) -> bool:
    """Check the current host, using ``signatures`` to spot compatibility layers."""
    return select_detector(signatures=signatures).is_native_windows()


def is_running_under_powershell() -> bool:
    return select_detector().is_running_under_powershell()
