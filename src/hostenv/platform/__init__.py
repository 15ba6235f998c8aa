"""Platform and parent-shell detection."""

from .detect import (
    HostDetector,
    PosixHostDetector,
    WindowsHostDetector,
    detect_dialect,
    is_native_windows,
    is_running_under_powershell,
    select_detector,
)

__all__ = [
    "HostDetector",
    "PosixHostDetector",
    "WindowsHostDetector",
    "select_detector",
    "detect_dialect",
    "is_native_windows",
    "is_running_under_powershell",
]
