"""Data types for runtime resolution."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RuntimeInfo:
    """Information about a located runtime executable.

    Attributes:
        name: Runtime family (e.g., "python", "node", "pip")
        path: Absolute path to the executable
        source: How the runtime was located
        version: Version string (if probed)
    """

    name: str
    path: str
    source: str  # "explicit_config" or "system"
    version: Optional[str] = None

    def __repr__(self) -> str:
        version_str = f" v{self.version}" if self.version else ""
        return f"<RuntimeInfo {self.name}{version_str} @ {self.path} ({self.source})>"
