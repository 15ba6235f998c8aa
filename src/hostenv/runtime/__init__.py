"""Runtime locator for language interpreters and tools (Python, Node, pip)."""

from .locator import RuntimeLocator, find_executable, find_node, find_pip, find_python
from .specs import RUNTIME_SPECS
from .types import RuntimeInfo

__all__ = [
    "RuntimeLocator",
    "RuntimeInfo",
    "RUNTIME_SPECS",
    "find_executable",
    "find_python",
    "find_node",
    "find_pip",
]
