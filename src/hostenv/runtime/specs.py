"""Declarative runtime specifications.

This is DATA, not code. To locate a new runtime family, add its spec here.
"""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class VersionCheck:
    """Configuration for checking runtime version."""
    args: List[str]
    parse: str  # Regex pattern to extract version


@dataclass(frozen=True)
class RuntimeSpec:
    """Runtime family specification."""
    display_name: str
    candidates: List[str]  # Tried in order on PATH
    version_check: VersionCheck


RUNTIME_SPECS: Dict[str, RuntimeSpec] = {
    "python": RuntimeSpec(
        display_name="Python",
        candidates=["python3", "python"],
        version_check=VersionCheck(
            args=["--version"],
            parse=r"Python (\d+\.\d+\.\d+)",
        ),
    ),

    "node": RuntimeSpec(
        display_name="Node.js",
        candidates=["node"],
        version_check=VersionCheck(
            args=["--version"],
            parse=r"v(\d+\.\d+\.\d+)",
        ),
    ),

    "pip": RuntimeSpec(
        display_name="pip",
        candidates=["pip3", "pip"],
        version_check=VersionCheck(
            args=["--version"],
            parse=r"pip (\d+(?:\.\d+)*)",
        ),
    ),
}


def get_runtime_spec(name: str) -> RuntimeSpec:
    """Get runtime spec for a runtime family.

    Raises:
        ValueError: If the family is not supported
    """
    if name not in RUNTIME_SPECS:
        supported = ", ".join(RUNTIME_SPECS.keys())
        raise ValueError(
            f"Runtime '{name}' not supported. "
            f"Supported runtimes: {supported}"
        )

    return RUNTIME_SPECS[name]
