"""Locate language runtimes on the executable search path."""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence

import semver

from ..config import HostEnvConfig, RuntimeConfig
from ..environ import Environment, resolve_environment
from ..errors import NotFoundError
from .specs import RuntimeSpec, get_runtime_spec
from .types import RuntimeInfo

logger = logging.getLogger(__name__)


def find_executable(
    candidates: Sequence[str],
    environment: Optional[Environment] = None,
) -> str:
    """Return the absolute path of the first candidate found on PATH.

    Args:
        candidates: Executable names, most preferred first
        environment: Environment whose PATH is searched

    Raises:
        NotFoundError: If no candidate is on PATH
    """
    environment = resolve_environment(environment)
    search_path = environment.get("PATH", os.defpath)

    for name in candidates:
        path = shutil.which(name, path=search_path)
        if path:
            return str(Path(path).absolute())

    raise NotFoundError(candidates)


def find_python(environment: Optional[Environment] = None) -> str:
    """Find the Python interpreter, preferring ``python3``."""
    return find_executable(get_runtime_spec("python").candidates, environment)


def find_node(environment: Optional[Environment] = None) -> str:
    """Find the Node.js interpreter."""
    return find_executable(get_runtime_spec("node").candidates, environment)


def find_pip(environment: Optional[Environment] = None) -> str:
    """Find pip, preferring ``pip3``."""
    return find_executable(get_runtime_spec("pip").candidates, environment)


class RuntimeLocator:
    """Resolve runtime families to executables.

    Priority:
    1. Explicit ``[runtime.<name>] path`` from .hostenv.toml
    2. Ordered PATH search over the family's candidates
    """

    def __init__(
        self,
        environment: Optional[Environment] = None,
        config: Optional[HostEnvConfig] = None,
    ):
        self.environment = resolve_environment(environment)
        self.config = config or HostEnvConfig()

    def locate(self, name: str, probe_version: bool = False) -> RuntimeInfo:
        """Locate a runtime family.

        Args:
            name: Runtime family ("python", "node", "pip")
            probe_version: Run the version command and record the result

        Returns:
            RuntimeInfo for the located executable

        Raises:
            ValueError: If the family is not supported
            NotFoundError: If nothing is found, or the version is too old
        """
        spec = get_runtime_spec(name)
        runtime_config = self.config.runtimes.get(name)
        min_version = runtime_config.min_version if runtime_config else None

        runtime = self._check_explicit_config(name, spec, runtime_config)
        if runtime is None:
            path = find_executable(spec.candidates, self.environment)
            runtime = RuntimeInfo(name=name, path=path, source="system")

        if probe_version or min_version:
            runtime.version = self._get_version(runtime.path, spec)

        if min_version:
            self._check_min_version(runtime, spec, min_version)

        logger.debug(f"Located {runtime!r}")
        return runtime

    def _check_explicit_config(
        self,
        name: str,
        spec: RuntimeSpec,
        runtime_config: Optional[RuntimeConfig],
    ) -> Optional[RuntimeInfo]:
        """Check explicit configuration."""
        if not runtime_config or not runtime_config.path:
            return None

        resolved_path = self.config.resolve_path(runtime_config.path)
        if not Path(resolved_path).exists():
            logger.warning(
                f"Configured {spec.display_name} path {resolved_path} does not exist, "
                f"searching PATH instead"
            )
            return None

        return RuntimeInfo(name=name, path=resolved_path, source="explicit_config")

    def _check_min_version(self, runtime: RuntimeInfo, spec: RuntimeSpec, min_version: str) -> None:
        if runtime.version is None:
            raise NotFoundError(
                [runtime.path],
                f"could not determine {spec.display_name} version (need >= {min_version})",
            )

        try:
            found = semver.Version.parse(runtime.version, optional_minor_and_patch=True)
            wanted = semver.Version.parse(min_version, optional_minor_and_patch=True)
        except ValueError as e:
            logger.warning(f"Skipping {spec.display_name} version check: {e}")
            return

        if found < wanted:
            raise NotFoundError(
                [runtime.path],
                f"{spec.display_name} {runtime.version} is older than {min_version}",
            )

    def _get_version(self, executable: str, spec: RuntimeSpec) -> Optional[str]:
        """Get version of an executable."""
        version_check = spec.version_check

        try:
            result = subprocess.run(
                [executable] + version_check.args,
                capture_output=True,
                text=True,
                timeout=5,
                env=self.environment.snapshot(),
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"Version probe for {executable} failed: {e}")
            return None

        output = result.stdout + result.stderr
        match = re.search(version_check.parse, output)
        if match:
            return match.group(1)

        return None
