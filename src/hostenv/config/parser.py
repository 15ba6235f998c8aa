"""Configuration file parser for hostenv."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from dotenv import dotenv_values

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python 3.10

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".hostenv.toml"
DOTENV_FILE_NAME = ".env"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class ShellSettings:
    """Executables and output decoding used by the dialect invokers."""

    posix: str = "sh"
    batch: str = "cmd.exe"
    powershell: str = "powershell.exe"
    encoding: str = "utf-8"


@dataclass
class CommandsConfig:
    """Command sequence runner configuration."""

    dedupe: bool = False


@dataclass
class DetectionConfig:
    """Host detection configuration."""

    # Lowercase substrings of `uname -a` that mark a Unix compatibility layer
    compat_signatures: List[str] = field(default_factory=lambda: ["microsoft"])


@dataclass
class RuntimeConfig:
    """Per-runtime overrides."""

    path: Optional[str] = None
    min_version: Optional[str] = None


@dataclass
class HostEnvConfig:
    """Complete hostenv configuration."""

    shell: ShellSettings = field(default_factory=ShellSettings)
    commands: CommandsConfig = field(default_factory=CommandsConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    runtimes: Dict[str, RuntimeConfig] = field(default_factory=dict)

    # Project root for resolving relative paths
    project_root: Path = field(default_factory=Path.cwd)

    def resolve_path(self, path_template: str) -> str:
        """Resolve ``${PROJECT_ROOT}`` and ``~`` in configured paths."""
        result = path_template.replace("${PROJECT_ROOT}", str(self.project_root))
        return str(Path(result).expanduser())


def find_config_file(project_path: Path) -> Optional[Path]:
    """Find .hostenv.toml in project root.

    Args:
        project_path: Root path of the project

    Returns:
        Path to .hostenv.toml if found, None otherwise
    """
    config_file = Path(project_path) / CONFIG_FILE_NAME
    if config_file.exists():
        return config_file
    return None


def load_config(
    project_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> HostEnvConfig:
    """Load configuration from .hostenv.toml, .env and the environment.

    Precedence, highest first: ``environ`` (the process environment by
    default), the project's ``.env`` file, ``.hostenv.toml``, defaults.

    Args:
        project_path: Root path of the project (defaults to cwd)
        environ: Mapping to read ``HOSTENV_*`` overrides from

    Returns:
        HostEnvConfig with loaded or default configuration
    """
    project_path = Path(project_path) if project_path else Path.cwd()
    config = HostEnvConfig(project_root=project_path)

    config_file = find_config_file(project_path)
    if config_file:
        try:
            with open(config_file, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            # Broken config falls back to defaults
            logger.warning(f"Ignoring unreadable {config_file}: {e}")
            data = {}
        _apply_toml(config, data)

    overrides: Dict[str, str] = {}
    dotenv_file = project_path / DOTENV_FILE_NAME
    if dotenv_file.is_file():
        overrides.update(
            {k: v for k, v in dotenv_values(dotenv_file).items() if v is not None}
        )
    overrides.update(os.environ if environ is None else environ)
    _apply_env_overrides(config, overrides)

    return config


def _apply_toml(config: HostEnvConfig, data: Dict) -> None:
    """Copy parsed TOML sections onto ``config``."""
    if "shell" in data:
        shell_data = data["shell"]
        config.shell.posix = shell_data.get("posix", config.shell.posix)
        config.shell.batch = shell_data.get("batch", config.shell.batch)
        config.shell.powershell = shell_data.get("powershell", config.shell.powershell)
        config.shell.encoding = shell_data.get("encoding", config.shell.encoding)

    if "commands" in data:
        config.commands.dedupe = bool(data["commands"].get("dedupe", False))

    if "detection" in data:
        signatures = data["detection"].get("compat_signatures")
        if signatures is not None:
            config.detection.compat_signatures = [s.lower() for s in signatures]

    # [runtime.python] creates nested dicts
    runtime_section = data.get("runtime", {})
    for name, runtime_data in runtime_section.items():
        if not isinstance(runtime_data, dict):
            continue
        config.runtimes[name] = RuntimeConfig(
            path=runtime_data.get("path"),
            min_version=runtime_data.get("min_version"),
        )


def _apply_env_overrides(config: HostEnvConfig, values: Mapping[str, str]) -> None:
    """Apply ``HOSTENV_*`` variables onto ``config``."""
    if values.get("HOSTENV_POSIX_SHELL"):
        config.shell.posix = values["HOSTENV_POSIX_SHELL"]
    if values.get("HOSTENV_BATCH_SHELL"):
        config.shell.batch = values["HOSTENV_BATCH_SHELL"]
    if values.get("HOSTENV_POWERSHELL"):
        config.shell.powershell = values["HOSTENV_POWERSHELL"]
    if values.get("HOSTENV_ENCODING"):
        config.shell.encoding = values["HOSTENV_ENCODING"]
    if "HOSTENV_DEDUPE_COMMANDS" in values:
        config.commands.dedupe = values["HOSTENV_DEDUPE_COMMANDS"].strip().lower() in _TRUE_VALUES
