"""Configuration management for hostenv."""

from .parser import (
    CommandsConfig,
    DetectionConfig,
    HostEnvConfig,
    RuntimeConfig,
    ShellSettings,
    find_config_file,
    load_config,
)

__all__ = [
    "HostEnvConfig",
    "ShellSettings",
    "CommandsConfig",
    "DetectionConfig",
    "RuntimeConfig",
    "load_config",
    "find_config_file",
]
