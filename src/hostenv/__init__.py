"""hostenv: locate runtimes and source shell scripts into the current process.

Example:
    >>> from hostenv import SourceRequest, EnvironmentSourcer, Dialect
    >>> EnvironmentSourcer().source(SourceRequest("./activate.sh", Dialect.POSIX))
"""

import logging

from .commands import Command, run_commands
from .environ import Environment, InMemoryEnvironment, ProcessEnvironment
from .errors import HostEnvError, NotFoundError, ScriptExecutionError
from .runtime import RuntimeInfo, RuntimeLocator, find_executable, find_node, find_pip, find_python
from .sourcing import Dialect, EnvironmentSourcer, SourceRequest, parse_environment, source_script

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Errors
    "HostEnvError",
    "NotFoundError",
    "ScriptExecutionError",
    # Environment
    "Environment",
    "ProcessEnvironment",
    "InMemoryEnvironment",
    # Sourcing
    "Dialect",
    "SourceRequest",
    "EnvironmentSourcer",
    "source_script",
    "parse_environment",
    # Runtimes
    "RuntimeInfo",
    "RuntimeLocator",
    "find_executable",
    "find_python",
    "find_node",
    "find_pip",
    # Commands
    "Command",
    "run_commands",
]
