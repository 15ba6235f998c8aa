"""Run an ordered list of plain command strings."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .environ import Environment, resolve_environment
from .errors import ScriptExecutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Command:
    """A single executable invocation.

    Attributes:
        executable: Program name, resolved on PATH by the OS
        args: Positional arguments
        working_dir: Directory to run in (None for the current one)
    """

    executable: str
    args: Tuple[str, ...] = ()
    working_dir: Optional[str] = None

    @classmethod
    def parse(cls, command: str, working_dir: Optional[str] = None) -> "Command":
        """Split a command string on whitespace. Quoting is not supported.

        Raises:
            ScriptExecutionError: If the string is blank
        """
        parts = command.split()
        if not parts:
            raise ScriptExecutionError(command, "empty command")
        return cls(executable=parts[0], args=tuple(parts[1:]), working_dir=working_dir)

    @property
    def argv(self) -> List[str]:
        return [self.executable, *self.args]

    def __str__(self) -> str:
        return " ".join(self.argv)


def dedupe_commands(commands: Iterable[str]) -> List[str]:
    """Drop repeated command strings, keeping first-seen order."""
    seen = set()
    unique = []
    for command in commands:
        if command in seen:
            continue
        seen.add(command)
        unique.append(command)
    return unique


def run_commands(
    commands: Iterable[str],
    working_dir: Optional[str] = None,
    dedupe: bool = False,
    environment: Optional[Environment] = None,
) -> None:
    """Execute commands one after another, stopping at the first failure.

    Output goes straight to this process's stdout/stderr. Each command is
    parsed only when it is reached, so a blank entry after a failing one is
    never reported.

    Args:
        commands: Command strings, e.g. ``["npm install", "npm test"]``
        working_dir: Directory every command runs in
        dedupe: Skip repeated command strings (first occurrence wins)
        environment: Environment the children inherit

    Raises:
        ScriptExecutionError: For the first command that fails to start or
            exits non-zero; later commands are not run
    """
    commands = list(commands)
    if not commands:
        return

    if dedupe:
        unique = dedupe_commands(commands)
        if len(unique) != len(commands):
            logger.debug(f"Dropped {len(commands) - len(unique)} duplicate commands")
        commands = unique

    env = resolve_environment(environment).snapshot()

    for raw in commands:
        command = Command.parse(raw, working_dir)
        logger.debug(f"Running {command} in {working_dir or '.'}")
        try:
            subprocess.run(command.argv, cwd=command.working_dir, env=env, check=True)
        except subprocess.CalledProcessError as e:
            raise ScriptExecutionError(
                str(command), f"exited with status {e.returncode}", returncode=e.returncode
            ) from e
        except OSError as e:
            raise ScriptExecutionError(str(command), f"could not start: {e}") from e
