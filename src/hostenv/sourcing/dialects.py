"""Dialect invokers: run a script and dump the environment it leaves behind.

Each dialect has its own quoting rules and its own dump command:

- posix:      sh -c '. <script> && env'
- batch:      cmd.exe /S /C ""<script>" && set"
- powershell: powershell.exe -ExecutionPolicy Bypass -Command
              "& { & '<script>'; Get-ChildItem Env: | ... }"

The set of dialects is closed; adding one means adding a builder here.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import tempfile
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

from ..config import ShellSettings
from ..environ import Environment, resolve_environment
from ..errors import ScriptExecutionError
from .parser import decode_lines, iter_entries

logger = logging.getLogger(__name__)


class Dialect(str, Enum):
    """Supported script execution environments."""

    POSIX = "posix"
    BATCH = "batch"
    POWERSHELL = "powershell"


@dataclass(frozen=True)
class Invocation:
    """A fully-formed subprocess invocation for one sourcing call.

    Attributes:
        script: Script path as given by the caller
        dialect: Dialect the command line was built for
        args: Argument vector, or a raw command line for cmd.exe
        passthrough_stderr: Send stderr to ours instead of capturing it
    """

    script: str
    dialect: Dialect
    args: Union[List[str], str]
    passthrough_stderr: bool


POWERSHELL_ENV_DUMP = "Get-ChildItem Env: | ForEach-Object { $_.Name + '=' + $_.Value }"


def _posix_invocation(script: str, settings: ShellSettings) -> Invocation:
    command = f". {shlex.quote(script)} && env"
    return Invocation(
        script=script,
        dialect=Dialect.POSIX,
        args=[settings.posix, "-c", command],
        passthrough_stderr=False,
    )


def _batch_invocation(script: str, settings: ShellSettings) -> Invocation:
    # /S strips exactly the outer quote pair, leaving "<script>" intact.
    # Passed as a string so list2cmdline does not re-escape the quotes.
    command_line = f'{settings.batch} /S /C ""{script}" && set"'
    return Invocation(
        script=script,
        dialect=Dialect.BATCH,
        args=command_line,
        passthrough_stderr=True,
    )


def _powershell_invocation(script: str, settings: ShellSettings) -> Invocation:
    quoted = "'" + script.replace("'", "''") + "'"
    command = f"& {{ & {quoted}; {POWERSHELL_ENV_DUMP} }}"
    return Invocation(
        script=script,
        dialect=Dialect.POWERSHELL,
        args=[settings.powershell, "-ExecutionPolicy", "Bypass", "-Command", command],
        passthrough_stderr=True,
    )


_BUILDERS: Dict[Dialect, Callable[[str, ShellSettings], Invocation]] = {
    Dialect.POSIX: _posix_invocation,
    Dialect.BATCH: _batch_invocation,
    Dialect.POWERSHELL: _powershell_invocation,
}


def build_invocation(
    dialect: Union[Dialect, str],
    script: str,
    settings: Optional[ShellSettings] = None,
) -> Invocation:
    """Build the subprocess invocation that sources ``script``.

    Args:
        dialect: Dialect (or its name) to run the script under
        script: Path to the script; not checked for existence
        settings: Shell executables to use (defaults if omitted)

    Raises:
        ValueError: If ``dialect`` is not a supported dialect name
    """
    dialect = Dialect(dialect)
    return _BUILDERS[dialect](script, settings or ShellSettings())


def capture(
    invocation: Invocation,
    environment: Optional[Environment] = None,
    encoding: str = "utf-8",
) -> bytes:
    """Run an invocation and return its standard output.

    The child inherits ``environment``'s variables.

    Raises:
        ScriptExecutionError: If the process cannot start, cannot be read,
            or exits with a non-zero status
    """
    environment = resolve_environment(environment)
    logger.debug(f"Sourcing {invocation.script!r} as {invocation.dialect.value}: {invocation.args!r}")

    try:
        result = subprocess.run(
            invocation.args,
            stdout=subprocess.PIPE,
            stderr=None if invocation.passthrough_stderr else subprocess.PIPE,
            env=environment.snapshot(),
            check=True,
        )
    except subprocess.CalledProcessError as e:
        raise ScriptExecutionError(
            invocation.script,
            f"exited with status {e.returncode}",
            dialect=invocation.dialect.value,
            returncode=e.returncode,
            stderr=_decode_stderr(e.stderr, encoding),
        ) from e
    except OSError as e:
        raise ScriptExecutionError(
            invocation.script,
            f"could not run {_executable(invocation)}: {e}",
            dialect=invocation.dialect.value,
        ) from e

    return result.stdout or b""


def stream_environment(
    invocation: Invocation,
    environment: Optional[Environment] = None,
    encoding: str = "utf-8",
) -> Dict[str, str]:
    """Run an invocation and parse its dump while it is being written.

    Standard output is decoded and parsed line by line straight off the
    pipe, so verbose scripts never have their whole output held in memory.
    Captured stderr is spooled to a temporary file. Nothing is returned
    unless the process exits with status 0.

    Raises:
        ScriptExecutionError: If the process cannot start, cannot be read,
            or exits with a non-zero status
    """
    environment = resolve_environment(environment)
    logger.debug(f"Sourcing {invocation.script!r} as {invocation.dialect.value}: {invocation.args!r}")

    with tempfile.TemporaryFile() as err_file:
        try:
            proc = subprocess.Popen(
                invocation.args,
                stdout=subprocess.PIPE,
                stderr=None if invocation.passthrough_stderr else err_file,
                env=environment.snapshot(),
            )
        except OSError as e:
            raise ScriptExecutionError(
                invocation.script,
                f"could not run {_executable(invocation)}: {e}",
                dialect=invocation.dialect.value,
            ) from e

        with proc:
            try:
                lines = decode_lines(proc.stdout, encoding)
                snapshot = dict(iter_entries(lines))
            except OSError as e:
                proc.kill()
                raise ScriptExecutionError(
                    invocation.script,
                    f"could not read output: {e}",
                    dialect=invocation.dialect.value,
                ) from e
            returncode = proc.wait()

        if returncode != 0:
            stderr = None
            if not invocation.passthrough_stderr:
                err_file.seek(0)
                stderr = _decode_stderr(err_file.read(), encoding)
            raise ScriptExecutionError(
                invocation.script,
                f"exited with status {returncode}",
                dialect=invocation.dialect.value,
                returncode=returncode,
                stderr=stderr,
            )

    return snapshot


def _decode_stderr(stderr: Optional[bytes], encoding: str) -> Optional[str]:
    if stderr is None:
        return None
    return stderr.decode(encoding, errors="replace")


def _executable(invocation: Invocation) -> str:
    if isinstance(invocation.args, str):
        return invocation.args.split(" ", 1)[0]
    return invocation.args[0]
