"""Environment sourcing engine: the ``source`` builtin for a Python process."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union

from ..config import HostEnvConfig, ShellSettings
from ..environ import Environment, resolve_environment
from ..errors import ScriptExecutionError
from .dialects import Dialect, build_invocation, stream_environment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceRequest:
    """A script to source and the dialect to source it under."""

    script: str
    dialect: Dialect

    def __post_init__(self) -> None:
        # Accept plain dialect names
        object.__setattr__(self, "dialect", Dialect(self.dialect))


class EnvironmentSourcer:
    """Runs scripts under a dialect and imports the variables they set.

    Variables in the dump overwrite existing values. Variables absent from
    the dump are left alone; nothing is ever unset. There is no rollback:
    if writing a variable fails, the ones already written stay.
    """

    def __init__(
        self,
        environment: Optional[Environment] = None,
        settings: Optional[ShellSettings] = None,
    ):
        self.environment = resolve_environment(environment)
        self.settings = settings or ShellSettings()

    def source(self, request: SourceRequest) -> Dict[str, str]:
        """Source a script into the environment.

        Args:
            request: Script path and dialect

        Returns:
            The snapshot that was applied

        Raises:
            ScriptExecutionError: If the script fails or a variable cannot
                be written
        """
        invocation = build_invocation(request.dialect, request.script, self.settings)
        snapshot = stream_environment(invocation, self.environment, encoding=self.settings.encoding)
        self._apply(request, snapshot)
        logger.info(
            f"Sourced {request.script!r} ({request.dialect.value}): "
            f"{len(snapshot)} variables applied"
        )
        return snapshot

    def _apply(self, request: SourceRequest, snapshot: Dict[str, str]) -> None:
        for key, value in snapshot.items():
            try:
                self.environment.set(key, value)
            except (ValueError, OSError) as e:
                raise ScriptExecutionError(
                    request.script,
                    f"could not set {key!r}: {e}",
                    dialect=request.dialect.value,
                ) from e


def source_script(
    script: str,
    dialect: Union[Dialect, str, None] = None,
    environment: Optional[Environment] = None,
    config: Optional[HostEnvConfig] = None,
) -> Dict[str, str]:
    """Source ``script`` into the environment.

    When ``dialect`` is None it is picked from the host: PowerShell when
    launched from PowerShell on native Windows, batch on other native
    Windows hosts, POSIX everywhere else.
    """
    config = config or HostEnvConfig()
    if dialect is None:
        # Local import: hostenv.platform depends on sourcing.dialects
        from ..platform import detect_dialect, select_detector

        detector = select_detector(signatures=config.detection.compat_signatures)
        dialect = detect_dialect(detector)

    sourcer = EnvironmentSourcer(environment, config.shell)
    return sourcer.source(SourceRequest(script, Dialect(dialect)))
