"""Pytest configuration and shared fixtures."""

import os
import stat
from pathlib import Path
from typing import Callable

import pytest

from hostenv.environ import InMemoryEnvironment



@pytest.fixture
def memory_env() -> InMemoryEnvironment:
    """An isolated environment that still sees the real PATH.

    Subprocesses spawned with it can find ``sh``, ``env`` and friends, but
    nothing sourced into it touches ``os.environ``.
    """
    return InMemoryEnvironment({"PATH": os.environ.get("PATH", os.defpath)})


@pytest.fixture
def make_executable(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory creating executable stub files under ``tmp_path/<dir>``."""

    def _make(directory: str, name: str) -> Path:
        bin_dir = tmp_path / directory
        bin_dir.mkdir(parents=True, exist_ok=True)
        exe = bin_dir / name
        exe.write_text("#!/bin/sh\nexit 0\n")
        exe.chmod(exe.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return exe

    return _make


@pytest.fixture
def write_script(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory writing a script file into ``tmp_path``."""

    def _write(name: str, content: str) -> Path:
        script = tmp_path / name
        script.write_text(content)
        return script

    return _write
