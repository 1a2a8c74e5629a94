"""Delegation of unknown commands to ``near-<command>`` executables.

The search order is the tool-managed ``bin`` directory (``~/.near-cli/bin``)
followed by every ``PATH`` entry. The child runs with the forwarded arguments
and this process waits for it; its exit status becomes ours. Unlike an
``exec`` replacement the child gets its own PID, so signals sent to
``near`` reach the child only through the terminal's process group.
"""

from __future__ import annotations

import logging
import os
import stat
import subprocess
import sys
from pathlib import Path
from typing import Mapping, Sequence

logger = logging.getLogger(__name__)

EXECUTABLE_PREFIX = "near-"


class DispatchError(RuntimeError):
    """Base class for external command failures."""


class DispatchNotFoundError(DispatchError):
    def __init__(self, executable: str) -> None:
        super().__init__(f"command {executable} does not exist")
        self.executable = executable


class DispatchExecutionError(DispatchError):
    def __init__(self, executable: str | Path, cause: object) -> None:
        super().__init__(f"failed to run {executable}: {cause}")
        self.executable = executable
        self.cause = cause


class ExternalProcessExitError(DispatchError):
    """The external command ran and exited with a non-zero status."""

    def __init__(self, executable: str | Path, code: int) -> None:
        super().__init__(f"{executable} exited with status {code}")
        self.executable = executable
        self.code = code


def executable_name(command: str, platform: str | None = None) -> str:
    platform = sys.platform if platform is None else platform
    suffix = ".exe" if platform.startswith("win") else ""
    return f"{EXECUTABLE_PREFIX}{command}{suffix}"


def search_directories(primary_dir: Path, env: Mapping[str, str] | None = None) -> list[Path]:
    env_map = os.environ if env is None else env
    dirs = [primary_dir]
    raw_path = env_map.get("PATH")
    if raw_path:
        dirs.extend(Path(entry) for entry in raw_path.split(os.pathsep) if entry)
    return dirs


def is_executable(path: Path) -> bool:
    try:
        info = path.stat()
    except OSError:
        return False
    if not stat.S_ISREG(info.st_mode):
        return False
    if os.name == "nt":
        return True
    return bool(info.st_mode & (stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))


def find_external_subcommand(command: str, directories: Sequence[Path]) -> Path | None:
    name = executable_name(command)
    for directory in directories:
        candidate = directory / name
        if is_executable(candidate):
            return candidate
    return None


def execute_external_subcommand(
    command: str,
    args: Sequence[str],
    primary_dir: Path,
    env: Mapping[str, str] | None = None,
) -> int:
    """Run ``near-<command>`` with *args*; return 0 or raise a dispatch error."""

    path = find_external_subcommand(command, search_directories(primary_dir, env))
    if path is None:
        raise DispatchNotFoundError(executable_name(command))
    logger.debug("Delegating '%s' to %s %s", command, path, list(args))
    try:
        result = subprocess.run([str(path), *args], env=None if env is None else dict(env))
    except OSError as exc:
        raise DispatchExecutionError(path, exc) from exc
    if result.returncode < 0:
        raise DispatchExecutionError(path, f"terminated by signal {-result.returncode}")
    if result.returncode != 0:
        raise ExternalProcessExitError(path, result.returncode)
    return 0
