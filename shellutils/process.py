"""Run external commands from the scoped working directory."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Mapping, Sequence

from shellutils.config import get_settings
from shellutils.cwd import get_cwd
from shellutils.errors import CommandError
from shellutils.models import CommandResult
from shellutils.paths import file

logger = logging.getLogger(__name__)

EXIT_NOT_STARTED = 127
EXIT_TIMEOUT = 124


def _as_argv(cmd: str | Sequence[str | os.PathLike[str]]) -> list[str]:
    if isinstance(cmd, str):
        return shlex.split(cmd)
    return [os.fspath(arg) for arg in cmd]


def run(
    cmd: str | Sequence[str | os.PathLike[str]],
    *,
    cwd: str | Path | None = None,
    dry_run: bool | None = None,
    check: bool = False,
    timeout: float | None = None,
    env: Mapping[str, str] | None = None,
) -> CommandResult:
    argv = _as_argv(cmd)
    if not argv:
        raise ValueError("Empty command")
    workdir = file(cwd) if cwd is not None else get_cwd()
    if dry_run is None:
        dry_run = get_settings().dry_run

    line = shlex.join(argv)
    if dry_run:
        logger.info("[dry-run] (cd %s && %s)", workdir, line)
        return CommandResult(command=argv, cwd=str(workdir), exit_code=0, dry_run=True)

    logger.info("(cd %s && %s)", workdir, line)
    child_env = dict(os.environ if env is None else env)
    child_env["PWD"] = str(workdir)
    try:
        proc = subprocess.run(
            argv,
            cwd=workdir,
            env=child_env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
        result = CommandResult(
            command=argv,
            cwd=str(workdir),
            exit_code=int(proc.returncode),
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
    except subprocess.TimeoutExpired as err:
        result = CommandResult(
            command=argv,
            cwd=str(workdir),
            exit_code=EXIT_TIMEOUT,
            stderr=f"TIMEOUT: {err}",
        )
    except OSError as err:
        result = CommandResult(
            command=argv,
            cwd=str(workdir),
            exit_code=EXIT_NOT_STARTED,
            stderr=f"RUNNER_ERROR: {err}",
        )

    if not result.ok:
        logger.debug("exit %d: %s", result.exit_code, line)
        if check:
            raise CommandError(result)
    return result
