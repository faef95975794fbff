"""Dynamically scoped working directory.

Relative paths are resolved against this location instead of the process
working directory. The value is held in a context variable, so every thread
sees its own scope stack and starts from the directory the process was
launched in.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

STARTUP_CWD = Path(os.getcwd())

_CWD: ContextVar[Path] = ContextVar("shellutils_cwd", default=STARTUP_CWD)


def get_cwd() -> Path:
    return _CWD.get()


@contextmanager
def with_cwd(path: str | os.PathLike[str]) -> Iterator[Path]:
    """
    Run the enclosed block with the working directory set to `path`.

    `path` is resolved against the current working directory. The previous
    value is restored when the block exits, also when it raises.
    """
    target = Path(path)
    if not target.is_absolute():
        target = _CWD.get() / target
    token = _CWD.set(target)
    logger.debug("cwd -> %s", target)
    try:
        yield target
    finally:
        _CWD.reset(token)
        logger.debug("cwd <- %s", _CWD.get())
