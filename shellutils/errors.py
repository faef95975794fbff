from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shellutils.models import CommandResult


class ShellUtilsError(Exception):
    pass


class NotFoundError(ShellUtilsError, FileNotFoundError):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"No such file or directory: {self.path}")


class InvalidPatternError(ShellUtilsError, ValueError):
    def __init__(self, pattern: str, position: int, reason: str) -> None:
        self.pattern = pattern
        self.position = position
        super().__init__(f"Invalid glob pattern {pattern!r} at {position}: {reason}")


class CommandError(ShellUtilsError):
    def __init__(self, result: CommandResult) -> None:
        self.result = result
        super().__init__(f"Command {result.command!r} failed with exit code {result.exit_code}")
