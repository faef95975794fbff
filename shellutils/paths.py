from __future__ import annotations

import errno
import logging
import os
import tempfile
from pathlib import Path, PurePath

from shellutils.cwd import get_cwd
from shellutils.errors import NotFoundError

logger = logging.getLogger(__name__)

PathLike = str | os.PathLike[str]


def _as_path(value: PathLike) -> Path:
    if isinstance(value, Path):
        return value
    if isinstance(value, PurePath):
        return Path(str(value))
    return Path(os.fspath(value))


def join(this: PathLike, that: object) -> Path:
    """
    Join a string, PurePath or Path with the string form of `that`.

    join("foo", "") == Path("foo"), join("foo", "bar") == Path("foo/bar")
    """
    suffix = os.fspath(that) if isinstance(that, (str, os.PathLike)) else str(that)
    return _as_path(this) / suffix


def is_absolute(path: PathLike) -> bool:
    return _as_path(path).is_absolute()


def is_relative(path: PathLike) -> bool:
    return not is_absolute(path)


def file(path: PathLike) -> Path:
    """Absolute path for `path`, relative inputs resolved against the scoped cwd."""
    p = _as_path(path)
    if p.is_absolute():
        return p
    return get_cwd() / p


def ls(directory: PathLike) -> list[Path]:
    d = file(directory)
    try:
        with os.scandir(d) as it:
            return [d / entry.name for entry in it]
    except (FileNotFoundError, NotADirectoryError):
        return []
    except OSError as err:
        logger.debug("treating unreadable directory %s as empty: %s", d, err)
        return []


def parent_file(path: PathLike) -> Path | None:
    p = file(path)
    parent = p.parent
    if parent == p:
        return None
    return parent


dirname = parent_file


def canonicalize(path: PathLike) -> Path:
    """
    Return a canonical path.

    Resolves symlinks, `.` and `..`, and makes relative paths absolute.
    Raises NotFoundError when the path does not exist.
    """
    p = file(path)
    try:
        return p.resolve(strict=True)
    except (FileNotFoundError, NotADirectoryError) as err:
        raise NotFoundError(p) from err
    except RuntimeError as err:
        # Symlink loop, raised as RuntimeError before 3.13.
        raise NotFoundError(p) from err
    except OSError as err:
        if err.errno == errno.ELOOP:
            raise NotFoundError(p) from err
        raise


def relativize(base: PathLike, path: PathLike) -> Path:
    return Path(os.path.relpath(file(path), file(base)))


def mkdir_p(directory: PathLike) -> bool:
    d = file(directory)
    if d.is_dir():
        return False
    d.mkdir(parents=True, exist_ok=True)
    return True


def basename(path: PathLike) -> str:
    return file(path).name


def extension(path: PathLike) -> str:
    """
    Extension of the file without the dot.

    Names starting with a dot get no special handling: ".gitignore" -> "gitignore".
    """
    name = _as_path(path).name
    idx = name.rfind(".")
    if idx < 0:
        return ""
    return name[idx + 1 :]


def strip_ext(path: PathLike) -> str:
    s = os.fspath(path)
    if "." not in _as_path(s).name:
        return s
    return s[: s.rfind(".")]


def temp_dir(prefix: str = "shellutils") -> Path:
    return Path(tempfile.mkdtemp(prefix=f"{prefix}_"))
