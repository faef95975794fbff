"""Shell-style globbing over the filesystem.

Patterns are split on path separators and expanded one segment at a time:

- `.` lists every child of the current candidates
- `..` moves each candidate to its parent
- `**` expands to every directory below each candidate, the candidate included
- anything else is compiled to a regex and matched against child names

Names starting with a dot are skipped unless the segment itself starts with one.

    glob("*.{jpg,gif}")   glob(".*")   glob("/usr/*/se*")   glob("~/src/**/*.py")
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Literal

from shellutils.errors import InvalidPatternError, NotFoundError
from shellutils.paths import canonicalize, file, ls, parent_file

logger = logging.getLogger(__name__)

RootKind = Literal["absolute", "home", "relative"]

SEPARATORS = re.compile(r"[\\/]")
REGEX_SPECIALS = frozenset(".()|+^$@%")
NO_LEADING_DOT = r"(?=[^\.])"


@dataclass(frozen=True)
class GlobPattern:
    pattern: str
    root_kind: RootKind
    root: str
    segments: tuple[str, ...]

    @staticmethod
    def is_dot_pattern(segment: str) -> bool:
        return segment.startswith(".")

    def start_dir(self) -> Path:
        if self.root_kind == "absolute":
            return file(self.root + "/")
        if self.root_kind == "home":
            return Path.home()
        try:
            return canonicalize("")
        except NotFoundError:
            return file("")


def parse_pattern(pattern: str) -> GlobPattern:
    parts = SEPARATORS.split(pattern)
    head = parts[0]

    root_kind: RootKind = "relative"
    root = ""
    if head == "" or head[1:2] == ":":
        root_kind, root = "absolute", head
    elif head == "~":
        root_kind, root = "home", head
    if root_kind != "relative":
        parts = parts[1:]

    return GlobPattern(
        pattern=pattern,
        root_kind=root_kind,
        root=root,
        segments=tuple(p for p in parts if p),
    )


def glob_to_regex(segment: str) -> str:
    """
    Translate one glob segment into an anchored regex.

    `*` and `?` never cross a `/`, `{a,b}` alternates, `\\x` matches x literally.
    """
    out: list[str] = []
    depth = 0
    i = 0
    n = len(segment)
    while i < n:
        c = segment[i]
        if c == "\\":
            if i + 1 < n:
                out.append(re.escape(segment[i + 1]))
                i += 2
                continue
            out.append(r"\\")
        elif c == "/":
            nxt = segment[i + 1 : i + 2]
            out.append("/" if nxt == "." else "/" + NO_LEADING_DOT)
        elif c == "*":
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "{":
            depth += 1
            out.append("(")
        elif c == "}":
            depth -= 1
            if depth < 0:
                raise InvalidPatternError(segment, i, "unmatched '}'")
            out.append(")")
        elif c == "," and depth > 0:
            out.append("|")
        elif c in REGEX_SPECIALS:
            out.append("\\" + c)
        else:
            out.append(re.escape(c))
        i += 1

    if depth > 0:
        raise InvalidPatternError(segment, n, "unclosed '{'")

    prefix = "" if GlobPattern.is_dot_pattern(segment) else NO_LEADING_DOT
    return "^" + prefix + "".join(out) + "$"


def compile_segment(segment: str) -> re.Pattern[str]:
    return re.compile(glob_to_regex(segment))


def filter_files(files: Iterable[Path], regex: re.Pattern[str]) -> list[Path]:
    return [f for f in files if regex.fullmatch(f.name)]


def _walk_dirs(root: Path) -> Iterator[Path]:
    # Pre-order, listing order. Symlinked directories are yielded but not entered.
    stack = [root]
    while stack:
        current = stack.pop()
        try:
            if not current.is_dir():
                continue
            linked = current is not root and current.is_symlink()
        except OSError as err:
            logger.debug("skipping unreadable entry %s: %s", current, err)
            continue
        yield current
        if linked:
            continue
        stack.extend(reversed(ls(current)))


def _expand(candidates: list[Path], segment: str) -> list[Path]:
    if segment == ".":
        return [child for c in candidates for child in ls(c)]
    if segment == "..":
        parents = (parent_file(c) for c in candidates)
        return [p for p in parents if p is not None]
    if segment == "**":
        return [d for c in candidates for d in _walk_dirs(c)]
    regex = compile_segment(segment)
    return [f for c in candidates for f in filter_files(ls(c), regex)]


def glob(pattern: str | os.PathLike[str]) -> list[Path]:
    """
    Return the paths matching `pattern`, in filesystem listing order.

    Dot files are ignored unless a segment explicitly starts with a dot.
    Missing or unreadable directories simply contribute no matches.
    """
    parsed = parse_pattern(os.fspath(pattern))
    candidates = [parsed.start_dir()]
    for segment in parsed.segments:
        candidates = _expand(candidates, segment)
        logger.debug("glob %r: %r -> %d candidate(s)", parsed.pattern, segment, len(candidates))
    return candidates
