"""File discovery for SwiftGuard using glob patterns.

Patterns are matched against paths relative to the argument they were found
under, with ``/`` separators. ``*`` and ``?`` stay within one path segment
and ``**`` spans any number of segments. A directory matching an exclude
pattern is not descended into.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from functools import lru_cache
from pathlib import Path
from typing import Final

from swiftguard.types import SwiftGuardConfig

logger: logging.Logger = logging.getLogger(__name__)

SWIFT_SUFFIX: Final[str] = ".swift"


@lru_cache(maxsize=None)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Translate a glob into a regex for ``fullmatch`` against a relative path."""
    out: list[str] = []
    i: int = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("/**", i) and i + 3 == len(pattern):
            out.append("(?:/.*)?")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif pattern[i] == "*":
            out.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            out.append("[^/]")
            i += 1
        else:
            out.append(re.escape(pattern[i]))
            i += 1
    return re.compile("".join(out))


def matches_any(rel_path: str, patterns: tuple[str, ...]) -> bool:
    return any(compile_glob(pattern).fullmatch(rel_path) for pattern in patterns)


def _accepts(rel_path: str, *, config: SwiftGuardConfig) -> bool:
    if matches_any(rel_path, config.exclude):
        logger.debug("Excluded %s", rel_path)
        return False
    return matches_any(rel_path, config.include)


def _walk(root: Path, *, config: SwiftGuardConfig) -> Iterator[Path]:
    pending: list[Path] = [root]
    while pending:
        directory: Path = pending.pop()
        for child in directory.iterdir():
            rel_path: str = child.relative_to(root).as_posix()
            if child.is_dir():
                if matches_any(rel_path, config.exclude):
                    logger.debug("Excluded %s", rel_path)
                else:
                    pending.append(child)
            elif child.suffix == SWIFT_SUFFIX and _accepts(rel_path, config=config):
                yield child


def scan_files(*, paths: tuple[Path, ...], config: SwiftGuardConfig) -> list[Path]:
    """
    Find Swift files matching include/exclude patterns.

    Args:
        paths: Root paths to scan (files or directories). A file argument is
            matched by its name alone.
        config: SwiftGuard configuration with include/exclude patterns.

    Returns:
        Sorted, de-duplicated list of resolved Swift files to lint.
    """
    found: set[Path] = set()
    for path in paths:
        root: Path = path.resolve()
        if root.is_dir():
            found.update(_walk(root, config=config))
        elif root.suffix == SWIFT_SUFFIX and _accepts(root.name, config=config):
            found.add(root)
    return sorted(found)
