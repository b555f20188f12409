from __future__ import annotations
import logging, os
from dataclasses import dataclass
from typing import Iterator, List, Optional
from pathspec import PathSpec

from .archive import ArchiveReader, is_archive

CLASS_SUFFIX = ".class"
LOOSE = "file"
ARCHIVED = "archive"

_LOG = logging.getLogger(__name__)


class ClasspathNotFoundError(FileNotFoundError):
    """Raised when a classpath root (or anything below it) does not exist."""


@dataclass(frozen=True)
class Candidate:
    name: str  # dotted binary name, e.g. org.acme.Outer$Inner
    origin: str  # LOOSE or ARCHIVED
    source: str  # class file, or the archive holding it
    entry: Optional[str] = None  # archive entry name


def is_class_file(path: str) -> bool:
    return path.lower().endswith(CLASS_SUFFIX)


def class_name(path: str, prefix_len: int, sep: str = os.sep) -> str:
    """Turn ``<root>/org/acme/Foo.class`` into ``org.acme.Foo``."""
    return path[prefix_len:len(path) - len(CLASS_SUFFIX)].replace(sep, ".")


def exclude_spec(patterns: Optional[List[str]]) -> PathSpec:
    return PathSpec.from_lines("gitwildmatch", patterns or [])


def walk(root: str, exclude: Optional[PathSpec] = None) -> Iterator[Candidate]:
    """Yield every class definition found under a classpath root.

    Directories are walked recursively, ``.jar`` files are read entry by
    entry. Anything else is ignored. Raises ``ClasspathNotFoundError`` when
    the root is missing.
    """
    root = os.path.normpath(root)
    spec = exclude or exclude_spec(None)
    if os.path.isfile(root) and is_class_file(root):
        # A bare class file as root has no package directories above it.
        yield Candidate(name=os.path.basename(root)[:-len(CLASS_SUFFIX)], origin=LOOSE, source=root)
        return
    yield from _walk_path(root, len(root) + 1, spec)


def _walk_path(path: str, prefix_len: int, spec: PathSpec) -> Iterator[Candidate]:
    if not os.path.exists(path):
        raise ClasspathNotFoundError(f"File doesn't exist: {path}")
    if os.path.isdir(path):
        for child in sorted(os.listdir(path)):
            yield from _walk_path(os.path.join(path, child), prefix_len, spec)
        return
    rel = path[prefix_len:].replace(os.sep, "/")
    if rel and spec.match_file(rel):
        _LOG.debug("Excluded %s", path)
        return
    if is_archive(path):
        yield from _walk_archive(path, spec)
    elif is_class_file(path):
        yield Candidate(name=class_name(path, prefix_len), origin=LOOSE, source=path)
    else:
        _LOG.debug("Ignored %s", path)


def _walk_archive(path: str, spec: PathSpec) -> Iterator[Candidate]:
    with ArchiveReader(path) as reader:
        for entry in reader.entries():
            if entry.is_dir or not is_class_file(entry.name):
                continue
            if spec.match_file(entry.name):
                _LOG.debug("Excluded %s!/%s", path, entry.name)
                continue
            yield Candidate(
                name=class_name(entry.name, 0, "/"), origin=ARCHIVED, source=path, entry=entry.name,
            )
