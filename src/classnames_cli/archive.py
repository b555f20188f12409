from __future__ import annotations
import os, zipfile, zlib
from dataclasses import dataclass
from typing import Iterator, Optional

ARCHIVE_SUFFIX = ".jar"


class ArchiveReadError(OSError):
    """Raised when an archive cannot be opened or its directory is corrupt."""


@dataclass(frozen=True)
class ArchiveEntry:
    name: str
    is_dir: bool


def is_archive(path: str) -> bool:
    return path.lower().endswith(ARCHIVE_SUFFIX)


class ArchiveReader:
    """Scoped reader over a ZIP container. Use as a context manager."""

    def __init__(self, path: str):
        self.path = path
        self._zip: Optional[zipfile.ZipFile] = None
        self._empty = False

    @property
    def closed(self) -> bool:
        return self._zip is None and not self._empty

    def open(self) -> "ArchiveReader":
        if not self.closed:
            return self
        # A zero-byte file has no central directory; treat it as having no entries.
        if os.path.isfile(self.path) and os.path.getsize(self.path) == 0:
            self._empty = True
            return self
        try:
            self._zip = zipfile.ZipFile(self.path, "r")
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError) as e:
            raise ArchiveReadError(f"Failed to open archive {self.path}: {e}") from e
        return self

    def close(self) -> None:
        self._empty = False
        if self._zip is not None:
            self._zip.close()
            self._zip = None

    def __enter__(self) -> "ArchiveReader":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()

    def _require(self) -> Optional[zipfile.ZipFile]:
        if self.closed:
            raise ArchiveReadError(f"Archive is not open: {self.path}")
        return self._zip

    def entries(self) -> Iterator[ArchiveEntry]:
        zf = self._require()
        if zf is None:
            return
        for info in zf.infolist():
            yield ArchiveEntry(name=info.filename, is_dir=info.is_dir())

    def read(self, name: str) -> bytes:
        zf = self._require()
        if zf is None:
            raise ArchiveReadError(f"No entry {name} in archive {self.path}")
        try:
            return zf.read(name)
        except KeyError as e:
            raise ArchiveReadError(f"No entry {name} in archive {self.path}") from e
        except (zipfile.BadZipFile, zlib.error, OSError) as e:
            raise ArchiveReadError(f"Failed to read {name} from archive {self.path}: {e}") from e


def iter_entries(path: str) -> Iterator[ArchiveEntry]:
    """Yield every entry of the archive at ``path``; the archive is closed on any exit."""
    with ArchiveReader(path) as reader:
        yield from reader.entries()
