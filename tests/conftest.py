from __future__ import annotations

import struct
import zipfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pytest

from classnames_cli.classfile import (
    ACC_ABSTRACT,
    ACC_ENUM,
    ACC_FINAL,
    ACC_INTERFACE,
    ACC_PRIVATE,
    ACC_PUBLIC,
    ACC_STATIC,
    ACC_SUPER,
)

SERIAL = "java.io.Serializable"
UID = ("serialVersionUID", "J", ACC_PRIVATE | ACC_STATIC | ACC_FINAL)
CLASS_FLAGS = ACC_PUBLIC | ACC_SUPER
INTERFACE_FLAGS = ACC_PUBLIC | ACC_INTERFACE | ACC_ABSTRACT
ABSTRACT_FLAGS = ACC_PUBLIC | ACC_SUPER | ACC_ABSTRACT
ENUM_FLAGS = ACC_PUBLIC | ACC_SUPER | ACC_FINAL | ACC_ENUM


class _Pool:
    def __init__(self) -> None:
        self.entries: List[Optional[bytes]] = []
        self._utf8: Dict[str, int] = {}
        self._classes: Dict[str, int] = {}

    def _add(self, raw: bytes, slots: int = 1) -> int:
        self.entries.append(raw)
        index = len(self.entries)
        for _ in range(slots - 1):
            self.entries.append(None)
        return index

    def utf8(self, text: str) -> int:
        if text not in self._utf8:
            raw = text.encode("utf-8")
            self._utf8[text] = self._add(struct.pack(">BH", 1, len(raw)) + raw)
        return self._utf8[text]

    def klass(self, dotted: str, fresh: bool = False) -> int:
        """Return the Class constant for ``dotted``; ``fresh`` always adds a new one."""
        if fresh or dotted not in self._classes:
            name_index = self.utf8(dotted.replace(".", "/"))
            index = self._add(struct.pack(">BH", 7, name_index))
            self._classes.setdefault(dotted, index)
            return index
        return self._classes[dotted]

    def long(self, value: int) -> int:
        return self._add(struct.pack(">Bq", 5, value), slots=2)

    def integer(self, value: int) -> int:
        return self._add(struct.pack(">Bi", 3, value))

    def serialize(self) -> bytes:
        body = b"".join(e for e in self.entries if e is not None)
        return struct.pack(">H", len(self.entries) + 1) + body


def build_class(
    name: str,
    *,
    super_name: Optional[str] = "java.lang.Object",
    interfaces: Sequence[str] = (),
    access: int = CLASS_FLAGS,
    fields: Iterable[Tuple[str, str, int]] = (),
    inner: Optional[Tuple[Optional[str], Optional[str], int]] = None,
    constants: Sequence[int] = (),
    inner_ref_copy: bool = False,
) -> bytes:
    """Assemble a minimal class file.

    ``fields`` holds ``(name, descriptor, flags)``; ``inner`` describes this
    class's own ``InnerClasses`` entry as ``(outer, simple_name, flags)``,
    with ``simple_name=None`` for anonymous classes. ``inner_ref_copy`` makes
    that entry point at a second Class constant naming this class, as some
    compilers emit.
    """
    pool = _Pool()
    for value in constants:
        pool.long(value)
        pool.integer(value)
    this_index = pool.klass(name)
    super_index = pool.klass(super_name) if super_name else 0
    iface_indexes = [pool.klass(i) for i in interfaces]
    field_rows = [(flags, pool.utf8(fname), pool.utf8(desc)) for fname, desc, flags in fields]

    attrs = b""
    attr_count = 0
    if inner is not None:
        outer, simple, inner_flags = inner
        outer_index = pool.klass(outer) if outer else 0
        simple_index = pool.utf8(simple) if simple else 0
        inner_index = pool.klass(name, fresh=True) if inner_ref_copy else this_index
        attr_name = pool.utf8("InnerClasses")
        body = struct.pack(">HHHHH", 1, inner_index, outer_index, simple_index, inner_flags)
        attrs = struct.pack(">HI", attr_name, len(body)) + body
        attr_count = 1

    out = struct.pack(">IHH", 0xCAFEBABE, 0, 52)
    out += pool.serialize()
    out += struct.pack(">HHH", access, this_index, super_index)
    out += struct.pack(">H", len(iface_indexes))
    out += b"".join(struct.pack(">H", i) for i in iface_indexes)
    out += struct.pack(">H", len(field_rows))
    for flags, name_index, desc_index in field_rows:
        out += struct.pack(">HHHH", flags, name_index, desc_index, 0)
    out += struct.pack(">H", 0)  # methods
    out += struct.pack(">H", attr_count) + attrs
    return out


def write_class(root: Path, name: str, **kwargs) -> Path:
    path = root.joinpath(*name.split("."))
    path = path.parent / (path.name + ".class")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(build_class(name, **kwargs))
    return path


def write_jar(path: Path, classes: Dict[str, bytes], extra: Optional[Dict[str, bytes]] = None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("META-INF/", b"")
        zf.writestr("META-INF/MANIFEST.MF", b"Manifest-Version: 1.0\n")
        for name, data in classes.items():
            zf.writestr(name.replace(".", "/") + ".class", data)
        for entry, data in (extra or {}).items():
            zf.writestr(entry, data)
    return path


@pytest.fixture
def classes_dir(tmp_path: Path) -> Path:
    root = tmp_path / "classes"
    root.mkdir()
    return root
