"""Minimal JVM class-file reader.

Only what the generator needs is decoded: access flags, the class
hierarchy, declared fields and the ``InnerClasses`` attribute. Method
bodies and every other attribute are skipped.
"""

from __future__ import annotations
import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

MAGIC = 0xCAFEBABE

ACC_PUBLIC = 0x0001
ACC_PRIVATE = 0x0002
ACC_PROTECTED = 0x0004
ACC_STATIC = 0x0008
ACC_FINAL = 0x0010
ACC_SUPER = 0x0020
ACC_VOLATILE = 0x0040
ACC_TRANSIENT = 0x0080
ACC_INTERFACE = 0x0200
ACC_ABSTRACT = 0x0400
ACC_SYNTHETIC = 0x1000
ACC_ANNOTATION = 0x2000
ACC_ENUM = 0x4000

FIELD_MODIFIERS = [
    (ACC_PUBLIC, "public"),
    (ACC_PRIVATE, "private"),
    (ACC_PROTECTED, "protected"),
    (ACC_STATIC, "static"),
    (ACC_FINAL, "final"),
    (ACC_VOLATILE, "volatile"),
    (ACC_TRANSIENT, "transient"),
    (ACC_SYNTHETIC, "synthetic"),
    (ACC_ENUM, "enum"),
]

PRIMITIVES = {
    "B": "byte",
    "C": "char",
    "D": "double",
    "F": "float",
    "I": "int",
    "J": "long",
    "S": "short",
    "Z": "boolean",
    "V": "void",
}

# Constant pool tag -> size of the payload following the tag byte.
# Utf8 (1) is variable-length and handled separately.
_CP_SIZES = {
    3: 4,   # Integer
    4: 4,   # Float
    5: 8,   # Long
    6: 8,   # Double
    7: 2,   # Class
    8: 2,   # String
    9: 4,   # Fieldref
    10: 4,  # Methodref
    11: 4,  # InterfaceMethodref
    12: 4,  # NameAndType
    15: 3,  # MethodHandle
    16: 2,  # MethodType
    17: 4,  # Dynamic
    18: 4,  # InvokeDynamic
    19: 2,  # Module
    20: 2,  # Package
}
_TAG_UTF8 = 1
_TAG_CLASS = 7

ENUM_BASE = "java.lang.Enum"


class ClassFormatError(ValueError):
    """Raised for truncated or malformed class files."""


class TypeKind(str, Enum):
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"


@dataclass(frozen=True)
class FieldInfo:
    declared_type: str
    modifiers: FrozenSet[str]

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers

    @property
    def is_final(self) -> bool:
        return "final" in self.modifiers


@dataclass
class ClassInfo:
    name: str
    access_flags: int
    super_name: Optional[str]
    interfaces: Tuple[str, ...] = ()
    fields: Dict[str, FieldInfo] = field(default_factory=dict)
    simple_name: str = ""

    @property
    def kind(self) -> TypeKind:
        if self.access_flags & ACC_INTERFACE:
            return TypeKind.INTERFACE
        if self.access_flags & ACC_ENUM and self.super_name == ENUM_BASE:
            return TypeKind.ENUM
        return TypeKind.CLASS

    @property
    def is_abstract(self) -> bool:
        return bool(self.access_flags & ACC_ABSTRACT)

    def get_field(self, name: str) -> Optional[FieldInfo]:
        return self.fields.get(name)


def decode_mutf8(raw: bytes) -> str:
    """Decode the JVM's modified UTF-8 (encoded NUL, surrogate pairs)."""
    text = raw.replace(b"\xc0\x80", b"\x00").decode("utf-8", errors="surrogatepass")
    return text.encode("utf-16", errors="surrogatepass").decode("utf-16")


def descriptor_to_type(descriptor: str) -> str:
    """``J`` -> ``long``, ``[Ljava/lang/String;`` -> ``java.lang.String[]``."""
    dims = len(descriptor) - len(descriptor.lstrip("["))
    base = descriptor[dims:]
    if base in PRIMITIVES:
        name = PRIMITIVES[base]
    elif base.startswith("L") and base.endswith(";"):
        name = base[1:-1].replace("/", ".")
    else:
        raise ClassFormatError(f"Bad field descriptor: {descriptor!r}")
    return name + "[]" * dims


def modifier_names(flags: int) -> FrozenSet[str]:
    return frozenset(word for bit, word in FIELD_MODIFIERS if flags & bit)


class _Reader:
    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def take(self, n: int) -> bytes:
        end = self.pos + n
        if end > len(self.data):
            raise ClassFormatError(f"Truncated class file at offset {self.pos}")
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def u1(self) -> int:
        return self.take(1)[0]

    def u2(self) -> int:
        return struct.unpack(">H", self.take(2))[0]

    def u4(self) -> int:
        return struct.unpack(">I", self.take(4))[0]


class _Pool:
    def __init__(self, count: int):
        self.count = count
        self.utf8: Dict[int, str] = {}
        self.classes: Dict[int, int] = {}

    def text(self, index: int) -> str:
        try:
            return self.utf8[index]
        except KeyError:
            raise ClassFormatError(f"Constant #{index} is not a Utf8 entry") from None

    def class_name(self, index: int) -> str:
        try:
            return self.text(self.classes[index]).replace("/", ".")
        except KeyError:
            raise ClassFormatError(f"Constant #{index} is not a Class entry") from None


def _read_pool(r: _Reader) -> _Pool:
    pool = _Pool(r.u2())
    i = 1
    while i < pool.count:
        tag = r.u1()
        if tag == _TAG_UTF8:
            pool.utf8[i] = decode_mutf8(r.take(r.u2()))
        elif tag == _TAG_CLASS:
            pool.classes[i] = r.u2()
        elif tag in _CP_SIZES:
            r.take(_CP_SIZES[tag])
        else:
            raise ClassFormatError(f"Unknown constant pool tag {tag} at #{i}")
        # Long and Double take two slots.
        i += 2 if tag in (5, 6) else 1
    return pool


def _skip_attributes(r: _Reader) -> None:
    for _ in range(r.u2()):
        r.u2()
        r.take(r.u4())


def parse_class(data: bytes) -> ClassInfo:
    r = _Reader(data)
    if r.u4() != MAGIC:
        raise ClassFormatError("Not a class file (bad magic)")
    r.u2()  # minor
    r.u2()  # major
    pool = _read_pool(r)

    access = r.u2()
    this_index = r.u2()
    name = pool.class_name(this_index)
    super_index = r.u2()
    super_name = pool.class_name(super_index) if super_index else None
    interfaces = tuple(pool.class_name(r.u2()) for _ in range(r.u2()))

    fields: Dict[str, FieldInfo] = {}
    for _ in range(r.u2()):
        flags = r.u2()
        fname = pool.text(r.u2())
        desc = pool.text(r.u2())
        _skip_attributes(r)
        fields[fname] = FieldInfo(declared_type=descriptor_to_type(desc), modifiers=modifier_names(flags))

    for _ in range(r.u2()):  # methods
        r.take(6)
        _skip_attributes(r)

    simple_name = name.rsplit(".", 1)[-1]
    for _ in range(r.u2()):
        attr_name = pool.text(r.u2())
        body = r.take(r.u4())
        if attr_name != "InnerClasses":
            continue
        for inner_index, inner_name, inner_flags in _inner_classes(body):
            if pool.class_name(inner_index) == name:
                simple_name = pool.text(inner_name) if inner_name else ""
                access = inner_flags
    return ClassInfo(
        name=name,
        access_flags=access,
        super_name=super_name,
        interfaces=interfaces,
        fields=fields,
        simple_name=simple_name,
    )


def _inner_classes(body: bytes) -> List[Tuple[int, int, int]]:
    r = _Reader(body)
    out = []
    for _ in range(r.u2()):
        inner_index = r.u2()
        r.u2()  # outer class
        inner_name = r.u2()
        out.append((inner_index, inner_name, r.u2()))
    return out
