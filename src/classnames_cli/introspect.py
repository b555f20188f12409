from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional, Protocol, Set, Tuple

from .archive import ArchiveReader
from .classfile import ClassInfo, FieldInfo, TypeKind, parse_class
from .walker import ARCHIVED, Candidate, exclude_spec, walk

_LOG = logging.getLogger(__name__)


class TypeNotFoundError(LookupError):
    """Raised when a type is not defined anywhere on the classpath."""


class TypeIntrospector(Protocol):
    def kind_of(self, name: str) -> TypeKind: ...

    def is_abstract(self, name: str) -> bool: ...

    def simple_name(self, name: str) -> str: ...

    def implements(self, name: str, capability: str) -> bool: ...

    def field_info(self, name: str, field: str) -> Optional[FieldInfo]: ...


class ClasspathIntrospector:
    """Answers type queries by reading class files from the classpath.

    The first root that defines a name wins. Archives opened for reading
    stay open until ``close()``; use the introspector as a context manager.
    Supertypes that are not on the classpath (JDK types) are looked up in
    ``platform_hierarchy``.
    """

    def __init__(
        self,
        roots: Iterable[str],
        platform_hierarchy: Optional[Dict[str, List[str]]] = None,
        exclude: Optional[List[str]] = None,
    ):
        self.roots = list(roots)
        self.platform_hierarchy = dict(platform_hierarchy or {})
        self._exclude = exclude_spec(exclude)
        self._index: Optional[Dict[str, Candidate]] = None
        self._archives: Dict[str, ArchiveReader] = {}
        self._classes: Dict[str, ClassInfo] = {}
        self._implements: Dict[Tuple[str, str], bool] = {}
        self.unresolved: Set[str] = set()

    def __enter__(self) -> "ClasspathIntrospector":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        archives, self._archives = self._archives, {}
        for reader in archives.values():
            reader.close()

    def _build_index(self) -> Dict[str, Candidate]:
        if self._index is None:
            index: Dict[str, Candidate] = {}
            for root in self.roots:
                for cand in walk(root, self._exclude):
                    index.setdefault(cand.name, cand)
            _LOG.debug("Indexed %d classes on %d classpath roots", len(index), len(self.roots))
            self._index = index
        return self._index

    def _read(self, cand: Candidate) -> bytes:
        if cand.origin == ARCHIVED:
            reader = self._archives.get(cand.source)
            if reader is None:
                reader = ArchiveReader(cand.source).open()
                self._archives[cand.source] = reader
            return reader.read(cand.entry)
        with open(cand.source, "rb") as f:
            return f.read()

    def find(self, name: str) -> Optional[ClassInfo]:
        info = self._classes.get(name)
        if info is None:
            cand = self._build_index().get(name)
            if cand is None:
                return None
            info = parse_class(self._read(cand))
            self._classes[name] = info
        return info

    def describe(self, name: str) -> ClassInfo:
        info = self.find(name)
        if info is None:
            raise TypeNotFoundError(f"Class not found on classpath: {name}")
        return info

    def kind_of(self, name: str) -> TypeKind:
        return self.describe(name).kind

    def is_abstract(self, name: str) -> bool:
        return self.describe(name).is_abstract

    def simple_name(self, name: str) -> str:
        return self.describe(name).simple_name

    def field_info(self, name: str, field: str) -> Optional[FieldInfo]:
        return self.describe(name).get_field(field)

    def supertypes(self, name: str) -> List[str]:
        info = self.find(name)
        if info is not None:
            sups = [info.super_name] if info.super_name else []
            return sups + list(info.interfaces)
        if name in self.platform_hierarchy:
            return list(self.platform_hierarchy[name])
        if name not in self.unresolved:
            self.unresolved.add(name)
            _LOG.warning(
                "Cannot resolve supertype %s: not on the classpath or in platform_hierarchy; "
                "classes extending it may be missing from the manifest", name,
            )
        return []

    def implements(self, name: str, capability: str) -> bool:
        key = (name, capability)
        if key not in self._implements:
            self.describe(name)
            self._implements[key] = self._search(name, capability)
        return self._implements[key]

    def _search(self, name: str, capability: str) -> bool:
        seen = set()
        stack = [name]
        while stack:
            cur = stack.pop()
            if cur == capability:
                return True
            if cur in seen:
                continue
            seen.add(cur)
            stack.extend(self.supertypes(cur))
        return False
