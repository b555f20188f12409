from __future__ import annotations
import copy, os, yaml
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

CONFIG_NAME = ".classnames.yml"

HEADER = "\n".join([
    "#",
    "# Licensed to the Apache Software Foundation (ASF) under one or more",
    "# contributor license agreements.  See the NOTICE file distributed with",
    "# this work for additional information regarding copyright ownership.",
    "# The ASF licenses this file to You under the Apache License, Version 2.0",
    "# (the \"License\"); you may not use this file except in compliance with",
    "# the License.  You may obtain a copy of the License at",
    "#",
    "#      http://www.apache.org/licenses/LICENSE-2.0",
    "#",
    "# Unless required by applicable law or agreed to in writing, software",
    "# distributed under the License is distributed on an \"AS IS\" BASIS,",
    "# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.",
    "# See the License for the specific language governing permissions and",
    "# limitations under the License.",
    "#",
])

DEFAULT_CONFIG = {
    # First entry is the product namespace; only it is held to the field contract.
    "packages": [
        "org.apache.ignite",
        "org.jdk8.backport",
        "org.pcollections",
        "com.romix.scala",
    ],
    "classpath": [],
    "base_path": "modules/core/src/main/resources",
    "file_path": "META-INF/classnames.properties",
    "header": HEADER,
    "capabilities": {
        "serializable": "java.io.Serializable",
        "excluded": [
            "org.apache.ignite.lang.IgniteFuture",
            "org.apache.ignite.internal.IgniteInternalFuture",
            "org.apache.ignite.internal.client.GridClientFuture",
        ],
    },
    "contract": {"field": "serialVersionUID", "type": "long"},
    # Supertypes of JDK classes, which are never on the scanned classpath.
    # An empty list marks a known root with nothing further to resolve.
    "platform_hierarchy": {
        "java.lang.Object": [],
        "java.io.Serializable": [],
        "java.lang.Cloneable": [],
        "java.lang.Comparable": [],
        "java.lang.Runnable": [],
        "java.lang.CharSequence": [],
        "java.lang.AutoCloseable": [],
        "java.io.Closeable": ["java.lang.AutoCloseable"],
        "java.util.Collection": [],
        "java.util.List": ["java.util.Collection"],
        "java.util.Set": ["java.util.Collection"],
        "java.util.Queue": ["java.util.Collection"],
        "java.util.Deque": ["java.util.Queue"],
        "java.util.Map": [],
        "java.util.EventListener": [],
        "java.util.RandomAccess": [],
        "java.util.concurrent.Callable": [],
        "java.util.concurrent.Future": [],
        "java.util.concurrent.ConcurrentMap": ["java.util.Map"],
        "java.io.Externalizable": ["java.io.Serializable"],
        "java.lang.Enum": ["java.io.Serializable", "java.lang.Comparable"],
        "java.lang.Number": ["java.io.Serializable"],
        "java.lang.Throwable": ["java.io.Serializable"],
        "java.lang.Exception": ["java.lang.Throwable"],
        "java.lang.Error": ["java.lang.Throwable"],
        "java.lang.RuntimeException": ["java.lang.Exception"],
        "java.lang.IllegalArgumentException": ["java.lang.RuntimeException"],
        "java.lang.IllegalStateException": ["java.lang.RuntimeException"],
        "java.lang.UnsupportedOperationException": ["java.lang.RuntimeException"],
        "java.io.IOException": ["java.lang.Exception"],
        "java.util.EventObject": ["java.io.Serializable"],
        "java.util.ArrayList": ["java.util.List", "java.io.Serializable"],
        "java.util.LinkedList": ["java.util.List", "java.io.Serializable"],
        "java.util.HashMap": ["java.util.Map", "java.io.Serializable"],
        "java.util.LinkedHashMap": ["java.util.HashMap"],
        "java.util.TreeMap": ["java.util.Map", "java.io.Serializable"],
        "java.util.HashSet": ["java.util.Set", "java.io.Serializable"],
        "java.util.LinkedHashSet": ["java.util.HashSet"],
        "java.util.TreeSet": ["java.util.Set", "java.io.Serializable"],
        "java.util.concurrent.ConcurrentHashMap": ["java.util.Map", "java.io.Serializable"],
        "java.lang.NullPointerException": ["java.lang.RuntimeException"],
        "java.lang.IndexOutOfBoundsException": ["java.lang.RuntimeException"],
        "java.lang.ClassCastException": ["java.lang.RuntimeException"],
        "java.lang.ArithmeticException": ["java.lang.RuntimeException"],
        "java.lang.SecurityException": ["java.lang.RuntimeException"],
        "java.lang.InterruptedException": ["java.lang.Exception"],
        "java.lang.CloneNotSupportedException": ["java.lang.Exception"],
        "java.lang.ReflectiveOperationException": ["java.lang.Exception"],
        "java.lang.ClassNotFoundException": ["java.lang.ReflectiveOperationException"],
        "java.lang.AssertionError": ["java.lang.Error"],
        "java.lang.OutOfMemoryError": ["java.lang.Error"],
        "java.lang.String": ["java.io.Serializable", "java.lang.Comparable", "java.lang.CharSequence"],
        "java.lang.Boolean": ["java.io.Serializable", "java.lang.Comparable"],
        "java.lang.Character": ["java.io.Serializable", "java.lang.Comparable"],
        "java.lang.Integer": ["java.lang.Number", "java.lang.Comparable"],
        "java.lang.Long": ["java.lang.Number", "java.lang.Comparable"],
        "java.io.UncheckedIOException": ["java.lang.RuntimeException"],
        "java.io.FileNotFoundException": ["java.io.IOException"],
        "java.io.ObjectStreamException": ["java.io.IOException"],
        "java.util.NoSuchElementException": ["java.lang.RuntimeException"],
        "java.util.ConcurrentModificationException": ["java.lang.RuntimeException"],
        "java.util.concurrent.ExecutionException": ["java.lang.Exception"],
        "java.util.concurrent.TimeoutException": ["java.lang.Exception"],
        "java.util.concurrent.CancellationException": ["java.lang.IllegalStateException"],
        "java.util.concurrent.RejectedExecutionException": ["java.lang.RuntimeException"],
        "java.util.Date": ["java.io.Serializable", "java.lang.Cloneable", "java.lang.Comparable"],
        "java.util.UUID": ["java.io.Serializable", "java.lang.Comparable"],
        "java.util.BitSet": ["java.io.Serializable", "java.lang.Cloneable"],
        "java.util.Hashtable": ["java.util.Map", "java.io.Serializable"],
        "java.util.Properties": ["java.util.Hashtable"],
        "java.util.Vector": ["java.util.List", "java.io.Serializable"],
        "java.util.ArrayDeque": ["java.util.Deque", "java.io.Serializable"],
        "java.util.PriorityQueue": ["java.util.Queue", "java.io.Serializable"],
        "java.util.IdentityHashMap": ["java.util.Map", "java.io.Serializable"],
        "java.util.EnumMap": ["java.util.Map", "java.io.Serializable"],
        "java.util.concurrent.ConcurrentSkipListMap": ["java.util.concurrent.ConcurrentMap", "java.io.Serializable"],
        "java.util.concurrent.ConcurrentSkipListSet": ["java.util.Set", "java.io.Serializable"],
        "java.util.concurrent.ConcurrentLinkedQueue": ["java.util.Queue", "java.io.Serializable"],
        "java.util.concurrent.ConcurrentLinkedDeque": ["java.util.Deque", "java.io.Serializable"],
        "java.util.concurrent.CopyOnWriteArrayList": ["java.util.List", "java.io.Serializable"],
        "java.util.concurrent.LinkedBlockingQueue": ["java.util.Queue", "java.io.Serializable"],
        "java.util.concurrent.ArrayBlockingQueue": ["java.util.Queue", "java.io.Serializable"],
        "java.util.concurrent.atomic.AtomicLong": ["java.lang.Number"],
        "java.util.concurrent.atomic.AtomicInteger": ["java.lang.Number"],
        "java.util.concurrent.atomic.AtomicBoolean": ["java.io.Serializable"],
        "java.util.concurrent.atomic.AtomicReference": ["java.io.Serializable"],
        "java.util.concurrent.atomic.AtomicLongArray": ["java.io.Serializable"],
        "java.util.concurrent.atomic.AtomicIntegerArray": ["java.io.Serializable"],
        "java.util.concurrent.atomic.AtomicReferenceArray": ["java.io.Serializable"],
        "java.util.concurrent.locks.ReentrantLock": ["java.io.Serializable"],
        "java.util.concurrent.locks.ReentrantReadWriteLock": ["java.io.Serializable"],
        "java.math.BigInteger": ["java.lang.Number", "java.lang.Comparable"],
        "java.math.BigDecimal": ["java.lang.Number", "java.lang.Comparable"],
        "java.net.InetAddress": ["java.io.Serializable"],
        "java.net.InetSocketAddress": ["java.net.SocketAddress"],
        "java.net.SocketAddress": ["java.io.Serializable"],
        "java.net.URI": ["java.io.Serializable", "java.lang.Comparable"],
        "java.net.URL": ["java.io.Serializable"],
    },
    "exclude": ["META-INF/versions/**"],
}


class ConfigError(ValueError):
    """Raised when a config file cannot be read or has the wrong shape."""


@dataclass
class Config:
    data: Dict[str, Any] = field(default_factory=lambda: copy.deepcopy(DEFAULT_CONFIG))

    @property
    def packages(self) -> List[str]:
        return list(self.data.get("packages") or [])

    @property
    def product_namespace(self) -> Optional[str]:
        pkgs = self.packages
        return pkgs[0] if pkgs else None

    @property
    def exclude(self) -> List[str]:
        return list(self.data.get("exclude") or [])

    @property
    def platform_hierarchy(self) -> Dict[str, List[str]]:
        return dict(self.data.get("platform_hierarchy") or {})


def merge(base: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
    for k, v in user.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            base[k].update(v)
        else:
            base[k] = v
    return base


def load_config(repo_root: str, path: Optional[str] = None) -> Config:
    if path is None:
        path = os.path.join(repo_root, CONFIG_NAME)
        if not os.path.exists(path):
            return Config()
    merged = copy.deepcopy(DEFAULT_CONFIG)
    try:
        with open(path, "r", encoding="utf-8") as f:
            user = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e
    if not isinstance(user, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(user).__name__}")
    return Config(merge(merged, user))


def split_classpath(entries: List[str]) -> List[str]:
    """Flatten ``os.pathsep``-joined entries, dropping empty ones."""
    roots: List[str] = []
    for entry in entries:
        roots.extend(p for p in str(entry).split(os.pathsep) if p)
    return roots


def resolve_classpath(cfg: Config, cli_entries: Optional[List[str]] = None) -> List[str]:
    if cli_entries:
        return split_classpath(cli_entries)
    configured = cfg.data.get("classpath") or []
    if isinstance(configured, str):
        configured = [configured]
    if configured:
        return split_classpath(configured)
    return split_classpath([os.environ.get("CLASSPATH", "")])
