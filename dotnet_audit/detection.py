"""
Local .NET runtime detection.

Two independent sources contribute version records:
- the .NET Framework setup keys in the Windows registry
- the shared runtime directory of .NET (Core)

A source that cannot be read contributes nothing instead of failing the scan.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Iterator, Sequence

try:
    import winreg
except ImportError:  # Not on Windows: the registry source contributes nothing
    winreg = None

from .environment import RUNTIME_FAMILY, Environment, detect_environment

logger = logging.getLogger(__name__)

FRAMEWORK_REGISTRY_PATH = r"SOFTWARE\Microsoft\NET Framework Setup\NDP"
FRAMEWORK_PREFIX = "Framework: "
CORE_PREFIX = "Core: "


@dataclass(frozen=True)
class VersionRecord:
    """
    One installed runtime version.

    Attributes:
        name: Category tag plus identifier, e.g. "Framework: v4.0"
        version: Dotted version string, e.g. "6.0.28"
    """
    name: str
    version: str

    def to_row(self) -> tuple[str, str]:
        return (self.name, self.version)


class VersionSource:
    """Base class for anything that can enumerate installed versions."""

    label = "source"

    def collect(self) -> list[VersionRecord]:
        raise NotImplementedError


class FrameworkRegistrySource(VersionSource):
    """Reads .NET Framework versions from the NDP setup registry keys."""

    label = "registry"

    def __init__(self, registry: Any = None, path: str = FRAMEWORK_REGISTRY_PATH):
        self.registry = winreg if registry is None else registry
        self.path = path

    def collect(self) -> list[VersionRecord]:
        if self.registry is None:
            logger.debug("Registry not available on this platform, skipping .NET Framework scan")
            return []

        try:
            root = self.registry.OpenKey(self.registry.HKEY_LOCAL_MACHINE, self.path)
        except OSError as e:
            logger.debug(f"Cannot open HKLM\\{self.path}: {e}")
            return []

        try:
            return list(self._walk(root))
        finally:
            self.registry.CloseKey(root)

    def _walk(self, key: Any) -> Iterator[VersionRecord]:
        """Yield records for every sub-key below ``key``, depth first."""
        index = 0
        while True:
            try:
                subkey_name = self.registry.EnumKey(key, index)
            except OSError:
                # EnumKey signals the end of the enumeration with OSError
                break
            index += 1

            try:
                subkey = self.registry.OpenKey(key, subkey_name)
            except OSError as e:
                logger.debug(f"Skipping unreadable key {subkey_name}: {e}")
                continue

            try:
                version = self._read_version(subkey)
                if version:
                    yield VersionRecord(FRAMEWORK_PREFIX + subkey_name, version)
                yield from self._walk(subkey)
            finally:
                self.registry.CloseKey(subkey)

    def _read_version(self, key: Any) -> str | None:
        try:
            value, _ = self.registry.QueryValueEx(key, "Version")
        except OSError:
            return None
        return str(value) if value else None


class SharedRuntimeSource(VersionSource):
    """Reads .NET (Core) versions from the shared runtime directory names."""

    label = "filesystem"

    def __init__(self, runtime_dir: str, family: str = RUNTIME_FAMILY):
        self.runtime_dir = runtime_dir
        self.family = family

    def collect(self) -> list[VersionRecord]:
        if not os.path.isdir(self.runtime_dir):
            logger.debug(f"Shared runtime directory not found: {self.runtime_dir}")
            return []

        try:
            with os.scandir(self.runtime_dir) as entries:
                names = [entry.name for entry in entries if entry.is_dir()]
        except OSError as e:
            logger.debug(f"Cannot list {self.runtime_dir}: {e}")
            return []

        return [VersionRecord(CORE_PREFIX + self.family, name) for name in names]


def default_sources(env: Environment | None = None) -> list[VersionSource]:
    """Framework registry first, then the shared runtime directory."""
    if env is None:
        env = detect_environment()
    return [
        FrameworkRegistrySource(),
        SharedRuntimeSource(env.shared_runtime_dir),
    ]


def scan(sources: Sequence[VersionSource] | None = None) -> list[VersionRecord]:
    """
    Enumerate installed .NET versions.

    Args:
        sources: Sources to read in order (defaults to registry then filesystem)

    Returns:
        Concatenated records, in source order and enumeration order within each
    """
    if sources is None:
        sources = default_sources()

    records: list[VersionRecord] = []
    for source in sources:
        found = source.collect()
        logger.debug(f"{source.label}: {len(found)} version(s)")
        records.extend(found)
    return records
