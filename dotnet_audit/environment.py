"""
Environment detection.

Collects the read-only ambient values the audit depends on:
- Machine name (used in ticket titles)
- Program-files root (where the shared .NET runtimes live)
- Temporary directory (where the installer script is downloaded)
"""

from __future__ import annotations

import os
import platform
import socket
import tempfile
from dataclasses import dataclass

from .common import vlog


WINDOWS_PROGRAM_FILES = r"C:\Program Files"
POSIX_PROGRAM_FILES = "/usr/share"
RUNTIME_FAMILY = "Microsoft.NETCore.App"


@dataclass(frozen=True)
class Environment:
    """
    Detected environment information.

    Attributes:
        machine_name: Host name reported in tickets
        program_files: Root directory containing the ``dotnet`` install
        temp_dir: Directory for downloaded files
        platform: Operating system name as reported by ``platform.system()``
    """
    machine_name: str
    program_files: str
    temp_dir: str
    platform: str = "Windows"

    @property
    def is_windows(self) -> bool:
        return self.platform == "Windows"

    @property
    def dotnet_root(self) -> str:
        return os.path.join(self.program_files, "dotnet")

    @property
    def shared_runtime_dir(self) -> str:
        return os.path.join(self.dotnet_root, "shared", RUNTIME_FAMILY)

    def __str__(self) -> str:
        return f"{self.machine_name} ({self.platform}, dotnet root: {self.dotnet_root})"


def detect_machine_name() -> str:
    """Return the machine name, preferring the Windows COMPUTERNAME variable."""
    return os.environ.get("COMPUTERNAME") or socket.gethostname() or "unknown"


def detect_environment(verbose: bool = False) -> Environment:
    """
    Detect the ambient values for this process.

    Args:
        verbose: Enable verbose logging

    Returns:
        Environment object
    """
    system = platform.system()
    default_root = WINDOWS_PROGRAM_FILES if system == "Windows" else POSIX_PROGRAM_FILES
    env = Environment(
        machine_name=detect_machine_name(),
        program_files=os.environ.get("ProgramFiles") or default_root,
        temp_dir=tempfile.gettempdir(),
        platform=system,
    )
    vlog(f"Environment detected: {env}", verbose)
    return env
