"""
Installation of the current .NET release.

Downloads the official dotnet-install.ps1 script and runs it through
PowerShell. When the target directory is not writable, the operator may
supply one replacement directory.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from packaging.version import InvalidVersion, Version

from .config import Config
from .environment import RUNTIME_FAMILY, Environment, detect_environment

logger = logging.getLogger(__name__)

INSTALL_SCRIPT_URL = "https://dot.net/v1/dotnet-install.ps1"
INSTALL_SCRIPT_NAME = "dotnet-install.ps1"

PERMISSION_INDICATORS = (
    "access to the path",
    "access is denied",
    "permission denied",
    "unauthorizedaccess",
    "requires elevation",
    "administrator privileges",
)


@dataclass(frozen=True)
class ScriptResult:
    """
    Result of running the install script once.

    Attributes:
        command: Command line that was executed
        success: Whether the process exited with status 0
        stdout: Standard output
        stderr: Standard error
        exit_code: Process exit code (-1 if it never ran)
        duration_seconds: Wall time of the run
        error_message: Human-readable error message if failed
    """
    command: tuple[str, ...]
    success: bool
    stdout: str
    stderr: str
    exit_code: int
    duration_seconds: float
    error_message: str | None = None


@dataclass(frozen=True)
class InstallResult:
    """
    Outcome of an install request.

    Attributes:
        install_dir: Directory the runtime was (or would have been) installed to
        channel: Release channel requested
        success: Whether installation succeeded
        installed_version: Highest runtime version found after installing
        duration_seconds: Total time including download
        relocated: Whether the operator supplied a replacement directory
        error_message: Human-readable error message if failed
    """
    install_dir: str
    channel: str
    success: bool
    installed_version: str | None = None
    duration_seconds: float = 0.0
    relocated: bool = False
    error_message: str | None = None


class InstallError(Exception):
    """
    Installation error.

    Attributes:
        message: Human-readable error message
    """
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def is_permission_error(message: str) -> bool:
    """Whether installer output points at a write-access problem."""
    lowered = message.lower()
    return any(indicator in lowered for indicator in PERMISSION_INDICATORS)


def download_script(
    dest_dir: str,
    url: str = INSTALL_SCRIPT_URL,
    timeout: int = 30,
) -> Path:
    """
    Download the install script into ``dest_dir``.

    Raises:
        InstallError: If the download fails
    """
    dest = Path(dest_dir) / INSTALL_SCRIPT_NAME
    logger.debug(f"Downloading {url} to {dest}")
    try:
        req = urllib.request.Request(url, headers={"User-Agent": "dotnet-audit/1.0"})
        with urllib.request.urlopen(req, timeout=timeout) as response:
            dest.write_bytes(response.read())
    except Exception as e:
        raise InstallError(f"Failed to download {url}: {e}") from e
    return dest


def default_powershell(env: Environment) -> str:
    return "powershell" if env.is_windows else "pwsh"


def build_install_command(
    script: Path,
    install_dir: str,
    channel: str,
    powershell: str = "powershell",
) -> list[str]:
    """Command line running the script without touching PATH."""
    return [
        powershell,
        "-NoProfile",
        "-ExecutionPolicy", "Bypass",
        "-File", str(script),
        "-InstallDir", install_dir,
        "-Channel", channel,
        "-NoPath",
    ]


def execute_script(command: list[str], timeout: int | None = None) -> ScriptResult:
    """
    Run the install command and capture its output.

    Returns:
        ScriptResult with execution outcome
    """
    start_time = time.time()
    logger.debug(f"Executing: {' '.join(command)}")

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return ScriptResult(
            command=tuple(command),
            success=False,
            stdout="",
            stderr="",
            exit_code=-1,
            duration_seconds=time.time() - start_time,
            error_message=f"Installer timed out after {timeout}s",
        )
    except FileNotFoundError:
        return ScriptResult(
            command=tuple(command),
            success=False,
            stdout="",
            stderr="",
            exit_code=-1,
            duration_seconds=time.time() - start_time,
            error_message=f"Command not found: {command[0]}",
        )
    except OSError as e:
        return ScriptResult(
            command=tuple(command),
            success=False,
            stdout="",
            stderr="",
            exit_code=-1,
            duration_seconds=time.time() - start_time,
            error_message=f"Cannot run {command[0]}: {e}",
        )

    success = result.returncode == 0
    error_msg = None
    if not success:
        error_msg = f"Installer failed with exit code {result.returncode}"
        detail = (result.stderr or result.stdout).strip()
        if detail:
            error_msg += f": {detail[:300]}"

    return ScriptResult(
        command=tuple(command),
        success=success,
        stdout=result.stdout,
        stderr=result.stderr,
        exit_code=result.returncode,
        duration_seconds=time.time() - start_time,
        error_message=error_msg,
    )


def detect_installed_version(install_dir: str) -> str | None:
    """Return the highest runtime version present below ``install_dir``."""
    runtime_dir = os.path.join(install_dir, "shared", RUNTIME_FAMILY)
    try:
        with os.scandir(runtime_dir) as entries:
            names = [entry.name for entry in entries if entry.is_dir()]
    except OSError:
        return None

    versions = []
    for name in names:
        try:
            versions.append((Version(name), name))
        except InvalidVersion:
            continue
    if not versions:
        return None
    return max(versions)[1]


def install_latest(
    install_dir: str | None = None,
    channel: str = "STS",
    *,
    prompt: Callable[[str], str] = input,
    config: Config | None = None,
    env: Environment | None = None,
    allow_relocation: bool = True,
) -> InstallResult:
    """
    Download and run the install script for ``channel``.

    On a permission failure the operator is asked once for a replacement
    directory; the retry with that directory does not ask again.

    Args:
        install_dir: Target directory (config or <program files>/dotnet if None)
        channel: Release channel ("STS", "LTS" or "X.Y")
        prompt: Function used to ask the operator for a directory
        config: Configuration (defaults if None)
        env: Environment (detected if None)
        allow_relocation: Whether a replacement directory may be requested

    Returns:
        InstallResult with the outcome
    """
    config = config or Config()
    env = env or detect_environment()
    install_dir = install_dir or config.install_dir or env.dotnet_root
    powershell = config.powershell or default_powershell(env)
    start_time = time.time()

    def failed(message: str) -> InstallResult:
        return InstallResult(
            install_dir=install_dir,
            channel=channel,
            success=False,
            duration_seconds=time.time() - start_time,
            error_message=message,
        )

    try:
        script = download_script(env.temp_dir, timeout=config.timeout_seconds)
    except InstallError as e:
        logger.error(e.message)
        return failed(e.message)

    try:
        command = build_install_command(script, install_dir, channel, powershell)
        result = execute_script(command)
    finally:
        script.unlink(missing_ok=True)

    if result.success:
        version = detect_installed_version(install_dir)
        logger.info(f"Installed .NET ({channel}) to {install_dir}: {version or 'version unknown'}")
        return InstallResult(
            install_dir=install_dir,
            channel=channel,
            success=True,
            installed_version=version,
            duration_seconds=time.time() - start_time,
        )

    output = "\n".join(part for part in (result.stderr, result.stdout, result.error_message) if part)
    if not is_permission_error(output):
        logger.error(result.error_message)
        return failed(result.error_message or "Installer failed")

    if not allow_relocation:
        logger.error(f"No write access to {install_dir}")
        return failed(f"No write access to {install_dir}; run elevated or choose another directory")

    answer = prompt(
        f"No write access to {install_dir}. "
        "Enter another install directory (leave blank to abort): "
    ).strip()
    if not answer:
        return failed("Installation aborted by operator")

    try:
        os.makedirs(answer, exist_ok=True)
    except OSError as e:
        logger.error(f"Cannot create {answer}: {e}")
        return failed(f"Cannot create {answer}: {e}")

    logger.info(f"Retrying installation in {answer}")
    retry = install_latest(
        answer,
        channel,
        prompt=prompt,
        config=config,
        env=env,
        allow_relocation=False,
    )
    return InstallResult(
        install_dir=retry.install_dir,
        channel=retry.channel,
        success=retry.success,
        installed_version=retry.installed_version,
        duration_seconds=time.time() - start_time,
        relocated=True,
        error_message=retry.error_message,
    )
