"""
Configuration file parsing and management.

Configuration is optional and read-only: YAML files are merged from the
explicit DOTNET_AUDIT_CONFIG path, the project directory and the user config
directory. Nothing is ever written back.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Any

import yaml

from .common import vlog
from .eol import build_reference_table


# Configuration file locations (in priority order)
CONFIG_LOCATIONS = [
    ".dotnet-audit.yml",                                       # Project root (highest priority)
    ".dotnet-audit.yaml",
    os.path.expanduser("~/.config/dotnet-audit/config.yml"),  # User global
    os.path.expanduser("~/.config/dotnet-audit/config.yaml"),
]

DEFAULT_CSV_PATH = "dotnet_versions.csv"
DEFAULT_CHANNEL = "STS"
CHANNEL_RE = re.compile(r"^(STS|LTS|\d+\.\d+)$")


@dataclass(frozen=True)
class TicketSettings:
    """
    Settings for the work-tracking service.

    Attributes:
        service_host: Host suffix; the organization is prepended as a subdomain
        work_item_type: Work item type created for each ticket
        api_version: REST API version query parameter
    """
    service_host: str = "visualstudio.com"
    work_item_type: str = "User Story"
    api_version: str = "6.0"

    def __post_init__(self):
        if not self.service_host or "/" in self.service_host:
            raise ValueError(f"Invalid service_host: {self.service_host!r}")
        if not self.work_item_type:
            raise ValueError("work_item_type must not be empty")

    @staticmethod
    def from_dict(data: dict[str, Any]) -> TicketSettings:
        """Create TicketSettings from dictionary."""
        return TicketSettings(
            service_host=data.get("service_host", "visualstudio.com"),
            work_item_type=data.get("work_item_type", "User Story"),
            api_version=str(data.get("api_version", "6.0")),
        )


@dataclass(frozen=True)
class Config:
    """
    Complete configuration for dotnet-audit.

    Attributes:
        version: Config schema version
        csv_path: Default path of the CSV report
        install_dir: Default install directory (empty means <program files>/dotnet)
        channel: Default installer channel
        timeout_seconds: Timeout for HTTP requests
        powershell: PowerShell executable (empty means platform default)
        tickets: Work-tracking service settings
        eol_dates: Extra end-of-support entries, "X.Y" -> "YYYY-MM-DD"
        source: Path to the configuration file that was loaded
        explicit: Keys set by the configuration file, even to their default value
    """
    version: int = 1
    csv_path: str = DEFAULT_CSV_PATH
    install_dir: str = ""
    channel: str = DEFAULT_CHANNEL
    timeout_seconds: int = 30
    powershell: str = ""
    tickets: TicketSettings = field(default_factory=TicketSettings)
    eol_dates: dict[str, str] = field(default_factory=dict)
    source: str = ""
    explicit: frozenset[str] = field(default_factory=frozenset, compare=False)

    def __post_init__(self):
        """Validate config after initialization."""
        if self.version != 1:
            raise ValueError(f"Unsupported config version: {self.version}. Expected version 1")

        if not CHANNEL_RE.match(self.channel):
            raise ValueError(
                f"Invalid channel: {self.channel}. "
                "Must be 'STS', 'LTS' or a 'major.minor' release"
            )

        if self.timeout_seconds < 1 or self.timeout_seconds > 600:
            raise ValueError(
                f"Invalid timeout_seconds: {self.timeout_seconds}. "
                "Must be between 1 and 600"
            )

        for name in ("csv_path", "install_dir", "powershell"):
            if not isinstance(getattr(self, name), str):
                raise ValueError(f"{name} must be a string")

        if not self.csv_path:
            raise ValueError("csv_path must not be empty")

        build_reference_table(self.eol_dates)

    @staticmethod
    def from_dict(data: dict[str, Any], source: str = "") -> Config:
        """Create Config from dictionary."""
        eol_data = data.get("eol_dates") or {}
        if not isinstance(eol_data, dict):
            raise ValueError("eol_dates must be a mapping of 'X.Y' to dates")
        tickets_data = data.get("tickets") or {}
        if not isinstance(tickets_data, dict):
            raise ValueError("tickets must be a mapping")

        return Config(
            version=data.get("version", 1),
            csv_path=data.get("csv_path", DEFAULT_CSV_PATH),
            install_dir=data.get("install_dir", ""),
            channel=str(data.get("channel", DEFAULT_CHANNEL)).upper(),
            timeout_seconds=data.get("timeout_seconds", 30),
            powershell=data.get("powershell", ""),
            tickets=TicketSettings.from_dict(tickets_data),
            # YAML turns unquoted dates into date objects
            eol_dates={str(k): str(v) for k, v in eol_data.items()},
            source=source,
            explicit=frozenset(data),
        )

    def merge_with(self, other: Config) -> Config:
        """
        Merge this config with another, preferring values from this config.

        A value wins when this config sets it explicitly or when it differs
        from the default; otherwise the other config's value is used.

        Args:
            other: Other config to merge (lower priority)

        Returns:
            New merged Config object
        """
        defaults = Config()
        merged_eol = dict(other.eol_dates)
        merged_eol.update(self.eol_dates)

        def pick(name: str):
            mine = getattr(self, name)
            if name in self.explicit or mine != getattr(defaults, name):
                return mine
            return getattr(other, name)

        return Config(
            version=self.version,
            csv_path=pick("csv_path"),
            install_dir=pick("install_dir"),
            channel=pick("channel"),
            timeout_seconds=pick("timeout_seconds"),
            powershell=pick("powershell"),
            tickets=pick("tickets"),
            eol_dates=merged_eol,
            source=self.source or other.source,
            explicit=self.explicit | other.explicit,
        )


def _load_yaml(file_path: str) -> dict[str, Any] | None:
    """
    Load YAML configuration file.

    Returns:
        Parsed configuration dictionary, or None if the file is unreadable or invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return None


def load_config_file(file_path: str, verbose: bool = False) -> Config | None:
    """
    Load configuration from a single file.

    Args:
        file_path: Path to configuration file
        verbose: Enable verbose logging

    Returns:
        Config object, or None if file cannot be loaded
    """
    if not os.path.exists(file_path):
        return None

    vlog(f"Loading config from: {file_path}", verbose)

    data = _load_yaml(file_path)
    if data is None:
        vlog(f"Invalid config file: {file_path}", verbose)
        return None

    try:
        config = Config.from_dict(data, source=file_path)
        vlog(f"Loaded config successfully: {file_path}", verbose)
        return config
    except (ValueError, TypeError) as e:
        vlog(f"Config validation failed for {file_path}: {e}", verbose)
        return None


def load_config(
    custom_path: str | None = None,
    verbose: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Configuration precedence (highest to lowest):
    1. Custom path (argument, else DOTNET_AUDIT_CONFIG)
    2. Project .dotnet-audit.yml
    3. User ~/.config/dotnet-audit/config.yml
    4. Default configuration

    Raises:
        ValueError: If a custom path is given but cannot be loaded
    """
    configs: list[Config] = []

    custom_path = custom_path or os.environ.get("DOTNET_AUDIT_CONFIG")
    if custom_path:
        config = load_config_file(custom_path, verbose)
        if config is None:
            raise ValueError(f"Could not load config from specified path: {custom_path}")
        configs.append(config)
        vlog(f"Using custom config: {custom_path}", verbose)

    for location in CONFIG_LOCATIONS:
        config = load_config_file(location, verbose)
        if config is not None:
            configs.append(config)
            vlog(f"Found config at: {location}", verbose)

    if not configs:
        vlog("No config files found, using defaults", verbose)
        return Config()

    merged = configs[0]
    for config in configs[1:]:
        merged = merged.merge_with(config)

    vlog(f"Merged {len(configs)} config files", verbose)
    return merged
