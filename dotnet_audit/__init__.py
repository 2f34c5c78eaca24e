"""
dotnet-audit - .NET runtime inventory and end-of-support tracking.

Core Modules:
- Detection: installed versions from the registry and the shared runtime directory
- Classification: end-of-support reference table and classifier
- Reporting: CSV report and console rendering
- Actions: work item creation and installer execution
- Foundation: environment detection, config, logging
"""

__version__ = "1.0.0"
__author__ = "dotnet-audit Contributors"

VERSION = __version__

# Detection and classification
from .detection import (
    VersionRecord,
    VersionSource,
    FrameworkRegistrySource,
    SharedRuntimeSource,
    default_sources,
    scan,
)
from .eol import (
    EosEntry,
    EolClassifier,
    EOL_TABLE,
    UNKNOWN_VERSION_IS_EOL,
    build_reference_table,
    is_eol,
    filter_eol,
)

# Reporting
from .report import write_csv, get_report_path
from .render import render_records, print_summary

# Actions
from .tickets import (
    TicketRequest,
    TicketError,
    ValidationError,
    build_ticket,
    create_ticket,
)
from .installer import InstallResult, InstallError, install_latest, is_permission_error

# Foundation
from .environment import Environment, detect_environment
from .config import Config, TicketSettings, load_config, load_config_file
from .logging_config import setup_logging, get_logger

__all__ = [
    "__version__",
    "VERSION",
    # Detection and classification
    "VersionRecord",
    "VersionSource",
    "FrameworkRegistrySource",
    "SharedRuntimeSource",
    "default_sources",
    "scan",
    "EosEntry",
    "EolClassifier",
    "EOL_TABLE",
    "UNKNOWN_VERSION_IS_EOL",
    "build_reference_table",
    "is_eol",
    "filter_eol",
    # Reporting
    "write_csv",
    "get_report_path",
    "render_records",
    "print_summary",
    # Actions
    "TicketRequest",
    "TicketError",
    "ValidationError",
    "build_ticket",
    "create_ticket",
    "InstallResult",
    "InstallError",
    "install_latest",
    "is_permission_error",
    # Foundation
    "Environment",
    "detect_environment",
    "Config",
    "TicketSettings",
    "load_config",
    "load_config_file",
    "setup_logging",
    "get_logger",
]
