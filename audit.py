#!/usr/bin/env python3
"""
dotnet-audit - .NET runtime inventory and end-of-support tracking.

Interactive menu; takes no arguments.

Environment:
    DOTNET_AUDIT_DEBUG=1       Verbose logging
    DOTNET_AUDIT_LOG_FILE      Also log to this file
    DOTNET_AUDIT_CONFIG        Explicit YAML config file
    DOTNET_AUDIT_CSV           Report path override
"""

import os
import sys

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dotnet_audit.cli import main


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)
