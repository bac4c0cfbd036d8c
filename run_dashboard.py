#!/usr/bin/env python3
"""Ledger dashboard report builder.

This is the main entry point script for the ledger dashboard.
It wraps the package CLI for convenient execution.

Usage:
    python run_dashboard.py user123 --data-dir ./data --year 2025

For full documentation and options:
    python run_dashboard.py --help
"""

import sys
from pathlib import Path

# Add src to path for development installs
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from ledger_dashboard.cli import main

if __name__ == "__main__":
    sys.exit(main())
