#!/usr/bin/env python3
"""Ledger batch normalization tool.

This is the main entry point script for the ledger normalizer.
It wraps the package CLI for convenient execution.

Usage:
    python normalize_transactions.py -t transactions.json -a assets.json

For full documentation and options:
    python normalize_transactions.py --help
"""

import sys
from pathlib import Path

# Add src to path for development installs
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from ledger_normalizer.cli import main

if __name__ == "__main__":
    sys.exit(main())
