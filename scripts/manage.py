#!/usr/bin/env python3
"""
Owner CLI runner. See cabinbook/cli.py for commands and environment variables.

Usage (from project root):
    python scripts/manage.py [command] [args...]
"""

import asyncio
import logging
import os
import sys

# Allow running as `python scripts/manage.py` from project root.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from cabinbook.cli import main

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s  %(levelname)-7s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except (KeyboardInterrupt, EOFError):
        print("\nCancelled.")
        sys.exit(130)
