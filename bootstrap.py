#!/usr/bin/env python3
"""
Dotfiles bootstrap.

Run from the root of the dotfiles checkout:

    ./bootstrap.py              # Install starship, edit shell profile, link configs
    ./bootstrap.py --dry-run    # Show what would change
"""

import os
import sys

# Add current directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dotfiles_bootstrap.cli import run  # noqa: E402

if __name__ == "__main__":
    run()
