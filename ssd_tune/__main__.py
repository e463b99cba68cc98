"""
Entry point for running ssd_tune as a module.

Usage:
    sudo python -m ssd_tune [--dry-run] [DEVICE ...]
"""

from .cli import main

if __name__ == "__main__":
    main()
