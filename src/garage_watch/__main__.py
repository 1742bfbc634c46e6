"""
Entry point for running the garage watcher as a module.

Usage:
    python -m garage_watch [--config FILE] [--once]
"""

from .cli import main

if __name__ == "__main__":
    main()
