"""whatschanging Command Line Interface.

Provides CLI commands for:
- Comparing two images and rendering them next to their diff
- Comparing two directories of images file by file

Usage:
    python -m whatschanging.cli --help
    python -m whatschanging.cli compare before.png after.png -o diff.png

Or via the installed entry point:
    whatschanging --help
"""

from .main import main

__all__ = ["main"]
