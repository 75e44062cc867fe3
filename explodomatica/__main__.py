"""
Entry point for running the generator as a module.

Usage:
    python -m explodomatica boom.wav [--verbose]
"""

import sys

from .cli import main

sys.exit(main())
