#!/usr/bin/env python3
"""
Explodomatica - CLI Entry Point

Usage:
    python main.py boom.wav
    python main.py boom.wav --duration 2.5 --layers 6 --seed 42
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from explodomatica.cli import main


if __name__ == "__main__":
    sys.exit(main())
