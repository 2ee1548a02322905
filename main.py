#!/usr/bin/env python3
"""
Rig Retarget - Main Entry Point

Maps an imported rig onto the reference skeleton and applies the configured
chain corrections.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from rigretarget.cli import main


if __name__ == "__main__":
    sys.exit(main())
