"""
boxgen — entry point.

Usage:
    python -m boxgen validate --params box.json
    python -m boxgen derive --preset "ESP32 Base"
    python -m boxgen generate --out outputs/box [--compile]
    python -m boxgen presets list
    python -m boxgen serve --port 3000
"""

import sys

from boxgen.app import main


if __name__ == "__main__":
    sys.exit(main())
