#!/usr/bin/env python3
"""
Quick launcher for the Arkmap terminal map viewer.

Run from project root: python view_map.py world.json
Or: ./view_map.py world.json --all-floors (after chmod +x view_map.py)
"""

import sys
import os

# Add map_engine to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'map_engine'))

from arkmap.map_view import main

if __name__ == "__main__":
    sys.exit(main())
