"""
Pytest configuration and fixtures for Arkmap service tests.
"""

import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Add project paths
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "map_engine"))
sys.path.insert(0, str(project_root / "backend"))

# Load environment variables from .env file
load_dotenv(project_root / ".env")

from fastapi.testclient import TestClient


@pytest.fixture
def backend():
    """Import the backend module with a fresh palette cache."""
    import main
    from arkmap import InMemoryPaletteCache

    main.palette_cache = InMemoryPaletteCache()
    return main


@pytest.fixture
def api_client(backend):
    """Create a test client with the app lifespan running."""
    with TestClient(backend.app) as client:
        yield client


@pytest.fixture
def sample_world():
    """A small two-floor world as the web editor posts it."""
    return {
        "rooms": [
            {"id": "gate", "name": "City Gate", "region_name": "Old Town"},
            {"id": "square", "name": "Square", "region_name": "Old Town"},
            {"id": "tower", "name": "Tower Top", "region_name": "Old Town"},
            {"id": "shrine", "name": "Shrine", "manualPosition": {"x": 900, "y": 40}},
        ],
        "exits": [
            {"fromRoomId": "gate", "toRoomId": "square", "verbString": "north"},
            {"fromRoomId": "square", "toRoomId": "gate", "verbString": "south"},
            {"fromRoomId": "square", "toRoomId": "tower", "verbString": "up"},
            {"fromRoomId": "shrine", "toRoomId": "square", "verbString": "w"},
        ],
    }
