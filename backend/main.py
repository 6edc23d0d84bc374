"""
Arkmap Backend API

FastAPI server providing:
- Map layout for the world editor (rooms + exits -> positioned floor slice)
- Effective layout configuration
"""

import os
import sys
import logging
from typing import Any, Optional
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Add map_engine to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'map_engine'))

from arkmap import InMemoryPaletteCache, LayoutConfig, MapLayout, RegionColors, WorldDataError, normalize_region_name

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# Region colours are shared by every request; entries are never replaced
palette_cache = InMemoryPaletteCache()
layout_config = LayoutConfig.from_env()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(f"Starting Arkmap Backend ({layout_config.to_dict()})")
    yield
    logger.info(f"Arkmap Backend shutdown ({len(palette_cache)} region palettes cached)")


app = FastAPI(
    title="Arkmap API",
    description="World map layout engine for the world editor",
    version="0.3.0",
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Pydantic models
class LayoutRequest(BaseModel):
    rooms: list[dict[str, Any]] = Field(default_factory=list)
    exits: list[dict[str, Any]] = Field(default_factory=list)
    floor: int = 0


class RegionColorsRequest(BaseModel):
    region: str
    border_color: str
    font_color: str
    accent_color: str


# REST API Endpoints
@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "Arkmap Backend",
        "timestamp": datetime.now().isoformat(),
    }


@app.get("/api/config")
async def get_config():
    """Get effective layout configuration."""
    return layout_config.to_dict()


@app.post("/api/layout")
async def create_layout(request: LayoutRequest):
    """Lay out a world and return the requested floor."""
    try:
        layout = MapLayout(
            request.rooms,
            request.exits,
            palette=palette_cache,
            config=layout_config,
        )
    except WorldDataError as e:
        raise HTTPException(status_code=422, detail=str(e))

    result = layout.floor(request.floor)
    return {
        **result.to_dict(),
        "stats": layout.get_stats(),
    }


@app.get("/api/regions/{region}/colors")
async def get_region_colors(region: str):
    """Get the cached colour scheme for a region."""
    colors: Optional[RegionColors] = palette_cache.get(normalize_region_name(region))
    if colors is None:
        raise HTTPException(status_code=404, detail="No colours cached for region")
    return colors.to_dict()


@app.post("/api/regions/colors")
async def set_region_colors(request: RegionColorsRequest):
    """Seed a region's colour scheme. Existing entries are kept."""
    stored = palette_cache.set_if_absent(
        normalize_region_name(request.region),
        RegionColors(
            border_color=request.border_color,
            font_color=request.font_color,
            accent_color=request.accent_color,
        ),
    )
    return stored.to_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=True,
    )
