"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .api.routes import games, levels

# Get settings
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%H:%M:%S'
)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Stacked tile-matching game engine: level generation, occlusion and game sessions",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(levels.router)
app.include_router(games.router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "StackMatch Tile Engine API",
        "endpoints": {
            "tile_types": "/api/levels/tile-types",
            "generate": "/api/levels/generate",
            "resolve": "/api/levels/resolve",
            "simulate": "/api/levels/simulate",
            "games": "/api/games",
            "game": "/api/games/{session_id}",
            "docs": "/docs",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


if __name__ == "__main__":
    import uvicorn

    # Sessions live in process memory, so a single worker only
    uvicorn.run(
        "stackmatch.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
