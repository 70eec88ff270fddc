"""Data models package.

This package contains tile data models, constants, and API schemas.
"""
from .tile import (
    TileType,
    LevelTier,
    LayoutArchetype,
    GamePhase,
    Rank,
    Tile,
    PowerUps,
    GeneratedLevel,
    ScoreReport,
    SimulationResult,
    TILE_TYPES,
    DOCK_CAPACITY,
)
from .schemas import (
    TileModel,
    GenerateLevelRequest,
    GenerateLevelResponse,
    ResolveRequest,
    ResolveResponse,
    SimulateRequest,
    SimulateResponse,
    StartGameRequest,
    SelectTileRequest,
    GameStateResponse,
    MoveResponse,
    ErrorResponse,
)

__all__ = [
    # Tile models
    "TileType",
    "LevelTier",
    "LayoutArchetype",
    "GamePhase",
    "Rank",
    "Tile",
    "PowerUps",
    "GeneratedLevel",
    "ScoreReport",
    "SimulationResult",
    "TILE_TYPES",
    "DOCK_CAPACITY",
    # API schemas
    "TileModel",
    "GenerateLevelRequest",
    "GenerateLevelResponse",
    "ResolveRequest",
    "ResolveResponse",
    "SimulateRequest",
    "SimulateResponse",
    "StartGameRequest",
    "SelectTileRequest",
    "GameStateResponse",
    "MoveResponse",
    "ErrorResponse",
]
