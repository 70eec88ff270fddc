"""Pydantic schemas for API request/response validation."""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from .tile import Tile, TileType


class TileModel(BaseModel):
    """A positioned tile as exchanged with clients."""
    id: str = Field(..., min_length=1, description="Tile identifier")
    type: TileType = Field(..., description="Tile kind")
    x: float = Field(..., description="Half-grid X position")
    y: float = Field(..., description="Half-grid Y position")
    z: int = Field(..., ge=0, description="Layer index (higher is on top)")
    is_clickable: bool = Field(default=True, description="Whether the tile is unobstructed")

    def to_tile(self) -> Tile:
        return Tile(id=self.id, type=self.type, x=self.x, y=self.y, z=self.z,
                    is_clickable=self.is_clickable)


class TileTypeInfo(BaseModel):
    """Display info for a tile kind."""
    type: str = Field(..., description="Tile kind")
    name: str = Field(..., description="Display name")
    icon: str = Field(..., description="Icon URL")


class TileTypeListResponse(BaseModel):
    """Response schema for the tile vocabulary."""
    types: List[TileTypeInfo] = Field(default=[], description="All tile kinds")


class GenerateLevelRequest(BaseModel):
    """Request schema for level generation."""
    level: int = Field(default=1, ge=0, description="Level selector (1 = tutorial)")
    seed: Optional[int] = Field(default=None, description="Seed for a reproducible layout")
    archetype: Optional[str] = Field(
        default=None,
        description="Force a layout (pyramid/twin_towers/cross/ring/chaos)",
    )


class GenerateLevelResponse(BaseModel):
    """Response schema for level generation."""
    level: int = Field(..., description="Level selector")
    tier: str = Field(..., description="tutorial or advanced")
    archetype: Optional[str] = Field(default=None, description="Layout archetype (advanced tier)")
    layer_count: int = Field(..., description="Configured layer count")
    overflow_count: int = Field(default=0, description="Tiles placed by overflow handling")
    tile_count: int = Field(..., description="Total tiles (multiple of 3)")
    type_counts: Dict[str, int] = Field(default={}, description="Tiles per kind")
    tiles: List[TileModel] = Field(default=[], description="Generated tiles")
    generation_time_ms: int = Field(default=0, description="Generation time in milliseconds")


class ResolveRequest(BaseModel):
    """Request schema for occlusion resolution."""
    tiles: List[TileModel] = Field(default=[], description="Tiles to resolve")


class ResolveResponse(BaseModel):
    """Response schema for occlusion resolution."""
    tiles: List[TileModel] = Field(default=[], description="Tiles with clickability")
    clickable_count: int = Field(default=0, description="Number of clickable tiles")


class SimulateRequest(BaseModel):
    """Request schema for autoplay simulation."""
    level: int = Field(default=2, ge=0, description="Level selector")
    iterations: int = Field(default=100, ge=1, le=2000, description="Number of games")
    strategy: str = Field(default="greedy", description="Bot strategy (random/greedy)")
    seed: Optional[int] = Field(default=None, description="Base seed")


class SimulateResponse(BaseModel):
    """Response schema for autoplay simulation."""
    clear_rate: float = Field(..., ge=0, le=1, description="Clear rate (0-1)")
    avg_moves: float = Field(..., description="Average moves used")
    min_moves: int = Field(..., description="Minimum moves used")
    max_moves: int = Field(..., description="Maximum moves used")
    avg_tiles_cleared: float = Field(..., description="Average tiles matched away")
    iterations: int = Field(..., description="Games played")
    strategy: str = Field(..., description="Bot strategy")
    archetypes: Dict[str, int] = Field(default={}, description="Games per layout archetype")


class StartGameRequest(BaseModel):
    """Request schema for starting or restarting a game."""
    level: int = Field(default=1, ge=0, description="Level selector (1 = tutorial)")


class SelectTileRequest(BaseModel):
    """Request schema for committing a tile to the dock."""
    tile_id: str = Field(..., min_length=1, description="Board tile id")


class PowerUpsModel(BaseModel):
    """Remaining power-up charges."""
    undo: int = Field(default=0, ge=0)
    remove: int = Field(default=0, ge=0)
    shuffle: int = Field(default=0, ge=0)


class ScoreModel(BaseModel):
    """Score screen summary."""
    percentage: int = Field(..., ge=0, le=100, description="Share of tiles cleared")
    time_spent: int = Field(..., ge=0, description="Seconds played")
    rank: str = Field(..., description="Rank title")


class GameStateResponse(BaseModel):
    """Everything a client needs to render a session."""
    session_id: str = Field(..., description="Session identifier")
    level: int = Field(..., description="Current level")
    phase: str = Field(..., description="menu/playing/won/lost")
    archetype: Optional[str] = Field(default=None, description="Layout archetype")
    board: List[TileModel] = Field(default=[], description="Board tiles")
    dock: List[TileModel] = Field(default=[], description="Dock tiles, oldest first")
    dock_capacity: int = Field(..., description="Dock slots")
    power_ups: PowerUpsModel = Field(..., description="Remaining charges")
    pending_check: Optional[str] = Field(default=None, description="Armed delayed check")
    message: str = Field(default="", description="Outcome message")
    next_level: Optional[int] = Field(default=None, description="Level unlocked by this win")
    score: ScoreModel = Field(..., description="Progress summary")


class MoveResponse(BaseModel):
    """Response schema for a mutation request."""
    accepted: bool = Field(..., description="Whether the request changed the game")
    reason: Optional[str] = Field(default=None, description="Rejection reason")
    state: GameStateResponse = Field(..., description="Session state after the request")


class ErrorResponse(BaseModel):
    """Error response schema."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(default=None, description="Detailed error information")
