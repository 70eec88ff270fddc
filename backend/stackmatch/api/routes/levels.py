"""Level generation, resolution and simulation API routes."""
from fastapi import APIRouter, Depends, HTTPException

from ...models.schemas import (
    GenerateLevelRequest,
    GenerateLevelResponse,
    ResolveRequest,
    ResolveResponse,
    SimulateRequest,
    SimulateResponse,
    TileTypeInfo,
    TileTypeListResponse,
)
from ...models.tile import LayoutArchetype, TILE_TYPES
from ...core.autoplay import AutoPlayer, AutoPlayStrategy
from ...core.generator import LevelGenerator
from ...core.occlusion import resolve_clickability
from ...config import get_settings
from ..deps import get_level_generator, get_autoplay

router = APIRouter(prefix="/api/levels", tags=["levels"])


@router.get("/tile-types", response_model=TileTypeListResponse)
async def list_tile_types() -> TileTypeListResponse:
    """List the tile vocabulary with display names and icons."""
    return TileTypeListResponse(
        types=[
            TileTypeInfo(type=tile_type.value, name=info["name"], icon=info["icon"])
            for tile_type, info in TILE_TYPES.items()
        ]
    )


@router.post("/generate", response_model=GenerateLevelResponse)
async def generate_level(
    request: GenerateLevelRequest,
    generator: LevelGenerator = Depends(get_level_generator),
) -> GenerateLevelResponse:
    """
    Generate a level layout.

    Args:
        request: GenerateLevelRequest with level selector and optional seed.
        generator: LevelGenerator dependency.

    Returns:
        GenerateLevelResponse with resolved tiles and layout metadata.
    """
    archetype = None
    if request.archetype:
        try:
            archetype = LayoutArchetype[request.archetype.upper()]
        except KeyError:
            valid = [a.name.lower() for a in LayoutArchetype]
            raise HTTPException(
                status_code=400,
                detail=f"Invalid archetype. Must be one of: {valid}",
            )

    try:
        result = generator.generate(request.level, seed=request.seed, archetype=archetype)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Generation failed: {str(e)}")

    return GenerateLevelResponse(**result.to_dict())


@router.post("/resolve", response_model=ResolveResponse)
async def resolve_tiles(request: ResolveRequest) -> ResolveResponse:
    """Recompute clickability for a caller-supplied tile set."""
    tiles = resolve_clickability(t.to_tile() for t in request.tiles)
    return ResolveResponse(
        tiles=[t.to_dict() for t in tiles],
        clickable_count=sum(1 for t in tiles if t.is_clickable),
    )


@router.post("/simulate", response_model=SimulateResponse)
async def simulate_level(
    request: SimulateRequest,
    autoplayer: AutoPlayer = Depends(get_autoplay),
) -> SimulateResponse:
    """
    Play generated boards with a bot and report clear statistics.

    Args:
        request: SimulateRequest with level, iterations and strategy.
        autoplayer: AutoPlayer dependency.

    Returns:
        SimulateResponse with aggregate statistics.
    """
    try:
        strategy = AutoPlayStrategy(request.strategy)
    except ValueError:
        valid = [s.value for s in AutoPlayStrategy]
        raise HTTPException(
            status_code=400,
            detail=f"Invalid strategy. Must be one of: {valid}",
        )

    result = autoplayer.simulate(
        level=request.level,
        iterations=request.iterations,
        strategy=strategy,
        seed=request.seed,
        capacity=get_settings().dock_capacity,
    )
    return SimulateResponse(**result.to_dict())
