"""Level generator: builds a layered, count-balanced tile stack."""
import logging
import math
import random
import time
from typing import List, Optional, Tuple

from ..models.tile import (
    GeneratedLevel,
    LayoutArchetype,
    LevelTier,
    Tile,
    TileType,
    GRID_WIDTH,
    GRID_HEIGHT,
    MIN_X,
    MAX_X,
    MIN_Y,
    MAX_Y,
)
from ..utils.helpers import clamp, fisher_yates, random_token, snap_half
from .occlusion import resolve_clickability

logger = logging.getLogger(__name__)


class LevelGenerator:
    """Generates tile layouts for a requested level.

    Generation is randomized per call. Pass an `rng` (or a `seed` to
    `generate`) to make it reproducible.
    """

    # Tutorial tier: small regular sub-grid
    TUTORIAL_TILE_COUNT = 24
    TUTORIAL_TYPE_COUNT = 6
    TUTORIAL_LAYERS = 3
    TUTORIAL_SLOTS = {0: 16, 1: 8, 2: 8}  # slots per layer

    # Advanced tier: deep randomized stack
    ADVANCED_TILE_COUNT = 81
    ADVANCED_TYPE_COUNT = 14
    ADVANCED_LAYERS = 12
    CHAOS_DENSITY = 8

    # Layout centroid
    CENTER_X = GRID_WIDTH / 2 - 0.5
    CENTER_Y = GRID_HEIGHT / 2 - 0.5

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def generate(
        self,
        level: int,
        seed: Optional[int] = None,
        archetype: Optional[LayoutArchetype] = None,
    ) -> GeneratedLevel:
        """
        Generate the tiles for a level.

        Args:
            level: Level selector. 1 is the tutorial, anything else is advanced.
            seed: Optional seed for a reproducible layout.
            archetype: Force a layout archetype (advanced tier only).

        Returns:
            GeneratedLevel whose tiles already carry resolved clickability.

        Raises:
            ValueError: If level is negative.
        """
        if level < 0:
            raise ValueError(f"Level must be non-negative, got {level}")

        start_time = time.time()
        rng = random.Random(seed) if seed is not None else self._rng
        tier = LevelTier.from_level(level)

        if tier == LevelTier.TUTORIAL:
            pool = self._build_pool(self.TUTORIAL_TILE_COUNT, self.TUTORIAL_TYPE_COUNT, rng)
            tiles, pool_index = self._layout_tutorial(pool)
            archetype = None
            layer_count = self.TUTORIAL_LAYERS
        else:
            pool = self._build_pool(self.ADVANCED_TILE_COUNT, self.ADVANCED_TYPE_COUNT, rng)
            if archetype is None:
                archetype = LayoutArchetype(rng.randrange(len(LayoutArchetype)))
            tiles, pool_index = self._layout_advanced(pool, archetype, rng)
            layer_count = self.ADVANCED_LAYERS

        overflow = self._place_overflow(pool, pool_index, rng)
        tiles = overflow + tiles

        logger.debug(
            "Generated level %d (%s, archetype=%s): %d tiles, %d overflow",
            level, tier.value, archetype.name if archetype is not None else "-",
            len(tiles), len(overflow),
        )

        return GeneratedLevel(
            level=level,
            tier=tier,
            tiles=resolve_clickability(tiles),
            archetype=archetype,
            layer_count=layer_count,
            overflow_count=len(overflow),
            generation_time_ms=int((time.time() - start_time) * 1000),
        )

    def _build_pool(self, tile_count: int, type_count: int, rng: random.Random) -> List[TileType]:
        """Build the shuffled type pool, three copies per set."""
        # Round up to a whole number of sets
        tile_count += -tile_count % 3
        active_types = TileType.first(type_count)

        pool: List[TileType] = []
        for i in range(tile_count // 3):
            tile_type = active_types[i % len(active_types)]
            pool.extend([tile_type] * 3)

        return fisher_yates(pool, rng)

    def _layout_tutorial(self, pool: List[TileType]) -> Tuple[List[Tile], int]:
        """Lay the tutorial out on a 4-wide grid, each layer shifted half a row down."""
        tiles: List[Tile] = []
        pool_index = 0

        for z in range(self.TUTORIAL_LAYERS):
            for i in range(self.TUTORIAL_SLOTS[z]):
                if pool_index >= len(pool):
                    break
                tiles.append(Tile(
                    id=f"l1-{z}-{i}",
                    type=pool[pool_index],
                    x=1.5 + (i % 4),
                    y=2 + (i // 4) + z * 0.5,
                    z=z,
                ))
                pool_index += 1

        return tiles, pool_index

    def _layout_advanced(
        self, pool: List[TileType], archetype: LayoutArchetype, rng: random.Random
    ) -> Tuple[List[Tile], int]:
        """Fill layers bottom-up following the archetype, sparser towards the top."""
        tiles: List[Tile] = []
        pool_index = 0

        for z in range(self.ADVANCED_LAYERS):
            if pool_index >= len(pool):
                break

            density = self._layer_density(archetype, z)
            for i in range(density):
                if pool_index >= len(pool):
                    break

                x, y = self._sample_position(archetype, z, i, rng)
                x = clamp(snap_half(x), MIN_X, MAX_X)
                y = clamp(snap_half(y), MIN_Y, MAX_Y)

                tiles.append(Tile(
                    id=f"l2-t{archetype.value}-z{z}-{i}-{random_token(rng)}",
                    type=pool[pool_index],
                    x=x,
                    y=y,
                    z=z,
                ))
                pool_index += 1

        return tiles, pool_index

    def _layer_density(self, archetype: LayoutArchetype, z: int) -> int:
        if archetype == LayoutArchetype.CHAOS:
            return self.CHAOS_DENSITY
        return max(2, math.floor(12 - z * 0.8))

    def _sample_position(
        self, archetype: LayoutArchetype, z: int, i: int, rng: random.Random
    ) -> Tuple[float, float]:
        """Sample an unsnapped (x, y) for slot `i` on layer `z`."""
        cx, cy = self.CENTER_X, self.CENTER_Y

        if archetype == LayoutArchetype.PYRAMID:
            spread = max(0.5, 3 - z * 0.3)
            x = cx + (rng.random() - 0.5) * spread * 2.5
            y = cy + (rng.random() - 0.5) * spread * 2.5

        elif archetype == LayoutArchetype.TWIN_TOWERS:
            side = -1.5 if i % 2 == 0 else 1.5
            spread = max(0.5, 2 - z * 0.2)
            x = cx + side + (rng.random() - 0.5) * spread
            y = cy + (rng.random() - 0.5) * spread * 2

        elif archetype == LayoutArchetype.CROSS:
            if i % 2 == 0:
                # Horizontal bar
                x = cx + (rng.random() - 0.5) * 6
                y = cy + (rng.random() - 0.5) * 1
            else:
                # Vertical bar
                x = cx + (rng.random() - 0.5) * 1
                y = cy + (rng.random() - 0.5) * 7

        elif archetype == LayoutArchetype.RING:
            # Radius shrinks slowly with depth, Y stretched for the tall footprint
            angle = rng.random() * math.pi * 2
            radius = max(0.5, 2.5 - z * 0.1)
            x = cx + math.cos(angle) * radius
            y = cy + math.sin(angle) * radius * 1.1

        else:
            qx = 1.5 if rng.random() > 0.5 else 4.5
            qy = 2 if rng.random() > 0.5 else 6
            x = qx + (rng.random() - 0.5) * 2
            y = qy + (rng.random() - 0.5) * 2

        return x, y

    def _place_overflow(
        self, pool: List[TileType], pool_index: int, rng: random.Random
    ) -> List[Tile]:
        """Place unused pool entries on layer 0 at random in-bounds positions."""
        overflow: List[Tile] = []
        while pool_index < len(pool):
            overflow.append(Tile(
                id=f"overflow-{pool_index}",
                type=pool[pool_index],
                x=rng.randint(int(MIN_X * 2), int(MAX_X * 2)) / 2,
                y=rng.randint(int(MIN_Y * 2), int(MAX_Y * 2)) / 2,
                z=0,
            ))
            pool_index += 1
        # Prepended one at a time: the last pool entry renders first
        overflow.reverse()
        return overflow


# Singleton instance
_generator = None


def get_generator() -> LevelGenerator:
    """Get or create generator singleton instance."""
    global _generator
    if _generator is None:
        _generator = LevelGenerator()
    return _generator
