"""Utility helper functions."""
import math
import random
import string
from typing import Dict, Iterable, List, Optional, TypeVar

from ..models.tile import Tile, TileType

T = TypeVar("T")

_BASE36 = string.digits + string.ascii_lowercase


def count_types(tiles: Iterable[Tile]) -> Dict[TileType, int]:
    """Count tiles per type, preserving first-seen order."""
    counts: Dict[TileType, int] = {}
    for tile in tiles:
        counts[tile.type] = counts.get(tile.type, 0) + 1
    return counts


def find_triad_type(tiles: Iterable[Tile]) -> Optional[TileType]:
    """Get the first type (in dock order) with at least three copies."""
    for tile_type, count in count_types(tiles).items():
        if count >= 3:
            return tile_type
    return None


def fisher_yates(items: List[T], rng: random.Random) -> List[T]:
    """
    Return a uniformly shuffled copy of `items`.

    Args:
        items: Items to shuffle. Not modified.
        rng: Randomness source.

    Returns:
        New shuffled list.
    """
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def random_token(rng: random.Random, length: int = 4) -> str:
    """Short base36 token for tile ids."""
    return "".join(rng.choice(_BASE36) for _ in range(length))


def snap_half(value: float) -> float:
    """Snap to the half-grid. Ties round up."""
    return math.floor(value * 2 + 0.5) / 2


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
