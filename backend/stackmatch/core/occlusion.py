"""Occlusion resolver: decides which tiles are on top and clickable."""
from typing import Iterable, List, Tuple

from ..models.tile import Tile, TILE_WIDTH, TILE_HEIGHT, TILE_Y_STRIDE


def footprint(tile: Tile) -> Tuple[float, float, float, float]:
    """Get (left, top, right, bottom) of the tile's footprint in layout units."""
    left = tile.x * TILE_WIDTH
    top = tile.y * TILE_HEIGHT * TILE_Y_STRIDE
    return left, top, left + TILE_WIDTH, top + TILE_HEIGHT


def is_covered_by(under: Tile, over: Tile) -> bool:
    """Check if `under` is occluded by `over`.

    `over` must sit on a strictly higher layer and its footprint must
    strictly overlap on both axes. Touching edges do not count.
    """
    if over.z <= under.z:
        return False

    u_left, u_top, u_right, u_bottom = footprint(under)
    o_left, o_top, o_right, o_bottom = footprint(over)

    return (
        u_left < o_right
        and u_right > o_left
        and u_top < o_bottom
        and u_bottom > o_top
    )


def resolve_clickability(tiles: Iterable[Tile]) -> List[Tile]:
    """
    Annotate every tile with whether it is currently clickable.

    Always recomputes from scratch over the whole collection. The input
    tiles are left untouched; annotated copies are returned in input order.

    Args:
        tiles: Current board tiles, in any order.

    Returns:
        List of tiles with `is_clickable` set.
    """
    tiles = list(tiles)
    resolved = []
    for tile in tiles:
        blocked = any(is_covered_by(tile, other) for other in tiles)
        resolved.append(tile.with_clickable(not blocked))
    return resolved


def clickable_tiles(tiles: Iterable[Tile]) -> List[Tile]:
    """Get tiles already marked clickable."""
    return [t for t in tiles if t.is_clickable]
