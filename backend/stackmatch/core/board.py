"""Board and dock state with the mutation operations gameplay builds on."""
import random
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, List, Optional

from ..models.tile import Tile, TileType, DOCK_CAPACITY
from ..utils.helpers import find_triad_type, fisher_yates
from .occlusion import resolve_clickability


class MoveRejection(str, Enum):
    """Why a mutation request was ignored."""
    NOT_PLAYING = "not_playing"
    UNKNOWN_TILE = "unknown_tile"
    NOT_CLICKABLE = "not_clickable"
    DOCK_FULL = "dock_full"
    NO_CHARGES = "no_charges"
    DOCK_EMPTY = "dock_empty"
    NOT_ENOUGH_TILES = "not_enough_tiles"


@dataclass
class MoveResult:
    """Outcome of a mutation request. Rejections leave all state unchanged."""
    accepted: bool
    reason: Optional[MoveRejection] = None
    tiles: List[Tile] = field(default_factory=list)

    @classmethod
    def ok(cls, tiles: Optional[List[Tile]] = None) -> "MoveResult":
        return cls(accepted=True, tiles=tiles or [])

    @classmethod
    def rejected(cls, reason: MoveRejection) -> "MoveResult":
        return cls(accepted=False, reason=reason)


class TileBoard:
    """
    Board and dock collections.

    Every structural change to the board re-runs the occlusion resolver,
    so `board` always carries fresh clickability.
    """

    # Returned tiles sit this far above the current top layer
    RETURN_Z_OFFSET = 10
    RETURN_Y = 8.0
    EMPTY_BOARD_Z = 10

    def __init__(
        self,
        tiles: Iterable[Tile] = (),
        capacity: int = DOCK_CAPACITY,
        rng: Optional[random.Random] = None,
    ):
        self.capacity = capacity
        self._rng = rng or random.Random()
        self.board: List[Tile] = resolve_clickability(tiles)
        self.dock: List[Tile] = []

    def find_tile(self, tile_id: str) -> Optional[Tile]:
        for tile in self.board:
            if tile.id == tile_id:
                return tile
        return None

    def select(self, tile_id: str) -> MoveResult:
        """Move a clickable board tile to the end of the dock."""
        tile = self.find_tile(tile_id)
        if tile is None:
            return MoveResult.rejected(MoveRejection.UNKNOWN_TILE)
        if not tile.is_clickable:
            return MoveResult.rejected(MoveRejection.NOT_CLICKABLE)
        if self.is_dock_full():
            return MoveResult.rejected(MoveRejection.DOCK_FULL)

        self.dock.append(tile)
        self._set_board([t for t in self.board if t.id != tile_id])
        return MoveResult.ok([tile])

    def resolve_match(self) -> List[Tile]:
        """
        Discard exactly three dock tiles of one type, if any type has three.

        The oldest three copies go; any fourth copy stays in the dock.

        Returns:
            The discarded tiles, or an empty list when no triad exists.
        """
        match_type = find_triad_type(self.dock)
        if match_type is None:
            return []

        removed: List[Tile] = []
        kept: List[Tile] = []
        for tile in self.dock:
            if tile.type == match_type and len(removed) < 3:
                removed.append(tile)
            else:
                kept.append(tile)
        self.dock = kept
        return removed

    def undo(self) -> MoveResult:
        """Return the most recent dock tile to its board position."""
        if not self.dock:
            return MoveResult.rejected(MoveRejection.DOCK_EMPTY)

        tile = self.dock.pop()
        self._set_board(self.board + [tile])
        return MoveResult.ok([tile])

    def shuffle(self) -> MoveResult:
        """Permute tile types across board positions."""
        types: List[TileType] = fisher_yates([t.type for t in self.board], self._rng)
        self._set_board([replace(t, type=tt) for t, tt in zip(self.board, types)])
        return MoveResult.ok()

    def return_to_board(self, start_x: float) -> MoveResult:
        """
        Take the three oldest dock tiles and put them back on top of the board.

        Args:
            start_x: X of the first returned tile; the others follow at +1.

        Returns:
            MoveResult carrying the new board tiles.
        """
        if len(self.dock) < 3:
            return MoveResult.rejected(MoveRejection.NOT_ENOUGH_TILES)

        returning, self.dock = self.dock[:3], self.dock[3:]
        max_z = max((t.z for t in self.board), default=self.EMPTY_BOARD_Z)

        new_tiles = [
            replace(
                tile,
                id=f"{tile.id}_returned",
                x=start_x + i,
                y=self.RETURN_Y,
                z=max_z + self.RETURN_Z_OFFSET + i,
            )
            for i, tile in enumerate(returning)
        ]
        self._set_board(self.board + new_tiles)
        return MoveResult.ok([self.find_tile(t.id) for t in new_tiles])

    def has_triad(self) -> bool:
        return find_triad_type(self.dock) is not None

    def is_dock_full(self) -> bool:
        return len(self.dock) >= self.capacity

    def is_cleared(self) -> bool:
        return not self.board and not self.dock

    @property
    def remaining(self) -> int:
        return len(self.board) + len(self.dock)

    def _set_board(self, tiles: List[Tile]) -> None:
        self.board = resolve_clickability(tiles)
