"""Autoplay bots for estimating how hard generated levels are.

Rules match a live session except that matches resolve instantly and
no power-ups are used:
- Only clickable tiles can be picked
- Three of a kind in the dock are discarded
- The game is lost when the dock is full with no triad
"""
import logging
import random
import statistics
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from ..models.tile import SimulationResult, Tile, DOCK_CAPACITY
from ..utils.helpers import count_types
from .board import TileBoard
from .generator import LevelGenerator
from .occlusion import clickable_tiles

logger = logging.getLogger(__name__)


class AutoPlayStrategy(str, Enum):
    """Autoplay strategy enumeration."""
    RANDOM = "random"
    GREEDY = "greedy"


@dataclass
class AutoPlayOutcome:
    """Result of a single autoplay game."""
    cleared: bool
    moves: int
    tiles_cleared: int


class AutoPlayer:
    """Plays generated levels to the end."""

    def __init__(
        self,
        generator: Optional[LevelGenerator] = None,
        rng: Optional[random.Random] = None,
    ):
        self._rng = rng or random.Random()
        self._generator = generator or LevelGenerator(self._rng)

    def play(
        self,
        tiles: List[Tile],
        strategy: AutoPlayStrategy = AutoPlayStrategy.GREEDY,
        capacity: int = DOCK_CAPACITY,
    ) -> AutoPlayOutcome:
        """Play one game on `tiles` and report how far the bot got."""
        board = TileBoard(tiles, capacity=capacity, rng=self._rng)
        moves = 0
        tiles_cleared = 0

        while not board.is_cleared():
            candidates = clickable_tiles(board.board)
            if not candidates or board.is_dock_full():
                break

            tile = self._choose(board, candidates, strategy)
            board.select(tile.id)
            moves += 1

            removed = board.resolve_match()
            while removed:
                tiles_cleared += len(removed)
                removed = board.resolve_match()

        return AutoPlayOutcome(
            cleared=board.is_cleared(),
            moves=moves,
            tiles_cleared=tiles_cleared,
        )

    def simulate(
        self,
        level: int,
        iterations: int = 100,
        strategy: AutoPlayStrategy = AutoPlayStrategy.GREEDY,
        seed: Optional[int] = None,
        capacity: int = DOCK_CAPACITY,
    ) -> SimulationResult:
        """
        Generate and play `iterations` fresh boards for a level.

        Args:
            level: Level selector passed to the generator.
            iterations: Number of games to play.
            strategy: Bot strategy.
            seed: Optional seed; game i uses seed + i.
            capacity: Dock capacity.

        Returns:
            SimulationResult with aggregate statistics.
        """
        strategy = AutoPlayStrategy(strategy)
        outcomes: List[AutoPlayOutcome] = []
        archetypes: Dict[str, int] = {}

        for i in range(iterations):
            game_seed = seed + i if seed is not None else None
            if game_seed is not None:
                self._rng.seed(game_seed)

            generated = self._generator.generate(level, seed=game_seed)
            if generated.archetype is not None:
                name = generated.archetype.name.lower()
                archetypes[name] = archetypes.get(name, 0) + 1

            outcomes.append(self.play(generated.tiles, strategy, capacity))

        moves_list = [o.moves for o in outcomes]
        cleared_count = sum(1 for o in outcomes if o.cleared)

        result = SimulationResult(
            clear_rate=cleared_count / iterations if iterations > 0 else 0,
            avg_moves=statistics.mean(moves_list) if moves_list else 0,
            min_moves=min(moves_list) if moves_list else 0,
            max_moves=max(moves_list) if moves_list else 0,
            avg_tiles_cleared=statistics.mean(o.tiles_cleared for o in outcomes) if outcomes else 0,
            iterations=iterations,
            strategy=strategy.value,
            archetypes=archetypes,
        )
        logger.info(
            "Simulated level %d x%d (%s): clear rate %.3f",
            level, iterations, strategy.value, result.clear_rate,
        )
        return result

    def _choose(
        self, board: TileBoard, candidates: List[Tile], strategy: AutoPlayStrategy
    ) -> Tile:
        if strategy == AutoPlayStrategy.RANDOM:
            return self._rng.choice(candidates)

        # Greedy: finish a pair in the dock first, then the most available type
        dock_counts = count_types(board.dock)
        open_counts = count_types(candidates)

        def score(tile: Tile) -> tuple:
            return dock_counts.get(tile.type, 0), open_counts[tile.type]

        best = max(score(t) for t in candidates)
        return self._rng.choice([t for t in candidates if score(t) == best])


# Singleton instance
_autoplayer = None


def get_autoplayer() -> AutoPlayer:
    """Get or create autoplayer singleton instance."""
    global _autoplayer
    if _autoplayer is None:
        _autoplayer = AutoPlayer()
    return _autoplayer
