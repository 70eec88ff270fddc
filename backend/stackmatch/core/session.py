"""Game session: phase, power-ups and delayed match/loss checks around a TileBoard."""
import logging
import math
import random
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..config import get_settings
from ..models.tile import (
    GamePhase,
    LayoutArchetype,
    LevelTier,
    PowerUps,
    Rank,
    ScoreReport,
    DOCK_CAPACITY,
    OUTCOME_MESSAGES,
)
from .board import MoveRejection, MoveResult, TileBoard
from .generator import LevelGenerator

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class CheckKind(str, Enum):
    """Delayed check armed after a dock change."""
    MATCH = "match"
    LOSS = "loss"


@dataclass
class PendingCheck:
    """Single-shot delayed check. Replacing it cancels the previous one."""
    kind: CheckKind
    due: float


class GameSession:
    """
    One player's game.

    The session owns its board and dock and never touches shared state.
    Delays are deadlines against `clock`; they fire lazily whenever the
    session is read or mutated (see `settle`).
    """

    MATCH_DELAY = 0.2
    LOSS_DELAY = 0.3

    def __init__(
        self,
        session_id: Optional[str] = None,
        generator: Optional[LevelGenerator] = None,
        rng: Optional[random.Random] = None,
        clock: Clock = time.monotonic,
        dock_capacity: int = DOCK_CAPACITY,
        match_delay: float = MATCH_DELAY,
        loss_delay: float = LOSS_DELAY,
        powerup_charges: int = 1,
    ):
        self.id = session_id or uuid.uuid4().hex
        self._rng = rng or random.Random()
        self._generator = generator or LevelGenerator(self._rng)
        self._clock = clock
        self.dock_capacity = dock_capacity
        self.match_delay = match_delay
        self.loss_delay = loss_delay
        self.powerup_charges = powerup_charges

        self.level = 0
        self.phase = GamePhase.MENU
        self.archetype: Optional[LayoutArchetype] = None
        self.board = TileBoard(capacity=dock_capacity, rng=self._rng)
        self.power_ups = PowerUps()
        self.initial_tile_count = 0
        self.start_time = 0.0
        self.end_time: Optional[float] = None
        self.message = ""
        self.pending: Optional[PendingCheck] = None

    def start(self, level: int = 1) -> None:
        """Generate a fresh board for `level` and start playing."""
        generated = self._generator.generate(level)

        self.level = level
        self.archetype = generated.archetype
        self.board = TileBoard(generated.tiles, capacity=self.dock_capacity, rng=self._rng)
        self.initial_tile_count = len(generated.tiles)
        self.start_time = self._clock()
        self.end_time = None
        self.message = ""
        self.pending = None

        # Tools are not handed out on the tutorial
        if generated.tier == LevelTier.TUTORIAL:
            self.power_ups = PowerUps()
        else:
            self.power_ups = PowerUps.uniform(self.powerup_charges)

        self.phase = GamePhase.PLAYING
        logger.info(
            "Session %s started level %d with %d tiles", self.id, level, self.initial_tile_count
        )

    def select(self, tile_id: str) -> MoveResult:
        """Commit a board tile to the dock."""
        now = self.settle()
        if self.phase != GamePhase.PLAYING:
            return self._reject(MoveRejection.NOT_PLAYING, "select")

        result = self.board.select(tile_id)
        if not result.accepted:
            return self._reject(result.reason, "select")

        self._arm_checks(now)
        return result

    def undo(self) -> MoveResult:
        """Put the last docked tile back where it came from."""
        now = self.settle()
        if self.phase != GamePhase.PLAYING:
            return self._reject(MoveRejection.NOT_PLAYING, "undo")
        if self.power_ups.undo <= 0:
            return self._reject(MoveRejection.NO_CHARGES, "undo")

        result = self.board.undo()
        if not result.accepted:
            return self._reject(result.reason, "undo")

        self.power_ups.undo -= 1
        self._arm_checks(now)
        return result

    def shuffle(self) -> MoveResult:
        """Redistribute tile types across the board."""
        self.settle()
        if self.phase != GamePhase.PLAYING:
            return self._reject(MoveRejection.NOT_PLAYING, "shuffle")
        if self.power_ups.shuffle <= 0:
            return self._reject(MoveRejection.NO_CHARGES, "shuffle")

        result = self.board.shuffle()
        self.power_ups.shuffle -= 1
        return result

    def remove(self) -> MoveResult:
        """Send the three oldest dock tiles back to the board."""
        now = self.settle()
        if self.phase != GamePhase.PLAYING:
            return self._reject(MoveRejection.NOT_PLAYING, "remove")
        if self.power_ups.remove <= 0:
            return self._reject(MoveRejection.NO_CHARGES, "remove")

        # Alternate sides between uses so returned rows don't overlap
        start_x = 0.5 if self.power_ups.remove % 2 == 0 else 3.5
        result = self.board.return_to_board(start_x)
        if not result.accepted:
            return self._reject(result.reason, "remove")

        self.power_ups.remove -= 1
        self._arm_checks(now)
        return result

    def settle(self, now: Optional[float] = None) -> float:
        """
        Fire every pending check that is due.

        Chained checks are timed from the moment the previous one fired,
        not from `now`.

        Returns:
            The time the session was settled at.
        """
        if now is None:
            now = self._clock()

        while (
            self.pending is not None
            and self.pending.due <= now
            and self.phase == GamePhase.PLAYING
        ):
            check, self.pending = self.pending, None

            if check.kind == CheckKind.MATCH:
                removed = self.board.resolve_match()
                if removed:
                    logger.debug(
                        "Session %s matched %s", self.id, removed[0].type.value
                    )
                self._arm_checks(check.due)
            elif self.board.has_triad():
                self._arm_checks(check.due)
            else:
                self._finish(won=False, at=check.due)

        return now

    def score(self) -> ScoreReport:
        """Progress report for the score screen."""
        total = self.initial_tile_count
        cleared = total - self.board.remaining
        percentage = math.floor(cleared / total * 100) if total else 0
        time_spent = 0
        if self.phase != GamePhase.MENU:
            end = self.end_time if self.end_time is not None else self._clock()
            time_spent = max(0, int(end - self.start_time))

        return ScoreReport(
            percentage=percentage,
            time_spent=time_spent,
            rank=Rank.from_progress(percentage, self.phase == GamePhase.WON),
        )

    @property
    def next_level(self) -> Optional[int]:
        if self.phase == GamePhase.WON and self.level == 1:
            return 2
        return None

    def snapshot(self) -> Dict[str, Any]:
        """Settle and convert to dictionary."""
        self.settle()
        return {
            "session_id": self.id,
            "level": self.level,
            "phase": self.phase.value,
            "archetype": self.archetype.name.lower() if self.archetype is not None else None,
            "board": [t.to_dict() for t in self.board.board],
            "dock": [t.to_dict() for t in self.board.dock],
            "dock_capacity": self.dock_capacity,
            "power_ups": self.power_ups.to_dict(),
            "pending_check": self.pending.kind.value if self.pending else None,
            "message": self.message,
            "next_level": self.next_level,
            "score": self.score().to_dict(),
        }

    def _arm_checks(self, base_time: float) -> None:
        """Replace the pending check based on the current dock."""
        if self.board.has_triad():
            self.pending = PendingCheck(CheckKind.MATCH, base_time + self.match_delay)
        elif self.board.is_dock_full():
            self.pending = PendingCheck(CheckKind.LOSS, base_time + self.loss_delay)
        else:
            self.pending = None
            if self.board.is_cleared():
                self._finish(won=True, at=base_time)

    def _finish(self, won: bool, at: float) -> None:
        self.phase = GamePhase.WON if won else GamePhase.LOST
        self.end_time = at
        self.pending = None

        if not won:
            key = "loss"
        elif self.level == 1:
            key = "tutorial_win"
        else:
            key = "win"
        self.message = self._rng.choice(OUTCOME_MESSAGES[key])

        logger.info("Session %s %s level %d", self.id, self.phase.value, self.level)

    def _reject(self, reason: Optional[MoveRejection], action: str) -> MoveResult:
        logger.debug("Session %s rejected %s: %s", self.id, action, reason)
        return MoveResult.rejected(reason)


class SessionStore:
    """In-memory session registry, oldest sessions evicted first."""

    def __init__(self, max_sessions: int = 256, **session_options: Any):
        self.max_sessions = max_sessions
        self._session_options = session_options
        self._sessions: "OrderedDict[str, GameSession]" = OrderedDict()

    def create(self, level: int = 1, **overrides: Any) -> GameSession:
        """Create, start and register a session."""
        options = {**self._session_options, **overrides}
        session = GameSession(**options)
        session.start(level)

        self._sessions[session.id] = session
        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info("Evicted session %s", evicted_id)
        return session

    def get(self, session_id: str) -> GameSession:
        """
        Get a session by id.

        Raises:
            KeyError: If the session does not exist.
        """
        session = self._sessions[session_id]
        self._sessions.move_to_end(session_id)
        return session

    def delete(self, session_id: str) -> None:
        del self._sessions[session_id]

    def __len__(self) -> int:
        return len(self._sessions)


# Singleton instance
_store = None


def get_session_store() -> SessionStore:
    """Get or create session store singleton instance."""
    global _store
    if _store is None:
        settings = get_settings()
        _store = SessionStore(
            max_sessions=settings.max_sessions,
            dock_capacity=settings.dock_capacity,
            match_delay=settings.match_delay_ms / 1000.0,
            loss_delay=settings.loss_delay_ms / 1000.0,
            powerup_charges=settings.powerup_charges,
        )
    return _store
