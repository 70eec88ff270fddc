"""Tests for game sessions and the session store."""
import random

import pytest
from stackmatch.core.board import MoveRejection
from stackmatch.core.session import CheckKind, GameSession, SessionStore
from stackmatch.models.tile import (
    GamePhase,
    GeneratedLevel,
    LevelTier,
    Rank,
    Tile,
    TileType,
    OUTCOME_MESSAGES,
)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FixedGenerator:
    """Serves the same non-overlapping row of tiles for every level."""

    def __init__(self, types):
        self.types = types

    def generate(self, level, seed=None, archetype=None):
        tiles = [
            Tile(id=f"t{i}", type=tt, x=(i % 3) * 2, y=(i // 3) * 2, z=0)
            for i, tt in enumerate(self.types)
        ]
        return GeneratedLevel(level=level, tier=LevelTier.from_level(level), tiles=tiles)


DISTINCT = [TileType.BTC, TileType.ETH, TileType.SOL, TileType.XRP,
            TileType.ADA, TileType.DOT, TileType.BNB, TileType.UNI]


@pytest.fixture
def clock():
    return FakeClock()


def make_session(clock, types, level=2, **kwargs):
    session = GameSession(
        generator=FixedGenerator(types),
        rng=random.Random(0),
        clock=clock,
        **kwargs,
    )
    session.start(level)
    return session


def select_all(session, ids):
    for tile_id in ids:
        assert session.select(tile_id).accepted, tile_id


class TestStart:
    """Test cases for starting a level."""

    def test_new_session_is_in_menu(self, clock):
        session = GameSession(clock=clock)

        assert session.phase == GamePhase.MENU
        result = session.select("anything")
        assert result.reason == MoveRejection.NOT_PLAYING

    def test_start_advanced_level(self, clock):
        session = GameSession(rng=random.Random(3), clock=clock)
        session.start(2)

        assert session.phase == GamePhase.PLAYING
        assert len(session.board.board) == 81
        assert session.board.dock == []
        assert session.archetype is not None
        assert session.power_ups.to_dict() == {"undo": 1, "remove": 1, "shuffle": 1}

    def test_tutorial_has_no_power_ups(self, clock):
        session = GameSession(rng=random.Random(3), clock=clock)
        session.start(1)

        assert len(session.board.board) == 24
        assert session.power_ups.to_dict() == {"undo": 0, "remove": 0, "shuffle": 0}
        assert session.undo().reason == MoveRejection.NO_CHARGES
        assert session.shuffle().reason == MoveRejection.NO_CHARGES
        assert session.remove().reason == MoveRejection.NO_CHARGES

    def test_restart_resets_everything(self, clock):
        session = make_session(clock, [TileType.BTC] * 3 + DISTINCT[1:3])
        select_all(session, ["t0", "t3"])
        session.undo()

        session.start(2)

        assert session.board.dock == []
        assert len(session.board.board) == 5
        assert session.power_ups.undo == 1
        assert session.pending is None


class TestDelayedChecks:
    """Test cases for match and loss checks."""

    def test_match_waits_for_delay(self, clock):
        session = make_session(clock, [TileType.BTC] * 3 + [TileType.ETH] * 3)
        select_all(session, ["t0", "t1", "t2"])

        assert session.pending.kind == CheckKind.MATCH
        assert len(session.board.dock) == 3

        clock.advance(0.1)
        session.settle()
        assert len(session.board.dock) == 3

        clock.advance(0.15)
        session.settle()
        assert session.board.dock == []
        assert session.pending is None
        assert session.phase == GamePhase.PLAYING

    def test_win_after_chained_matches(self, clock):
        """Both triads resolve in one settle, each timed from the previous one."""
        session = make_session(clock, [TileType.BTC] * 3 + [TileType.ETH] * 3)
        select_all(session, ["t0", "t1", "t2", "t3", "t4", "t5"])
        start = clock.now

        session.settle(start + 0.3)
        assert len(session.board.dock) == 3
        assert session.pending.due == pytest.approx(start + 0.4)

        session.settle(start + 0.5)
        assert session.phase == GamePhase.WON
        assert session.end_time == pytest.approx(start + 0.4)
        assert session.message in OUTCOME_MESSAGES["win"]
        assert session.next_level is None

    def test_tutorial_win_unlocks_next_level(self, clock):
        session = make_session(clock, [TileType.BTC] * 3, level=1)
        select_all(session, ["t0", "t1", "t2"])
        clock.advance(1)

        state = session.snapshot()

        assert state["phase"] == "won"
        assert state["next_level"] == 2
        assert state["message"] in OUTCOME_MESSAGES["tutorial_win"]

    def test_full_dock_loses_after_delay(self, clock):
        session = make_session(clock, DISTINCT)
        select_all(session, [f"t{i}" for i in range(7)])

        assert session.pending.kind == CheckKind.LOSS
        assert session.select("t7").reason == MoveRejection.DOCK_FULL

        clock.advance(0.29)
        session.settle()
        assert session.phase == GamePhase.PLAYING

        clock.advance(0.02)
        session.settle()
        assert session.phase == GamePhase.LOST
        assert session.message in OUTCOME_MESSAGES["loss"]
        assert session.select("t7").reason == MoveRejection.NOT_PLAYING

    def test_full_dock_with_triad_is_not_lost(self, clock):
        types = [TileType.BTC] * 3 + DISTINCT[1:5]
        session = make_session(clock, types)
        select_all(session, [f"t{i}" for i in range(7)])

        assert session.pending.kind == CheckKind.MATCH
        clock.advance(1)
        session.settle()

        assert session.phase == GamePhase.PLAYING
        assert len(session.board.dock) == 4

    def test_undo_cancels_pending_loss(self, clock):
        session = make_session(clock, DISTINCT)
        select_all(session, [f"t{i}" for i in range(7)])

        assert session.undo().accepted
        assert session.pending is None

        clock.advance(1)
        session.settle()
        assert session.phase == GamePhase.PLAYING

    def test_undo_cancels_pending_match(self, clock):
        session = make_session(clock, [TileType.BTC] * 3)
        select_all(session, ["t0", "t1", "t2"])

        session.undo()
        clock.advance(1)
        session.settle()

        assert [t.id for t in session.board.dock] == ["t0", "t1"]
        assert session.phase == GamePhase.PLAYING


class TestPowerUps:
    """Test cases for undo, remove and shuffle."""

    def test_undo_spends_a_charge(self, clock):
        session = make_session(clock, DISTINCT)
        select_all(session, ["t0", "t1"])

        assert session.undo().accepted
        assert session.power_ups.undo == 0
        assert session.undo().reason == MoveRejection.NO_CHARGES
        assert len(session.board.dock) == 1

    def test_failed_undo_keeps_charge(self, clock):
        session = make_session(clock, DISTINCT)

        assert session.undo().reason == MoveRejection.DOCK_EMPTY
        assert session.power_ups.undo == 1

    def test_remove_returns_three_oldest(self, clock):
        session = make_session(clock, DISTINCT)
        select_all(session, ["t0", "t1", "t2", "t3"])

        result = session.remove()

        assert result.accepted
        assert session.power_ups.remove == 0
        assert [t.id for t in session.board.dock] == ["t3"]
        # One charge left before the call: odd count starts on the right
        assert [(t.id, t.x, t.y, t.z) for t in result.tiles] == [
            ("t0_returned", 3.5, 8.0, 10),
            ("t1_returned", 4.5, 8.0, 11),
            ("t2_returned", 5.5, 8.0, 12),
        ]

    def test_remove_alternates_sides(self, clock):
        session = make_session(clock, DISTINCT, powerup_charges=2)
        select_all(session, ["t0", "t1", "t2"])

        first = session.remove()
        assert first.tiles[0].x == 0.5

    def test_remove_needs_three_tiles(self, clock):
        session = make_session(clock, DISTINCT)
        select_all(session, ["t0", "t1"])

        assert session.remove().reason == MoveRejection.NOT_ENOUGH_TILES
        assert session.power_ups.remove == 1

    def test_shuffle_spends_a_charge(self, clock):
        session = make_session(clock, DISTINCT)
        before = sorted(t.type.value for t in session.board.board)

        assert session.shuffle().accepted
        assert session.power_ups.shuffle == 0
        assert sorted(t.type.value for t in session.board.board) == before
        assert session.shuffle().reason == MoveRejection.NO_CHARGES


class TestScore:
    """Test cases for the score report."""

    def test_menu_score(self, clock):
        score = GameSession(clock=clock).score()
        assert score.time_spent == 0
        assert score.rank == Rank.LEEK

    def test_progress_and_time(self, clock):
        types = [TileType.BTC] * 3 + DISTINCT[1:8]
        session = make_session(clock, types)
        select_all(session, ["t0", "t1", "t2"])
        clock.advance(42.5)
        session.settle()

        score = session.score()

        # 3 of 10 tiles cleared
        assert score.percentage == 30
        assert score.time_spent == 42
        assert score.rank == Rank.NEWBIE

    def test_time_stops_when_finished(self, clock):
        session = make_session(clock, [TileType.BTC] * 3)
        select_all(session, ["t0", "t1", "t2"])
        clock.advance(1)
        session.settle()
        clock.advance(100)

        score = session.score()
        assert session.phase == GamePhase.WON
        assert score.time_spent == 0
        assert score.percentage == 100
        assert score.rank == Rank.LEGEND

    @pytest.mark.parametrize("percentage,rank", [
        (0, Rank.LEEK),
        (20, Rank.LEEK),
        (21, Rank.NEWBIE),
        (51, Rank.TRADER),
        (80, Rank.TRADER),
        (81, Rank.WHALE),
    ])
    def test_rank_thresholds(self, percentage, rank):
        assert Rank.from_progress(percentage, won=False) == rank


class TestSnapshot:
    """Test cases for the serialized state."""

    def test_snapshot_fields(self, clock):
        session = make_session(clock, DISTINCT)
        session.select("t0")

        state = session.snapshot()

        assert state["session_id"] == session.id
        assert state["phase"] == "playing"
        assert state["level"] == 2
        assert [t["id"] for t in state["dock"]] == ["t0"]
        assert len(state["board"]) == 7
        assert state["dock_capacity"] == 7
        assert state["pending_check"] is None
        assert state["score"]["rank"] == "Leek"

    def test_snapshot_settles(self, clock):
        session = make_session(clock, [TileType.BTC] * 3 + [TileType.ETH])
        select_all(session, ["t0", "t1", "t2"])
        assert session.snapshot()["pending_check"] == "match"

        clock.advance(0.5)
        assert session.snapshot()["dock"] == []


class TestSessionStore:
    """Test cases for SessionStore."""

    @pytest.fixture
    def store(self, clock):
        return SessionStore(
            max_sessions=2,
            generator=FixedGenerator(DISTINCT),
            clock=clock,
        )

    def test_create_starts_session(self, store):
        session = store.create(level=2)

        assert session.phase == GamePhase.PLAYING
        assert store.get(session.id) is session
        assert len(store) == 1

    def test_missing_session(self, store):
        with pytest.raises(KeyError):
            store.get("nope")

    def test_oldest_evicted(self, store):
        a = store.create()
        b = store.create()
        store.get(a.id)
        c = store.create()

        assert len(store) == 2
        assert store.get(a.id) is a
        assert store.get(c.id) is c
        with pytest.raises(KeyError):
            store.get(b.id)

    def test_delete(self, store):
        session = store.create()
        store.delete(session.id)

        assert len(store) == 0
        with pytest.raises(KeyError):
            store.delete(session.id)

    def test_overrides(self, store):
        session = store.create(level=2, dock_capacity=3)
        assert session.dock_capacity == 3
