"""Tests for the occlusion resolver."""
import pytest
from stackmatch.core.generator import LevelGenerator
from stackmatch.core.occlusion import is_covered_by, resolve_clickability, footprint
from stackmatch.models.tile import Tile, TileType, TILE_WIDTH, TILE_HEIGHT, TILE_Y_STRIDE


def make_tile(tile_id, x, y, z, tile_type=TileType.BTC):
    return Tile(id=tile_id, type=tile_type, x=x, y=y, z=z)


def by_id(tiles):
    return {t.id: t for t in tiles}


def overlaps(a, b):
    """Independent overlap check on raw coordinates."""
    return (
        abs(a.x - b.x) * TILE_WIDTH < TILE_WIDTH
        and abs(a.y - b.y) * TILE_HEIGHT * TILE_Y_STRIDE < TILE_HEIGHT
    )


class TestIsCoveredBy:
    """Test cases for the pairwise occlusion rule."""

    def test_identical_footprint_higher_layer_covers(self):
        """A tile directly above covers the one below."""
        under = make_tile("a", 0, 0, 0)
        over = make_tile("b", 0, 0, 1)
        assert is_covered_by(under, over)
        assert not is_covered_by(over, under)

    def test_same_layer_never_covers(self):
        """Overlapping tiles on the same layer do not block each other."""
        a = make_tile("a", 0, 0, 3)
        b = make_tile("b", 0.5, 0, 3)
        assert not is_covered_by(a, b)
        assert not is_covered_by(b, a)

    def test_tile_never_covers_itself(self):
        tile = make_tile("a", 2, 2, 5)
        assert not is_covered_by(tile, tile)

    def test_edge_touching_does_not_cover(self):
        """Footprints sharing only an edge do not overlap."""
        under = make_tile("a", 0, 0, 0)
        over = make_tile("b", 1, 0, 1)
        assert not is_covered_by(under, over)

    def test_half_offset_covers(self):
        """Half-grid offsets still overlap on both axes."""
        under = make_tile("a", 2, 3, 0)
        assert is_covered_by(under, make_tile("b", 2.5, 3, 1))
        assert is_covered_by(under, make_tile("c", 2, 3.5, 1))
        assert is_covered_by(under, make_tile("d", 1.5, 2.5, 1))

    def test_vertical_stride(self):
        """One row down still overlaps because rows are compressed; 1.5 rows does not."""
        under = make_tile("a", 2, 3, 0)
        assert is_covered_by(under, make_tile("b", 2, 4, 1))
        assert not is_covered_by(under, make_tile("c", 2, 4.5, 1))

    def test_footprint_uses_layout_units(self):
        left, top, right, bottom = footprint(make_tile("a", 1, 2, 0))
        assert left == 48
        assert right == 96
        assert top == pytest.approx(2 * 54 * 0.9)
        assert bottom == pytest.approx(2 * 54 * 0.9 + 54)


class TestResolveClickability:
    """Test cases for resolve_clickability."""

    def test_two_stacked_tiles(self):
        """Lower tile under an identical footprint is blocked, upper is free."""
        resolved = by_id(resolve_clickability([
            make_tile("A", 0, 0, 0),
            make_tile("B", 0, 0, 1),
        ]))
        assert resolved["A"].is_clickable is False
        assert resolved["B"].is_clickable is True

    def test_empty_collection(self):
        assert resolve_clickability([]) == []

    def test_disjoint_tiles_all_clickable(self):
        resolved = resolve_clickability([
            make_tile("a", 0, 0, 0),
            make_tile("b", 3, 0, 1),
            make_tile("c", 0, 5, 2),
        ])
        assert all(t.is_clickable for t in resolved)

    def test_any_higher_layer_blocks(self):
        """A tile covered several layers up is blocked even if the layer right above is empty there."""
        resolved = by_id(resolve_clickability([
            make_tile("base", 2, 2, 0),
            make_tile("side", 4, 2, 1),
            make_tile("top", 2.5, 2.5, 7),
        ]))
        assert resolved["base"].is_clickable is False
        assert resolved["side"].is_clickable is True
        assert resolved["top"].is_clickable is True

    def test_stale_flag_is_recomputed(self):
        """Incoming is_clickable values are ignored."""
        resolved = by_id(resolve_clickability([
            Tile(id="a", type=TileType.ETH, x=0, y=0, z=0, is_clickable=True),
            Tile(id="b", type=TileType.ETH, x=0, y=0, z=1, is_clickable=False),
        ]))
        assert resolved["a"].is_clickable is False
        assert resolved["b"].is_clickable is True

    def test_input_untouched_and_order_kept(self):
        tiles = [make_tile("a", 0, 0, 0), make_tile("b", 0, 0, 1)]
        resolved = resolve_clickability(tiles)

        assert [t.id for t in resolved] == ["a", "b"]
        assert tiles[0].is_clickable is True
        for before, after in zip(tiles, resolved):
            assert (before.id, before.type, before.x, before.y, before.z) == \
                (after.id, after.type, after.x, after.y, after.z)

    def test_accepts_generator(self):
        resolved = resolve_clickability(make_tile(str(i), i * 2, 0, 0) for i in range(3))
        assert len(resolved) == 3


class TestResolverProperties:
    """Property checks against generated boards."""

    @pytest.fixture(params=[1, 2, 3])
    def level_tiles(self, request):
        generator = LevelGenerator()
        return generator.generate(request.param, seed=100 + request.param).tiles

    def test_matches_brute_force(self, level_tiles):
        """Clickable iff nothing strictly higher overlaps, in both directions."""
        for tile in level_tiles:
            blocked = any(
                other.z > tile.z and overlaps(tile, other)
                for other in level_tiles
                if other is not tile
            )
            assert tile.is_clickable is (not blocked), tile.id

    def test_idempotent(self, level_tiles):
        once = resolve_clickability(level_tiles)
        twice = resolve_clickability(once)
        assert [t.is_clickable for t in once] == [t.is_clickable for t in twice]
        assert [t.is_clickable for t in once] == [t.is_clickable for t in level_tiles]

    def test_bottom_layer_never_occludes(self, level_tiles):
        bottom = [t for t in level_tiles if t.z == 0]
        for tile in level_tiles:
            assert not any(is_covered_by(tile, b) for b in bottom)

    def test_top_layer_always_clickable(self, level_tiles):
        top_z = max(t.z for t in level_tiles)
        assert all(t.is_clickable for t in level_tiles if t.z == top_z)
