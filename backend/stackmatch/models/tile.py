"""Tile data models and board constants."""
from dataclasses import dataclass, field, replace
from typing import Dict, List, Any, Optional
from enum import Enum


class TileType(str, Enum):
    """Closed vocabulary of tile kinds. Only equality matters."""
    BTC = "BTC"
    ETH = "ETH"
    USDT = "USDT"
    BNB = "BNB"
    SOL = "SOL"
    XRP = "XRP"
    DOGE = "DOGE"
    ADA = "ADA"
    AVAX = "AVAX"
    SHIB = "SHIB"
    DOT = "DOT"
    TRX = "TRX"
    LINK = "LINK"
    MATIC = "MATIC"
    UNI = "UNI"

    @classmethod
    def first(cls, count: int) -> List["TileType"]:
        """Get the first `count` kinds in declaration order."""
        return list(cls)[:count]


class LevelTier(str, Enum):
    """Difficulty tier selected by the level number."""
    TUTORIAL = "tutorial"
    ADVANCED = "advanced"

    @classmethod
    def from_level(cls, level: int) -> "LevelTier":
        """Level 1 is the tutorial, every other selector is advanced."""
        if level == 1:
            return cls.TUTORIAL
        return cls.ADVANCED


class LayoutArchetype(int, Enum):
    """Layout archetypes for the advanced tier."""
    PYRAMID = 0
    TWIN_TOWERS = 1
    CROSS = 2
    RING = 3
    CHAOS = 4


class GamePhase(str, Enum):
    """Session phase."""
    MENU = "menu"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class Rank(str, Enum):
    """Score screen rank."""
    LEEK = "Leek"
    NEWBIE = "Newbie"
    TRADER = "Trader"
    WHALE = "Whale"
    LEGEND = "Legend"

    @classmethod
    def from_progress(cls, percentage: int, won: bool) -> "Rank":
        """Get rank from cleared percentage."""
        if won:
            return cls.LEGEND
        if percentage > 80:
            return cls.WHALE
        elif percentage > 50:
            return cls.TRADER
        elif percentage > 20:
            return cls.NEWBIE
        else:
            return cls.LEEK


@dataclass(frozen=True)
class Tile:
    """A positioned, typed tile.

    `x` and `y` are half-grid planar coordinates, `z` is the layer index
    (higher is on top). `is_clickable` is derived by the occlusion resolver.
    """
    id: str
    type: TileType
    x: float
    y: float
    z: int
    is_clickable: bool = True

    def with_clickable(self, clickable: bool) -> "Tile":
        return replace(self, is_clickable=clickable)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "type": self.type.value,
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "is_clickable": self.is_clickable,
        }


@dataclass
class PowerUps:
    """Remaining power-up charges."""
    undo: int = 0
    remove: int = 0
    shuffle: int = 0

    @classmethod
    def uniform(cls, charges: int) -> "PowerUps":
        return cls(undo=charges, remove=charges, shuffle=charges)

    def to_dict(self) -> Dict[str, int]:
        return {"undo": self.undo, "remove": self.remove, "shuffle": self.shuffle}


@dataclass
class GeneratedLevel:
    """Result of level generation."""
    level: int
    tier: LevelTier
    tiles: List[Tile]
    archetype: Optional[LayoutArchetype] = None
    layer_count: int = 0
    overflow_count: int = 0
    generation_time_ms: int = 0

    @property
    def type_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for tile in self.tiles:
            counts[tile.type.value] = counts.get(tile.type.value, 0) + 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "level": self.level,
            "tier": self.tier.value,
            "archetype": self.archetype.name.lower() if self.archetype is not None else None,
            "layer_count": self.layer_count,
            "overflow_count": self.overflow_count,
            "tile_count": len(self.tiles),
            "type_counts": self.type_counts,
            "tiles": [t.to_dict() for t in self.tiles],
            "generation_time_ms": self.generation_time_ms,
        }


@dataclass
class ScoreReport:
    """Progress summary shown when a game ends."""
    percentage: int
    time_spent: int
    rank: Rank

    def to_dict(self) -> Dict[str, Any]:
        return {
            "percentage": self.percentage,
            "time_spent": self.time_spent,
            "rank": self.rank.value,
        }


@dataclass
class SimulationResult:
    """Result of autoplay simulation."""
    clear_rate: float
    avg_moves: float
    min_moves: int
    max_moves: int
    avg_tiles_cleared: float
    iterations: int
    strategy: str
    archetypes: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "clear_rate": round(self.clear_rate, 3),
            "avg_moves": round(self.avg_moves, 2),
            "min_moves": self.min_moves,
            "max_moves": self.max_moves,
            "avg_tiles_cleared": round(self.avg_tiles_cleared, 2),
            "iterations": self.iterations,
            "strategy": self.strategy,
            "archetypes": self.archetypes,
        }


# Footprint in layout units. Must match the client renderer.
TILE_WIDTH = 48
TILE_HEIGHT = 54
TILE_Y_STRIDE = 0.9  # vertical compression for the stacking effect

GRID_WIDTH = 7
GRID_HEIGHT = 9
MIN_X = 0.5
MAX_X = GRID_WIDTH - 1.5
MIN_Y = 1.0
MAX_Y = GRID_HEIGHT - 2.0

DOCK_CAPACITY = 7

# Tile type definitions
TILE_TYPES = {
    TileType.BTC: {"name": "Bitcoin", "icon": "https://cryptologos.cc/logos/bitcoin-btc-logo.png?v=025"},
    TileType.ETH: {"name": "Ethereum", "icon": "https://cryptologos.cc/logos/ethereum-eth-logo.png?v=025"},
    TileType.USDT: {"name": "Tether", "icon": "https://cryptologos.cc/logos/tether-usdt-logo.png?v=025"},
    TileType.BNB: {"name": "BNB", "icon": "https://cryptologos.cc/logos/bnb-bnb-logo.png?v=025"},
    TileType.SOL: {"name": "Solana", "icon": "https://cryptologos.cc/logos/solana-sol-logo.png?v=025"},
    TileType.XRP: {"name": "XRP", "icon": "https://cryptologos.cc/logos/xrp-xrp-logo.png?v=025"},
    TileType.DOGE: {"name": "Dogecoin", "icon": "https://cryptologos.cc/logos/dogecoin-doge-logo.png?v=025"},
    TileType.ADA: {"name": "Cardano", "icon": "https://cryptologos.cc/logos/cardano-ada-logo.png?v=025"},
    TileType.AVAX: {"name": "Avalanche", "icon": "https://cryptologos.cc/logos/avalanche-avax-logo.png?v=025"},
    TileType.SHIB: {"name": "Shiba Inu", "icon": "https://cryptologos.cc/logos/shiba-inu-shib-logo.png?v=025"},
    TileType.DOT: {"name": "Polkadot", "icon": "https://cryptologos.cc/logos/polkadot-new-dot-logo.png?v=025"},
    TileType.TRX: {"name": "TRON", "icon": "https://cryptologos.cc/logos/tron-trx-logo.png?v=025"},
    TileType.LINK: {"name": "Chainlink", "icon": "https://cryptologos.cc/logos/chainlink-link-logo.png?v=025"},
    TileType.MATIC: {"name": "Polygon", "icon": "https://cryptologos.cc/logos/polygon-matic-logo.png?v=025"},
    TileType.UNI: {"name": "Uniswap", "icon": "https://cryptologos.cc/logos/uniswap-uni-logo.png?v=025"},
}

# Outcome messages picked at random by the session
OUTCOME_MESSAGES = {
    "loss": [
        "Rekt!",
        "Bag holder...",
        "One more round to break even!",
        "The market won today",
        "A true leek never gives up",
    ],
    "win": [
        "To the Moon!",
        "King of the crypto market!",
        "Financial freedom is here",
        "The bull market is back!",
    ],
    "tutorial_win": [
        "First bag secured!",
        "Warm-up done, the bull run begins!",
        "Ready for the real challenge?",
    ],
}
