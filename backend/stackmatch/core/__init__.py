"""Core game logic package.

This package contains the occlusion resolver, level generator, board
operations, game sessions, and autoplay bots.
"""
from .occlusion import resolve_clickability, is_covered_by
from .generator import LevelGenerator, get_generator
from .board import TileBoard, MoveResult, MoveRejection
from .session import GameSession, SessionStore, get_session_store
from .autoplay import AutoPlayer, AutoPlayStrategy, get_autoplayer

__all__ = [
    "resolve_clickability",
    "is_covered_by",
    "LevelGenerator",
    "get_generator",
    "TileBoard",
    "MoveResult",
    "MoveRejection",
    "GameSession",
    "SessionStore",
    "get_session_store",
    "AutoPlayer",
    "AutoPlayStrategy",
    "get_autoplayer",
]
