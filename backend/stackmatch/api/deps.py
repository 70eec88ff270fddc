"""API dependencies."""
from fastapi import Depends, HTTPException

from ..core.autoplay import get_autoplayer, AutoPlayer
from ..core.generator import get_generator, LevelGenerator
from ..core.session import get_session_store, GameSession, SessionStore


def get_level_generator() -> LevelGenerator:
    """Dependency for level generator."""
    return get_generator()


def get_autoplay() -> AutoPlayer:
    """Dependency for autoplay bots."""
    return get_autoplayer()


def get_sessions() -> SessionStore:
    """Dependency for the session store."""
    return get_session_store()


def get_game_session(
    session_id: str,
    store: SessionStore = Depends(get_sessions),
) -> GameSession:
    """Dependency resolving the `session_id` path parameter to a session."""
    try:
        return store.get(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
