from backend.engine.gamestate.state import (
    GameSession,
    SessionPhase,
    elapsed_seconds,
    is_ticking,
)

__all__ = ["GameSession", "SessionPhase", "elapsed_seconds", "is_ticking"]
