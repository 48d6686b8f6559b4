"""
Graph Repository - manages the live graph sessions.

Sessions are held in memory for the lifetime of the process. Each session
owns its own track and viewport; the repository only hands them out.
"""

import logging
import uuid
from typing import Optional

from flightgraph.models.series import DisplayMode, PixelRect, UnitSystem
from flightgraph.services.graph import DEFAULT_MODE, DEFAULT_UNITS, GraphSession


logger = logging.getLogger(__name__)


class GraphRepository:
    """
    Repository for graph sessions.

    Keyed by a generated id. Not thread-safe: the API serves each session
    from one worker at a time.
    """

    def __init__(self):
        self._sessions: dict[str, GraphSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(
        self,
        name: str = "",
        mode: DisplayMode = DEFAULT_MODE,
        units: UnitSystem = DEFAULT_UNITS,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> GraphSession:
        """
        Create an empty session.

        Args:
            name: Display name for the graph
            mode: Initial display mode
            units: Initial unit system
            width, height: Widget size in pixels (defaults from configuration)

        Returns:
            The new GraphSession
        """
        session_id = uuid.uuid4().hex[:16]
        rect = None
        if width is not None and height is not None:
            rect = PixelRect.from_widget_size(width, height)

        session = GraphSession(session_id, name=name or session_id, mode=mode, units=units, rect=rect)
        self._sessions[session_id] = session
        logger.info(f"Created graph {session_id} ({mode.value}, {units.value})")
        return session

    def get(self, session_id: str) -> Optional[GraphSession]:
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[GraphSession]:
        """All sessions, sorted by name."""
        return sorted(self._sessions.values(), key=lambda s: (s.name, s.id))

    def delete(self, session_id: str) -> bool:
        if session_id not in self._sessions:
            return False
        del self._sessions[session_id]
        logger.info(f"Deleted graph {session_id}")
        return True

    def clear(self) -> None:
        self._sessions.clear()
        logger.info("Graph sessions cleared")


# Global repository instance (set up by app initialization)
_repository: Optional[GraphRepository] = None


def get_repository() -> GraphRepository:
    """Get the global repository instance."""
    global _repository
    if _repository is None:
        _repository = GraphRepository()
    return _repository


def init_repository() -> GraphRepository:
    """Replace the global repository with a fresh, empty one."""
    global _repository
    _repository = GraphRepository()
    return _repository
