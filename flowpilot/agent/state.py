"""
Per-run state store.

AgentState holds the append-only message history and the merge-updated
execution context shared by every step of one run. It is a plain object
created per run and passed by reference; it provides no locking, so
concurrent runs must each get their own instance.
"""

from typing import Any, Dict, List, Mapping

from loguru import logger

from .models import DecisionContext


class AgentState:
    """
    In-memory history and execution context for a single run.

    Example:
        ```python
        state = AgentState()
        state.append_message("Starting agent: Support Agent")
        state.merge_context({"user_id": "user123"})
        state.get_history()  # ["Starting agent: Support Agent"]
        ```
    """

    def __init__(self):
        """Initialize an empty history and an empty context."""
        self._history: List[str] = []
        self._context: Dict[str, Any] = {}

    def append_message(self, message: str) -> None:
        """
        Append a message to the end of the history.

        Parameters:
            message (str): Text to record.
        """
        self._history.append(message)
        logger.debug(f"State message #{len(self._history)}: {message}")

    def get_history(self) -> List[str]:
        """
        Return a copy of the history in insertion order.

        Returns:
            List[str]: Snapshot of recorded messages; later appends do not affect it.
        """
        return self._history.copy()

    def merge_context(self, partial: Mapping[str, Any]) -> None:
        """
        Shallow-merge ``partial`` over the current context; later keys win.

        Parameters:
            partial (Mapping[str, Any]): Keys and values to merge.
        """
        self._context = {**self._context, **partial}

    def get_context(self) -> Dict[str, Any]:
        """
        Return a shallow copy of the execution context.

        Returns:
            Dict[str, Any]: Snapshot of the merged context.
        """
        return dict(self._context)

    def snapshot(self) -> DecisionContext:
        """Capture history and context for a decision provider."""
        return DecisionContext(history=self.get_history(), context=self.get_context())

    def __len__(self) -> int:
        return len(self._history)

    def __repr__(self) -> str:
        return f"AgentState(history={len(self._history)}, context_keys={len(self._context)})"
