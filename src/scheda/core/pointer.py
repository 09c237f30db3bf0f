"""
The cached pointer to the session to perform.

The cache holds the last session chosen; the pointer always proposes the
one after it. When the cache is empty or expired the user picks from the
rotation through a ChoicePrompt.
"""

import logging
from typing import Protocol

from ..io.kv_cache import KeyValueCache
from .config import CACHE_TTL_SECONDS, CURRENT_SESSION_KEY
from .cycle import CycleResolver, next_session

logger = logging.getLogger(__name__)


class ChoicePrompt(Protocol):
    """Interactive selection capability."""

    def request_choice(self, title: str, options: list[str]) -> str | None:
        """Show 1-indexed *options*; return the raw answer, or None if cancelled."""
        ...

    def notify(self, message: str) -> None:
        """Surface a non-fatal notice to the user."""
        ...


def parse_choice(response: str | None, count: int) -> int | None:
    """
    Convert a 1-based answer to a 0-based index.

    Returns:
        Index in range, or None for cancelled, non-numeric or out-of-range input
    """
    if response is None:
        return None
    try:
        index = int(response.strip()) - 1
    except ValueError:
        return None
    if 0 <= index < count:
        return index
    return None


class SessionPointer:
    """Cursor through the session rotation, persisted in a key-value cache."""

    def __init__(
        self,
        cache: KeyValueCache,
        cycle: CycleResolver,
        prompt: ChoicePrompt,
        ttl_seconds: int = CACHE_TTL_SECONDS,
        key: str = CURRENT_SESSION_KEY,
    ):
        self.cache = cache
        self.cycle = cycle
        self.prompt = prompt
        self.ttl_seconds = ttl_seconds
        self.key = key

    def cached(self) -> str | None:
        """The raw cached value, or None when absent/expired."""
        return self.cache.get(self.key) or None

    def remember(self, session: str) -> None:
        """Overwrite the cached session."""
        self.cache.put(self.key, session, self.ttl_seconds)

    def propose(self) -> str:
        """
        The session to perform next, without storing it.

        With a cached value the proposal is the next session in the
        rotation; otherwise the user is asked.
        """
        rotation = self.cycle.rotation()
        cached = self.cached()
        if cached is None:
            return self.select(rotation)
        chosen = next_session(rotation, cached)
        logger.debug("Advancing session pointer %s -> %s", cached, chosen)
        return chosen

    def get_current_session(self) -> str:
        """Propose the session to perform and store it as the new pointer."""
        chosen = self.propose()
        self.remember(chosen)
        return chosen

    def active_session(self) -> str:
        """
        The session currently in progress.

        This is the cached session when it still belongs to the rotation;
        otherwise a new one is proposed as in propose() and left for the
        caller to remember.
        """
        cached = self.cached()
        if cached is not None and cached in self.cycle.rotation():
            return cached
        return self.propose()

    def select(self, rotation: list[str]) -> str:
        """
        Ask the user to pick a session; invalid answers fall back to the first.
        """
        options = [f"Session {session}" for session in rotation]
        response = self.prompt.request_choice("Select the session to generate", options)
        index = parse_choice(response, len(rotation))
        if index is None:
            chosen = rotation[0]
            self.prompt.notify(f"Invalid input. Session {chosen} will be generated.")
            return chosen
        return rotation[index]
