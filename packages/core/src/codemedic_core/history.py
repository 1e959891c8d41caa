"""Bounded conversation log for the chat branch."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Literal

logger = logging.getLogger(__name__)

# Last 6 user+assistant pairs are replayed to the model on every chat turn.
MAX_TURNS = 6

Role = Literal["user", "assistant"]


@dataclass(frozen=True)
class Turn:
    role: Role
    text: str


class ConversationHistory:
    """Ordered list of turns, never longer than 2 × max_turns.

    Turns enter as complete user+assistant pairs (see ``add_exchange``), so
    trimming from the front always removes whole pairs and the log never
    starts with a dangling assistant reply.
    """

    def __init__(self, max_turns: int = MAX_TURNS):
        if max_turns < 1:
            raise ValueError("max_turns must be at least 1")
        self.max_turns = max_turns
        self._turns: list[Turn] = []

    @property
    def max_entries(self) -> int:
        return self.max_turns * 2

    def add_exchange(self, user_text: str, assistant_text: str) -> None:
        """Append one user message and the reply it produced, then trim."""
        self._turns.append(Turn(role="user", text=user_text))
        self._turns.append(Turn(role="assistant", text=assistant_text))
        self._trim()

    def with_pending(self, user_text: str) -> list[Turn]:
        """Return the turns to send to the model for a new user message.

        The pending message is not recorded: if the model call fails, the
        history is left exactly as it was.
        """
        return [*self._turns, Turn(role="user", text=user_text)]

    def clear(self) -> None:
        self._turns.clear()

    def _trim(self) -> None:
        overflow = len(self._turns) - self.max_entries
        if overflow <= 0:
            return
        # Round up to an even count so pairs are dropped whole.
        overflow += overflow % 2
        del self._turns[:overflow]
        logger.debug("Trimmed %d turn(s) from conversation history", overflow)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(list(self._turns))

    @property
    def turns(self) -> list[Turn]:
        return list(self._turns)
