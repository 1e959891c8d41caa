"""Confirmation gate: nothing is written until the user explicitly agrees.

Two states. IDLE holds nothing; AWAITING_CONFIRMATION holds exactly one
FixSet. Only the exact tokens "yes"/"apply" and "no" are answers; any other
message is not an answer and leaves the pending set in place.
"""

from __future__ import annotations

import logging
from enum import Enum

from codemedic_core.models import FixSet

logger = logging.getLogger(__name__)

CONFIRM_TOKENS = frozenset({"yes", "apply"})
REJECT_TOKENS = frozenset({"no"})


class GateState(str, Enum):
    IDLE = "idle"
    AWAITING_CONFIRMATION = "awaiting_confirmation"


class GateAnswer(str, Enum):
    CONFIRM = "confirm"
    REJECT = "reject"
    NONE = "none"


class ConfirmationGate:
    def __init__(self):
        self._pending: FixSet | None = None

    @property
    def state(self) -> GateState:
        return GateState.IDLE if self._pending is None else GateState.AWAITING_CONFIRMATION

    @property
    def pending(self) -> FixSet | None:
        return self._pending

    def hold(self, fix_set: FixSet) -> bool:
        """Hold a proposal for confirmation. Returns False if it was discarded.

        A new non-empty proposal supersedes whatever was pending: the user has
        asked for a fresh review, so the older fixes are stale.
        """
        if not fix_set:
            logger.debug("Discarding empty fix set")
            return False
        if self._pending is not None:
            logger.warning(
                "Superseding %d pending fix(es) with a new proposal of %d",
                len(self._pending),
                len(fix_set),
            )
        self._pending = fix_set
        logger.debug("Gate -> %s (%d file(s))", GateState.AWAITING_CONFIRMATION.value, len(fix_set))
        return True

    def answer(self, text: str) -> GateAnswer:
        if self._pending is None:
            return GateAnswer.NONE
        token = text.strip().lower()
        if token in CONFIRM_TOKENS:
            return GateAnswer.CONFIRM
        if token in REJECT_TOKENS:
            return GateAnswer.REJECT
        return GateAnswer.NONE

    def take(self) -> FixSet:
        """Return the pending set and move to IDLE."""
        if self._pending is None:
            raise LookupError("No pending fixes.")
        fix_set, self._pending = self._pending, None
        logger.debug("Gate -> %s", GateState.IDLE.value)
        return fix_set

    def clear(self) -> None:
        if self._pending is not None:
            logger.debug("Gate -> %s (cleared)", GateState.IDLE.value)
        self._pending = None
