"""
Life cycle of the remediation dialog as an explicit state machine.
"""
import logging
from enum import Enum, auto
from typing import List

from ...core.exceptions import InvalidTransition

logger = logging.getLogger(__name__)


class DialogState(Enum):
    OPENING = auto()
    LOADING = auto()
    DISPLAYED = auto()
    CLOSING = auto()
    CLOSED = auto()


TRANSITIONS = {
    DialogState.OPENING: {DialogState.LOADING, DialogState.CLOSING},
    DialogState.LOADING: {DialogState.DISPLAYED, DialogState.CLOSING},
    DialogState.DISPLAYED: {DialogState.CLOSING},
    DialogState.CLOSING: {DialogState.CLOSED},
    DialogState.CLOSED: set(),
}


class DialogStateMachine:
    """Tracks the dialog state and refuses transitions the life cycle does not allow."""

    def __init__(self):
        self.state = DialogState.OPENING
        self.history: List[DialogState] = [DialogState.OPENING]

    def can_transition(self, target: DialogState) -> bool:
        return target in TRANSITIONS[self.state]

    def transition(self, target: DialogState):
        if not self.can_transition(target):
            raise InvalidTransition(self.state, target)
        logger.debug(f"Dialog state {self.state.name} -> {target.name}")
        self.state = target
        self.history.append(target)

    def request_close(self) -> bool:
        """Moves to CLOSING unless already closing or closed. Returns whether it moved."""
        if self.is_dismissed:
            return False
        self.transition(DialogState.CLOSING)
        return True

    @property
    def is_dismissed(self) -> bool:
        return self.state in (DialogState.CLOSING, DialogState.CLOSED)
