from .dialog import RemediationDialog
from .state import DialogState, DialogStateMachine

__all__ = ["RemediationDialog", "DialogState", "DialogStateMachine"]
