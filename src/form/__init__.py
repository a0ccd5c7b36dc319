"""
Form controller for student records: create vs edit mode and submission gating.
"""

from .controller import Creating, EditModeController, Editing, SubmitResult

__all__ = ["Creating", "EditModeController", "Editing", "SubmitResult"]
