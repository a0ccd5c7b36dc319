from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Literal, Mapping, Optional, Protocol, Sequence, Union

from common.validation import validate_form
from state.models import StudentRecord
from state.record_store import RecordStore


logger = logging.getLogger(__name__)

ADD_LABEL = "Add Student"
SAVE_LABEL = "Save Changes"


@dataclass(frozen=True)
class Creating:
    """The form targets a new record."""


@dataclass(frozen=True)
class Editing:
    """The form targets the existing record at `index`."""

    index: int


Mode = Union[Creating, Editing]


class FormView(Protocol):
    def populate_form_fields(self, record: StudentRecord) -> None: ...

    def clear_form_fields(self) -> None: ...

    def set_submit_label(self, text: str) -> None: ...

    def show_errors(self, errors: Mapping[str, str]) -> None: ...

    def render_list(self, records: Sequence[StudentRecord]) -> None: ...


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of one form submission.

    Attributes
    - ok: validation passed and the store was mutated
    - errors: field key -> message for every failing field (empty when ok)
    - action: "added" or "updated" when ok, else None
    - index: position of the added or updated record when ok, else None
    """

    ok: bool
    errors: Dict[str, str] = field(default_factory=dict)
    action: Optional[Literal["added", "updated"]] = None
    index: Optional[int] = None


class EditModeController:
    """
    Two-state form controller: `Creating` or `Editing(index)`.

    - `begin_edit(i)` loads record i into the form and switches the submit label
      to "Save Changes".
    - `submit(fields)` validates; a failing submission shows every error and
      changes nothing. A passing one adds (Creating) or updates in place
      (Editing), then resets the form to Creating.
    - `cancel()` is the explicit form reset.
    - `delete(i)` and `clear()` go through the store and keep the edit target
      pointing at the same record, or cancel the edit when it is gone.
    """

    def __init__(self, store: RecordStore, view: FormView) -> None:
        self._store = store
        self._view = view
        self._mode: Mode = Creating()

    @property
    def mode(self) -> Mode:
        return self._mode

    def begin_edit(self, index: int) -> None:
        record = self._store.get(index)  # raises RecordIndexError before any view change
        self._view.populate_form_fields(record)
        self._view.set_submit_label(SAVE_LABEL)
        self._mode = Editing(index)
        logger.debug("Editing record at index %d", index)

    def submit(self, fields: Mapping[str, Optional[str]]) -> SubmitResult:
        result = validate_form(fields)
        if not result.ok:
            # Form keeps its values; mode is unchanged
            self._view.show_errors(result.errors)
            return SubmitResult(ok=False, errors=dict(result.errors))

        record = StudentRecord.model_validate(result.values)
        mode = self._mode
        if isinstance(mode, Editing):
            self._store.update(mode.index, record)
            outcome = SubmitResult(ok=True, action="updated", index=mode.index)
        else:
            self._store.add(record)
            outcome = SubmitResult(ok=True, action="added", index=len(self._store) - 1)

        self._reset_form()
        return outcome

    def cancel(self) -> None:
        self._reset_form()

    def delete(self, index: int) -> bool:
        if not self._store.delete(index):
            return False
        mode = self._mode
        if isinstance(mode, Editing):
            if mode.index == index:
                self._reset_form()
            elif mode.index > index:
                self._mode = Editing(mode.index - 1)
        return True

    def clear(self) -> bool:
        if not self._store.clear():
            return False
        if isinstance(self._mode, Editing):
            self._reset_form()
        return True

    def _reset_form(self) -> None:
        self._view.clear_form_fields()
        self._view.show_errors({})
        self._view.set_submit_label(ADD_LABEL)
        self._mode = Creating()


__all__ = [
    "ADD_LABEL",
    "Creating",
    "EditModeController",
    "Editing",
    "FormView",
    "Mode",
    "SAVE_LABEL",
    "SubmitResult",
]
