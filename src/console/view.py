from __future__ import annotations

import sys
from typing import Callable, Dict, Mapping, Optional, Sequence, TextIO

from console.render import format_errors, format_records_table
from form.controller import ADD_LABEL
from state.models import StudentRecord


class ConsoleView:
    """
    Terminal implementation of the form view.

    Holds the current form field values in `fields` (keyed by serialized field
    name) so a command can populate the form from a record, override a few
    fields, and submit the result.
    """

    def __init__(self, *, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> None:
        self._out = out or sys.stdout
        self._err = err or sys.stderr
        self.fields: Dict[str, str] = {}
        self.submit_label = ADD_LABEL
        self.errors: Dict[str, str] = {}

    def populate_form_fields(self, record: StudentRecord) -> None:
        self.fields = dict(record.to_json_dict())

    def clear_form_fields(self) -> None:
        self.fields = {}

    def set_submit_label(self, text: str) -> None:
        self.submit_label = text

    def show_errors(self, errors: Mapping[str, str]) -> None:
        self.errors = dict(errors)
        if errors:
            self._err.write(format_errors(errors) + "\n")

    def render_list(self, records: Sequence[StudentRecord]) -> None:
        self._out.write(format_records_table(records) + "\n")


def make_prompt_confirm(
    *,
    assume_yes: bool = False,
    read: Optional[Callable[[str], str]] = None,
) -> Callable[[str], bool]:
    """Return a yes/no confirmation callable backed by `read` (stdin by default).

    Anything other than "y"/"yes" declines, as does end of input.
    """

    def confirm(message: str) -> bool:
        if assume_yes:
            return True
        try:
            answer = (read or input)(f"{message} [y/N] ")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")

    return confirm


__all__ = ["ConsoleView", "make_prompt_confirm"]
