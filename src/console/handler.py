from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional

from console.view import ConsoleView, make_prompt_confirm
from form.controller import EditModeController
from state.local_store import LocalRecordStorage
from state.record_store import RecordIndexError, RecordStore


# argparse dest -> serialized form field key
_FIELD_ARGS = {
    "name": "name",
    "student_id": "studentId",
    "email": "email",
    "contact": "contact",
}


def _add_field_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--name", help="Letters and spaces, at least 2 characters")
    p.add_argument("--student-id", dest="student_id", help="Digits only")
    p.add_argument("--email", help="Address such as jane@example.com")
    p.add_argument("--contact", help="At least 10 digits")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="student-records", description="Manage student registrations.")
    p.add_argument("--file", help="Storage file (default: $STUDENT_RECORDS_FILE or .data/local_storage.json)")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Show all records")

    p_add = sub.add_parser("add", help="Register a new student")
    _add_field_options(p_add)

    p_edit = sub.add_parser("edit", help="Change a record; omitted fields keep their values")
    p_edit.add_argument("row", type=int, help="Row number as shown by `list`")
    _add_field_options(p_edit)

    p_delete = sub.add_parser("delete", help="Delete one record")
    p_delete.add_argument("row", type=int, help="Row number as shown by `list`")
    p_delete.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")

    p_clear = sub.add_parser("clear", help="Delete every record")
    p_clear.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")
    return p


def _form_fields(args: argparse.Namespace) -> Dict[str, Optional[str]]:
    return {key: getattr(args, dest) for dest, key in _FIELD_ARGS.items()}


def run(
    args: argparse.Namespace,
    *,
    view: Optional[ConsoleView] = None,
    read: Optional[Callable[[str], str]] = None,
) -> int:
    """Execute one parsed command against the configured storage. Returns an exit code."""
    view = view or ConsoleView()
    try:
        storage = LocalRecordStorage.from_env(path=args.file)
    except ValueError as ex:
        # Fernet rejects malformed key material at construction
        sys.stderr.write(f"error: invalid storage configuration: {ex}\n")
        return 2

    confirm = make_prompt_confirm(assume_yes=getattr(args, "yes", False), read=read)
    store = RecordStore(storage, confirm=confirm, on_change=view.render_list)
    controller = EditModeController(store, view)

    if args.command == "list":
        view.render_list(store.records)
        return 0

    if args.command == "add":
        result = controller.submit(_form_fields(args))
        return 0 if result.ok else 1

    if args.command == "edit":
        try:
            controller.begin_edit(args.row - 1)
        except RecordIndexError:
            sys.stderr.write(f"error: no record at row {args.row}\n")
            return 2
        fields: Dict[str, Optional[str]] = dict(view.fields)
        fields.update({k: v for k, v in _form_fields(args).items() if v is not None})
        result = controller.submit(fields)
        return 0 if result.ok else 1

    if args.command == "delete":
        try:
            deleted = controller.delete(args.row - 1)
        except RecordIndexError:
            sys.stderr.write(f"error: no record at row {args.row}\n")
            return 2
        return 0 if deleted else 1

    if args.command == "clear":
        return 0 if controller.clear() else 1

    raise AssertionError(f"unhandled command: {args.command!r}")


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
