from __future__ import annotations

from typing import List

import pytest

from console import handler
from console.render import EMPTY_MESSAGE
from state.local_store import LocalRecordStorage, LocalStorage


JANE_ARGS = ["--name", "Jane Doe", "--student-id", "101", "--email", "jane@x.com", "--contact", "9876543210"]
BOB_ARGS = ["--name", "Bob Ray", "--student-id", "202", "--email", "bob@x.com", "--contact", "1234567890"]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("STUDENT_RECORDS_FILE", "STUDENT_RECORDS_KEY", "STUDENT_RECORDS_FERNET_KEY"):
        monkeypatch.delenv(name, raising=False)


def _answers(monkeypatch: pytest.MonkeyPatch, *answers: str) -> List[str]:
    prompts: List[str] = []
    queue = list(answers)

    def fake_input(prompt: str = "") -> str:
        prompts.append(prompt)
        return queue.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)
    return prompts


def _cli(path, *argv: str) -> int:
    return handler.main(["--file", str(path), *argv])


def _names(path) -> List[str]:
    return [r.name for r in LocalRecordStorage(LocalStorage(path)).load()]


def test_list_empty(tmp_path, capsys):
    assert _cli(tmp_path / "ls.json", "list") == 0
    assert EMPTY_MESSAGE in capsys.readouterr().out


def test_add_persists_and_renders(tmp_path, capsys):
    path = tmp_path / "ls.json"
    assert _cli(path, "add", *JANE_ARGS) == 0

    out = capsys.readouterr().out
    assert "Jane Doe" in out and "jane@x.com" in out
    assert _names(path) == ["Jane Doe"]


def test_add_invalid_reports_every_error(tmp_path, capsys):
    path = tmp_path / "ls.json"
    rc = _cli(path, "add", "--name", "A1", "--student-id", "abc", "--email", "jane@x.com")

    err = capsys.readouterr().err
    assert rc == 1
    assert "Name: Enter a valid name (letters and spaces only)." in err
    assert "Student ID: Student ID must be numeric." in err
    assert "Contact: Contact must be numeric and at least 10 digits." in err
    assert "Email:" not in err
    assert _names(path) == []


def test_edit_keeps_unspecified_fields(tmp_path):
    path = tmp_path / "ls.json"
    _cli(path, "add", *JANE_ARGS)

    assert _cli(path, "edit", "1", "--name", "Jane Smith") == 0

    (rec,) = LocalRecordStorage(LocalStorage(path)).load()
    assert rec.name == "Jane Smith"
    assert (rec.student_id, rec.email, rec.contact) == ("101", "jane@x.com", "9876543210")


def test_edit_unknown_row(tmp_path, capsys):
    assert _cli(tmp_path / "ls.json", "edit", "3", "--name", "Zed") == 2
    assert "no record at row 3" in capsys.readouterr().err


def test_delete_prompts_and_respects_decline(tmp_path, monkeypatch):
    path = tmp_path / "ls.json"
    _cli(path, "add", *JANE_ARGS)
    _cli(path, "add", *BOB_ARGS)

    prompts = _answers(monkeypatch, "n", "yes")
    assert _cli(path, "delete", "1") == 1
    assert _names(path) == ["Jane Doe", "Bob Ray"]

    assert _cli(path, "delete", "1") == 0
    assert _names(path) == ["Bob Ray"]
    assert prompts == ["Are you sure you want to delete this record? [y/N] "] * 2


def test_clear_with_yes_skips_prompt(tmp_path, monkeypatch):
    path = tmp_path / "ls.json"
    _cli(path, "add", *JANE_ARGS)
    prompts = _answers(monkeypatch)

    assert _cli(path, "clear", "--yes") == 0
    assert prompts == []
    assert _names(path) == []


def test_confirm_declines_on_eof(tmp_path, monkeypatch):
    path = tmp_path / "ls.json"
    _cli(path, "add", *JANE_ARGS)

    def eof(_prompt: str = "") -> str:
        raise EOFError

    monkeypatch.setattr("builtins.input", eof)
    assert _cli(path, "clear") == 1
    assert _names(path) == ["Jane Doe"]


def test_invalid_fernet_key_is_configuration_error(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("STUDENT_RECORDS_FERNET_KEY", "not-a-key")

    assert _cli(tmp_path / "ls.json", "list") == 2
    assert "invalid storage configuration" in capsys.readouterr().err
