from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from profilesync.adapters.session_file import load_stored_session
from profilesync.domain.model import Language

if TYPE_CHECKING:
    from pathlib import Path


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_stored_session_builds_identity(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "session.json",
        {
            "token": "token-123",
            "user": {
                "_id": "64f1c0ffee",
                "fullName": "Ann",
                "email": "ann@x.com",
                "role": "buyer",
                "preferences": {"language": "fr"},
            },
        },
    )

    identity = load_stored_session(path)

    assert identity is not None
    assert identity.id == "64f1c0ffee"
    assert identity.credential == "token-123"
    assert identity.display_name == "Ann"
    assert identity.language is Language.FR
    assert identity.push_notifications is True


def test_missing_file_is_no_session(tmp_path: Path) -> None:
    assert load_stored_session(tmp_path / "absent.json") is None


def test_default_path_comes_from_data_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("PROFILESYNC_DATA_DIR", str(tmp_path))
    _write(
        tmp_path / "session.json",
        {"token": "t", "user": {"id": "1", "email": "a@b.c"}},
    )

    identity = load_stored_session()

    assert identity is not None
    assert identity.id == "1"


@pytest.mark.parametrize(
    "payload",
    [
        {"token": "undefined", "user": {"id": "1", "email": "a@b.c"}},
        {"token": "null", "user": {"id": "1", "email": "a@b.c"}},
        {"token": "  ", "user": {"id": "1", "email": "a@b.c"}},
        {"token": "t", "user": {"email": "a@b.c"}},
        {"token": "t", "user": {"id": "1"}},
        {"token": "t"},
        ["not", "an", "object"],
    ],
)
def test_incomplete_entries_are_no_session(tmp_path: Path, payload: object) -> None:
    assert load_stored_session(_write(tmp_path / "session.json", payload)) is None


def test_corrupt_file_is_no_session(tmp_path: Path) -> None:
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_stored_session(path) is None
