"""Unit tests for archive directories, collision numbering and copying."""

from __future__ import annotations

import pytest

from mailnamer.errors import ValidationError
from mailnamer.output import copy_message, ensure_directory, resolve_collision


@pytest.mark.unit
def test_resolve_collision_returns_plain_path_when_free(tmp_path) -> None:
    assert resolve_collision(tmp_path / "Report", "msg") == tmp_path / "Report.msg"


@pytest.mark.unit
def test_resolve_collision_picks_first_free_number(tmp_path) -> None:
    (tmp_path / "Report.msg").write_bytes(b"")
    (tmp_path / "Report (1).msg").write_bytes(b"")

    assert resolve_collision(tmp_path / "Report", "msg") == tmp_path / "Report (2).msg"


@pytest.mark.unit
def test_resolve_collision_does_not_fill_gaps_before_first_free(tmp_path) -> None:
    (tmp_path / "Report.msg").write_bytes(b"")
    (tmp_path / "Report (2).msg").write_bytes(b"")

    assert resolve_collision(tmp_path / "Report", "msg") == tmp_path / "Report (1).msg"


@pytest.mark.unit
def test_resolve_collision_keeps_dots_in_base_name(tmp_path) -> None:
    (tmp_path / "Re v1.2.eml").write_bytes(b"")

    assert resolve_collision(str(tmp_path / "Re v1.2"), ".eml") == tmp_path / "Re v1.2 (1).eml"


@pytest.mark.unit
def test_resolve_collision_without_extension(tmp_path) -> None:
    (tmp_path / "notes").write_bytes(b"")

    assert resolve_collision(tmp_path / "notes", "") == tmp_path / "notes (1)"


@pytest.mark.unit
def test_resolve_collision_treats_reserved_paths_as_taken(tmp_path) -> None:
    reserved = {tmp_path / "Report.eml", tmp_path / "Report (1).eml"}

    assert resolve_collision(tmp_path / "Report", "eml", reserved=reserved) == tmp_path / "Report (2).eml"


@pytest.mark.unit
def test_ensure_directory_creates_parents(tmp_path) -> None:
    target = tmp_path / "2024" / "01"

    assert ensure_directory(target) == target
    assert target.is_dir()
    assert ensure_directory(target) == target


@pytest.mark.unit
def test_ensure_directory_rejects_existing_file(tmp_path) -> None:
    blocker = tmp_path / "archive"
    blocker.write_text("not a folder", encoding="utf-8")

    with pytest.raises(ValidationError, match="what: output directory is not a directory"):
        ensure_directory(blocker)


@pytest.mark.unit
def test_copy_message_creates_parent_and_copies_bytes(tmp_path) -> None:
    source = tmp_path / "in.eml"
    source.write_bytes(b"Subject: hi\r\n\r\nbody")
    destination = tmp_path / "nested" / "out.eml"

    assert copy_message(source=source, destination=destination) == destination
    assert destination.read_bytes() == source.read_bytes()
