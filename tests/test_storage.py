"""Tests for the content repository (scan, filters, malformed files, writes)."""

import logging
from pathlib import Path

import pytest

from conftest import project_doc, task_doc
from opc.errors import ContentIOError, ParseError
from opc.storage import ContentRepository

BROKEN = "---\ntitle: [unclosed\n---\n\nbody\n"


def test_list_all_attaches_file_fields(repository, write_entry, content_dir: Path) -> None:
    write_entry("2024-01-01-P.md", project_doc("p1", "P"))
    (entity,) = repository.list_all()
    assert entity.file_name == "2024-01-01-P.md"
    assert entity.file_path == str(content_dir / "2024-01-01-P.md")
    assert entity.project_id == "p1"


def test_list_all_ignores_non_markdown_and_subdirectories(repository, write_entry, content_dir: Path) -> None:
    write_entry("notes.txt", project_doc("p9", "Nope"))
    (content_dir / "drafts").mkdir()
    (content_dir / "drafts" / "2024-01-01-D.md").write_text(project_doc("p8", "D"), encoding="utf-8")
    write_entry("2024-01-01-P.md", project_doc("p1", "P"))
    assert [e.project_id for e in repository.list_all()] == ["p1"]


def test_missing_directory_is_empty(tmp_path: Path) -> None:
    assert ContentRepository(tmp_path / "absent").list_all() == []


def test_filters_by_type(repository, write_entry) -> None:
    write_entry("a.md", project_doc("p1", "P"))
    write_entry("b.md", task_doc("t1", "p1", "T"))
    write_entry("c.md", "---\ntitle: Just a post\n---\n\nhello\n")
    assert [e.project_id for e in repository.list_projects()] == ["p1"]
    assert [e.task_id for e in repository.list_tasks()] == ["t1"]
    assert len(repository.list_all()) == 3


def test_malformed_file_is_skipped_with_warning(repository, write_entry, caplog) -> None:
    write_entry("a.md", project_doc("p1", "P"))
    write_entry("broken.md", BROKEN)
    with caplog.at_level(logging.WARNING, logger="opc"):
        entities = repository.list_all()
    assert [e.project_id for e in entities] == ["p1"]
    assert [err.path.endswith("broken.md") for err in repository.skipped] == [True]
    assert "broken.md" in caplog.text


def test_malformed_file_aborts_in_strict_mode(content_dir: Path, write_entry) -> None:
    write_entry("broken.md", BROKEN)
    with pytest.raises(ParseError):
        ContentRepository(content_dir, strict=True).list_all()


def test_write_new_never_overwrites(repository, content_dir: Path) -> None:
    path = content_dir / "x.md"
    repository.write_new(path, "first")
    with pytest.raises(ContentIOError):
        repository.write_new(path, "second")
    assert path.read_text(encoding="utf-8") == "first"


def test_write_new_creates_directory(tmp_path: Path) -> None:
    repo = ContentRepository(tmp_path / "new" / "blog")
    repo.write_new(repo.file_path("a.md"), "x")
    assert (tmp_path / "new" / "blog" / "a.md").is_file()


def test_unlink_missing_file_raises(repository, content_dir: Path) -> None:
    with pytest.raises(ContentIOError):
        repository.unlink(content_dir / "gone.md")


BAD_FILES = {
    "bad-date.md": "---\ntitle: T\ntype: project\nprojectId: p2\npubDate: 2024-13-45\n---\n\nbody\n".encode("utf-8"),
    "bad-bytes.md": b"---\ntitle: \xff\xfe\ntype: project\nprojectId: p3\n---\n\nbody\n",
    "list-header.md": b"---\n- a\n- b\n---\n\nbody\n",
}


@pytest.mark.parametrize("name", sorted(BAD_FILES))
def test_unreadable_entries_are_skipped(repository, write_entry, content_dir: Path, name: str) -> None:
    write_entry("a.md", project_doc("p1", "P"))
    (content_dir / name).write_bytes(BAD_FILES[name])
    entities = repository.list_all()
    assert [e.project_id for e in entities] == ["p1"]
    assert [Path(err.path).name for err in repository.skipped] == [name]


@pytest.mark.parametrize("name", sorted(BAD_FILES))
def test_unreadable_entries_abort_in_strict_mode(content_dir: Path, write_entry, name: str) -> None:
    write_entry("a.md", project_doc("p1", "P"))
    (content_dir / name).write_bytes(BAD_FILES[name])
    with pytest.raises(ParseError):
        ContentRepository(content_dir, strict=True).list_all()


def test_scalar_tags_do_not_break_scan(repository, write_entry) -> None:
    write_entry("a.md", "---\ntitle: T\ntype: project\nprojectId: p1\ntags: 5\n---\n\nbody\n")
    (entity,) = repository.list_all()
    assert entity.tags == ["5"]
