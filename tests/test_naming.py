"""Tests for id allocation and title -> file name / URL derivation."""

from datetime import date

import pytest

from opc import naming

DAY = date(2024, 1, 1)
MS = 1704067200123


# --- ids ---


def test_next_id_starts_at_one() -> None:
    assert naming.next_id("project", []) == "p1"
    assert naming.next_id("task", []) == "t1"


def test_next_id_uses_max_not_count() -> None:
    assert naming.next_id("project", ["p1", "p7", "p3"]) == "p8"


def test_next_id_ignores_malformed_ids() -> None:
    assert naming.next_id("task", ["t2", "tx", "", None, "t", "p9", "t10a"]) == "t3"


def test_next_id_is_numeric_not_lexicographic() -> None:
    assert naming.next_id("project", ["p9", "p10"]) == "p11"


@pytest.mark.parametrize(
    "value,expected",
    [("p12", 12), (" p3 ", 3), ("p", None), ("pp1", None), ("t1", None), (None, None)],
)
def test_id_number(value, expected) -> None:
    assert naming.id_number(value, "p") == expected


# --- file names ---


def test_file_name_replaces_spaces() -> None:
    assert naming.file_name("My Project", "project", DAY) == "2024-01-01-My-Project.md"


def test_file_name_replaces_unsafe_characters() -> None:
    name = naming.file_name('a/b\\c:d*e?f"g<h>i|j', "task", DAY)
    assert name == "2024-01-01-a-b-c-d-e-f-g-h-i-j.md"
    for ch in '/\\:*?"<>|':
        assert ch not in name


def test_file_name_truncates_long_titles() -> None:
    name = naming.file_name("x" * 80, "project", DAY)
    slug = name[len("2024-01-01-"):-len(".md")]
    assert slug == "x" * 50


def test_file_name_truncation_does_not_end_with_hyphen() -> None:
    name = naming.file_name("a" * 49 + " tail", "project", DAY)
    assert name == "2024-01-01-" + "a" * 49 + ".md"


@pytest.mark.parametrize("title", ["", "   ", None, "\t\n"])
def test_file_name_blank_title_uses_timestamp(title) -> None:
    assert naming.file_name(title, "task", DAY, MS) == "2024-01-01-task-200123.md"


def test_file_name_keeps_non_ascii_titles() -> None:
    assert naming.file_name("我的项目", "project", DAY) == "2024-01-01-我的项目.md"


def test_disambiguate_appends_counter() -> None:
    taken = {"2024-01-01-A.md", "2024-01-01-A-2.md"}
    assert naming.disambiguate("2024-01-01-A.md", taken.__contains__) == "2024-01-01-A-3.md"
    assert naming.disambiguate("2024-01-01-B.md", taken.__contains__) == "2024-01-01-B.md"


# --- urls ---


def test_build_url_strips_date_and_extension() -> None:
    url = naming.build_url("http://localhost:4321/blog/", "2024-01-01-My-Project.md")
    assert url == "http://localhost:4321/blog/My-Project"


def test_build_url_percent_encodes() -> None:
    url = naming.build_url("https://example.org/blog/", "2024-01-01-我的项目.md")
    assert url == "https://example.org/blog/%E6%88%91%E7%9A%84%E9%A1%B9%E7%9B%AE"


def test_build_url_without_date_prefix() -> None:
    assert naming.build_url("/blog/", "about.md") == "/blog/about"


# --- transliteration ---


def test_transliterate_folds_accents() -> None:
    assert naming.transliterate("Café Déjà Vu!") == "cafe-deja-vu"


def test_transliterate_falls_back_when_nothing_ascii_survives() -> None:
    assert naming.transliterate("我的项目", MS) == "我的项-200123"
