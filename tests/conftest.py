"""Shared fixtures: a temporary content directory and a headless manager."""

from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pytest

from opc.content import ContentManager
from opc.prompts import ScriptedAnswers
from opc.storage import ContentRepository

FIXED_DAY = date(2024, 1, 1)
FIXED_MS = 1704067200123
BASE_URL = "http://localhost:4321/blog/"


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    path = tmp_path / "blog"
    path.mkdir()
    return path


@pytest.fixture
def repository(content_dir: Path) -> ContentRepository:
    return ContentRepository(content_dir)


@pytest.fixture
def make_manager(repository: ContentRepository) -> Callable[..., ContentManager]:
    """Build a manager whose prompts are answered from a dict."""

    def _make(answers: Optional[Dict[str, Any]] = None) -> ContentManager:
        return ContentManager(
            repository,
            base_url=BASE_URL,
            author="博主",
            answers=ScriptedAnswers(answers),
            today=lambda: FIXED_DAY,
            clock_ms=lambda: FIXED_MS,
        )

    return _make


@pytest.fixture
def write_entry(content_dir: Path) -> Callable[[str, str], Path]:
    def _write(name: str, text: str) -> Path:
        path = content_dir / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


def project_doc(project_id: str, title: str, status: str = "todo") -> str:
    return (
        "---\n"
        f"title: {title}\n"
        "description: d\n"
        "pubDate: 2024-01-01\n"
        "type: project\n"
        f"projectId: {project_id}\n"
        f"projectTitle: {title}\n"
        f"status: {status}\n"
        "---\n\nbody\n"
    )


def task_doc(task_id: str, project_id: str, title: str, project_title: str = "P",
             status: str = "todo") -> str:
    return (
        "---\n"
        f"title: {title}\n"
        "description: d\n"
        "pubDate: 2024-01-01\n"
        "type: task\n"
        f"projectId: {project_id}\n"
        f"projectTitle: {project_title}\n"
        f"taskId: {task_id}\n"
        f"taskTitle: {title}\n"
        f"status: {status}\n"
        "---\n\nbody\n"
    )
