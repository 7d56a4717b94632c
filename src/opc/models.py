"""Data models for the blog content manager.

Exposes the Entity dataclass (one markdown file with front matter) and the
status / kind vocabularies. Front-matter keys stay camelCase on disk because
the site's content collection reads them that way; attributes are snake_case.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

STATUSES: Tuple[str, ...] = ("todo", "in-progress", "completed")
DEFAULT_STATUS = "todo"
KINDS: Tuple[str, ...] = ("project", "task")
ID_PREFIX: Dict[str, str] = {"project": "p", "task": "t"}

# Canonical front-matter order; bracketed keys are only written when set.
FIELD_ORDER: Tuple[str, ...] = (
    "title", "description", "pubDate", "author", "type", "projectId",
    "projectTitle", "taskId", "taskTitle", "status", "image", "tags",
)
_OPTIONAL_KEYS = {"projectTitle", "taskId", "taskTitle"}


@dataclass
class ImageRef:
    url: str = ""
    alt: str = ""


@dataclass
class Entity:
    """A single project, task (or any other post) in the content directory.

    Fields:
        type: "project", "task" or another site type such as "post".
        project_id: Own id for projects, parent reference for tasks.
        task_id: Own id, tasks only.
        project_title: Kept equal to title on projects; parent copy on tasks.
        extra: Unknown front-matter keys, preserved in order.
        file_path / file_name: Derived from the file location, never written.
    """
    title: str = ""
    description: str = ""
    pub_date: str = ""
    author: str = ""
    type: str = "post"
    project_id: Optional[str] = None
    project_title: Optional[str] = None
    task_id: Optional[str] = None
    task_title: Optional[str] = None
    status: str = DEFAULT_STATUS
    image: Optional[ImageRef] = None
    tags: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)
    file_path: Optional[str] = field(default=None, compare=False)
    file_name: Optional[str] = field(default=None, compare=False)

    # -------------------- derived views --------------------
    @property
    def is_project(self) -> bool:
        return self.type == "project"

    @property
    def is_task(self) -> bool:
        return self.type == "task"

    @property
    def display_title(self) -> str:
        if self.is_project:
            return self.project_title or self.title
        if self.is_task:
            return self.task_title or self.title
        return self.title

    @property
    def entity_id(self) -> Optional[str]:
        return self.task_id if self.is_task else self.project_id

    # -------------------- front-matter mapping --------------------
    @classmethod
    def from_metadata(cls, meta: Dict[str, Any], file_path: Optional[str] = None,
                      file_name: Optional[str] = None) -> "Entity":
        """Build an Entity from parsed front matter.

        Missing keys fall back to the site collection defaults (type "post",
        status "todo", no tags). YAML dates are normalised to ISO strings.
        """
        raw_image = meta.get("image")
        image = None
        if isinstance(raw_image, dict):
            image = ImageRef(url=_text(raw_image.get("url")), alt=_text(raw_image.get("alt")))
        raw_tags = meta.get("tags") or []
        if not isinstance(raw_tags, (list, tuple)):
            raw_tags = [raw_tags]
        return cls(
            title=_text(meta.get("title")),
            description=_text(meta.get("description")),
            pub_date=_text(meta.get("pubDate")),
            author=_text(meta.get("author")),
            type=_text(meta.get("type")) or "post",
            project_id=_optional_text(meta.get("projectId")),
            project_title=_optional_text(meta.get("projectTitle")),
            task_id=_optional_text(meta.get("taskId")),
            task_title=_optional_text(meta.get("taskTitle")),
            status=_text(meta.get("status")) or DEFAULT_STATUS,
            image=image,
            tags=[_text(t) for t in raw_tags],
            extra={k: v for k, v in meta.items() if k not in FIELD_ORDER},
            file_path=file_path,
            file_name=file_name,
        )

    def to_metadata(self) -> Dict[str, Any]:
        """Ordered front-matter mapping (insertion order == FIELD_ORDER)."""
        values: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "pubDate": self.pub_date,
            "author": self.author,
            "type": self.type,
            "projectId": self.project_id,
            "projectTitle": self.project_title,
            "taskId": self.task_id,
            "taskTitle": self.task_title,
            "status": self.status,
            "image": {"url": self.image.url, "alt": self.image.alt} if self.image else None,
            "tags": list(self.tags),
        }
        meta: Dict[str, Any] = {}
        for key in FIELD_ORDER:
            value = values[key]
            if value is None and (key in _OPTIONAL_KEYS or key in ("projectId", "image")):
                continue
            meta[key] = value
        meta.update(self.extra)
        return meta

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Entity(type={self.type}, id={self.entity_id}, title={self.display_title}, status={self.status})"


def _text(value: Any) -> str:
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return _text(value)
