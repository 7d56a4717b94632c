"""Content operations: id allocation, id resolution, create/update/delete/list/view.

Every operation re-scans the content directory; the files are the only
state. Errors are raised (see opc.errors) and reported by the CLI layer.
Nothing is written until all input has been validated.
"""
from __future__ import annotations
import logging
import time
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from opc import front_matter, naming
from opc.errors import ContentIOError, InvalidStatus, NotFound, OpcError, ValidationError
from opc.models import DEFAULT_STATUS, ID_PREFIX, KINDS, STATUSES, Entity, ImageRef
from opc.prompts import AnswerProvider, ScriptedAnswers
from opc.storage import ContentRepository

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / 'templates'
DEFAULT_IMAGE = {
    'project': ("https://placehold.co/600x400?text=项目封面", "项目封面图片"),
    'task': ("https://placehold.co/600x400?text=任务封面", "任务封面图片"),
}
KIND_LABELS = {'project': "Project", 'task': "Task"}


class Cancelled(OpcError):
    """The user declined to continue; nothing was written."""


# -------------------- results --------------------
@dataclass
class CreateResult:
    entity: Entity
    path: Path
    url: str
    parent: Optional[Entity] = None


@dataclass
class UpdateResult:
    entity: Entity
    old_status: str
    new_status: str

    @property
    def changed(self) -> bool:
        return self.old_status != self.new_status


@dataclass
class DeleteResult:
    entity: Entity
    deleted: bool


@dataclass
class ListResult:
    projects: List[Entity] = field(default_factory=list)
    tasks: List[Entity] = field(default_factory=list)
    show_projects: bool = True
    show_tasks: bool = True


@dataclass
class ViewResult:
    entity: Entity
    path: Path
    url: str
    parent: Optional[Entity] = None
    matches: List[Entity] = field(default_factory=list)

    @property
    def ambiguous(self) -> bool:
        return len(self.matches) > 1


def validate_status(status: str) -> str:
    if status not in STATUSES:
        raise InvalidStatus(status, STATUSES)
    return status


def render_template(kind: str, title: str, description: str,
                    template_dir: Path = TEMPLATE_DIR) -> str:
    path = template_dir / f"{kind}-template.md"
    try:
        template = path.read_text(encoding='utf-8')
    except OSError as exc:
        raise ContentIOError(str(path), exc) from exc
    return template.replace("{{title}}", title).replace("{{description}}", description)


class ContentManager:
    def __init__(self, repository: ContentRepository, base_url: str, author: str = "",
                 answers: Optional[AnswerProvider] = None,
                 today: Optional[Callable[[], date]] = None,
                 clock_ms: Optional[Callable[[], int]] = None,
                 template_dir: Path = TEMPLATE_DIR):
        self.repository = repository
        self.base_url = base_url
        self.author = author
        self.answers: AnswerProvider = answers or ScriptedAnswers()
        self._today = today or date.today
        self._clock_ms = clock_ms or (lambda: int(time.time() * 1000))
        self.template_dir = template_dir

    # -------------------- id management --------------------
    def next_id(self, kind: str, entities: Optional[Sequence[Entity]] = None) -> str:
        """Next free '<prefix><N>' for a kind: max existing N + 1 (p1/t1 when empty)."""
        if kind not in ID_PREFIX:
            raise ValidationError(f'Unknown kind "{kind}". Use "project" or "task".')
        entities = self.repository.list_all() if entities is None else entities
        if kind == 'project':
            existing = [e.project_id for e in entities if e.is_project]
        else:
            existing = [e.task_id for e in entities if e.is_task]
        return naming.next_id(kind, existing)

    # -------------------- resolution --------------------
    def find_by_id(self, entity_id: str,
                   entities: Optional[Sequence[Entity]] = None) -> Optional[Entity]:
        """Resolve an id to one entry.

        "p..." prefers the project owning the id, then any entry carrying it as
        projectId (e.g. a task whose project file is gone). "t..." does the
        same for tasks. Anything else matches projectId or taskId. First match
        in file-name order wins.
        """
        entities = self.repository.list_all() if entities is None else entities
        if entity_id.startswith('p'):
            for e in entities:
                if e.project_id == entity_id and e.is_project:
                    return e
            return next((e for e in entities if e.project_id == entity_id), None)
        if entity_id.startswith('t'):
            for e in entities:
                if e.task_id == entity_id and e.is_task:
                    return e
            return next((e for e in entities if e.task_id == entity_id), None)
        return next((e for e in entities
                     if e.project_id == entity_id or e.task_id == entity_id), None)

    def find_matches(self, entity_id: str,
                     entities: Optional[Sequence[Entity]] = None) -> List[Entity]:
        entities = self.repository.list_all() if entities is None else entities
        return [e for e in entities if e.project_id == entity_id or e.task_id == entity_id]

    def require(self, entity_id: str,
                entities: Optional[Sequence[Entity]] = None) -> Entity:
        entity = self.find_by_id(entity_id.strip(), entities)
        if entity is None:
            raise NotFound(entity_id)
        return entity

    def url_for(self, entity: Entity) -> str:
        return naming.build_url(self.base_url, entity.file_name or '')

    # -------------------- create --------------------
    def create(self, kind: Optional[str] = None, ascii_name: bool = False) -> CreateResult:
        if not kind:
            kind = self.answers.choose(
                'type', "Type to create",
                [('project', "project - a new project"),
                 ('task', "task - a task linked to a project")],
                default='project',
            )
        if kind not in KINDS:
            raise ValidationError(f'Invalid type "{kind}". Use "project" or "task".')

        entities = self.repository.list_all()
        parent = self._choose_parent(entities) if kind == 'task' else None
        new_id = self.next_id(kind, entities)
        label = KIND_LABELS[kind]

        title = self.answers.text('title', f"{label} title", required=True).strip()
        if not title:
            raise ValidationError("Title must not be empty.")
        description = self.answers.text('description', f"{label} description", required=True).strip()
        if not description:
            raise ValidationError("Description must not be empty.")
        raw_tags = self.answers.text('tags', "Tags (comma separated)", default='')
        tags = [t.strip() for t in raw_tags.split(',') if t.strip()]
        status = validate_status(self.answers.choose(
            'status', f"{label} status", [(s, s) for s in STATUSES], default=DEFAULT_STATUS))
        default_url, default_alt = DEFAULT_IMAGE[kind]
        image = ImageRef(
            url=self.answers.text('image_url', "Cover image URL (optional)", default=default_url).strip(),
            alt=self.answers.text('image_alt', "Cover image alt text (optional)", default=default_alt).strip(),
        )

        today = self._today()
        entity = Entity(
            title=title,
            description=description,
            pub_date=today.isoformat(),
            author=self.author,
            type=kind,
            status=status,
            image=image,
            tags=tags,
        )
        if kind == 'project':
            entity.project_id = new_id
            entity.project_title = title
        else:
            entity.project_id = parent.project_id
            entity.project_title = parent.display_title
            entity.task_id = new_id
            entity.task_title = title

        name_source = naming.transliterate(title, self._clock_ms()) if ascii_name else title
        name = naming.file_name(name_source, kind, today, self._clock_ms())
        name = naming.disambiguate(name, lambda n: self.repository.file_path(n).exists())
        path = self.repository.file_path(name)
        body = render_template(kind, title, description, self.template_dir)
        self.repository.write_new(path, front_matter.serialize(entity.to_metadata(), body))

        entity.file_path = str(path)
        entity.file_name = name
        logger.info("created %s %s at %s", kind, new_id, path)
        return CreateResult(entity=entity, path=path, url=self.url_for(entity), parent=parent)

    def _choose_parent(self, entities: Sequence[Entity]) -> Entity:
        projects = [e for e in entities if e.is_project and e.project_id]
        if not projects:
            raise ValidationError("No projects yet. Create a project first.")
        offered = [p for p in projects if p.status != 'completed']
        if not offered:
            show_all = self.answers.confirm(
                'show_all', "Every project is completed. Show completed projects too?", default=False)
            if not show_all:
                raise Cancelled("Create a new project or reopen an existing one first.")
            offered = projects
        choices = [
            (p.project_id, f"{p.display_title} ({p.project_id})"
                           + (" [completed]" if p.status == 'completed' else ""))
            for p in offered
        ]
        chosen = self.answers.choose('project', "Parent project", choices, default=offered[0].project_id)
        for p in offered:
            if p.project_id == chosen:
                return p
        raise ValidationError(f'"{chosen}" is not one of the offered projects.')

    # -------------------- update --------------------
    def update(self, entity_id: str, status: Optional[str] = None) -> UpdateResult:
        entity = self.require(entity_id)
        if status is None:
            status = self.answers.choose(
                'status', f"New status for {entity_id}",
                [(s, s + (" (current)" if s == entity.status else "")) for s in STATUSES],
                default=entity.status if entity.status in STATUSES else DEFAULT_STATUS,
            )
        new_status = validate_status(status)
        old_status = entity.status
        if new_status == old_status:
            logger.debug("%s already %s; nothing written", entity_id, new_status)
            return UpdateResult(entity, old_status, new_status)

        text = self.repository.read_text(entity.file_path)
        updated = front_matter.replace_field(text, 'status', new_status, entity.file_path)
        self.repository.replace(entity.file_path, updated)
        entity.status = new_status
        return UpdateResult(entity, old_status, new_status)

    # -------------------- delete --------------------
    def delete(self, entity_id: str, assume_yes: bool = False) -> DeleteResult:
        """Remove the resolved file. Tasks of a deleted project are left in place."""
        entity = self.require(entity_id)
        if not assume_yes:
            kind = KIND_LABELS.get(entity.type, entity.type)
            confirmed = self.answers.confirm(
                'confirm', f'Delete {kind.lower()} "{entity.display_title}" ({entity_id})?', default=False)
            if not confirmed:
                return DeleteResult(entity, deleted=False)
        self.repository.unlink(entity.file_path)
        return DeleteResult(entity, deleted=True)

    # -------------------- list / view --------------------
    def list_entities(self, projects: bool = False, tasks: bool = False,
                      entity_id: Optional[str] = None, status: Optional[str] = None) -> ListResult:
        if status is not None:
            validate_status(status)
        entities = self.repository.list_all()
        result = ListResult(show_projects=not tasks or projects,
                            show_tasks=not projects or tasks)
        if result.show_projects:
            result.projects = [
                e for e in entities if e.is_project
                and (entity_id is None or e.project_id == entity_id)
                and (status is None or e.status == status)
            ]
        if result.show_tasks:
            result.tasks = [
                e for e in entities if e.is_task
                and (entity_id is None or e.task_id == entity_id)
                and (status is None or e.status == status)
            ]
        return result

    def view(self, entity_id: str) -> ViewResult:
        entity_id = entity_id.strip()
        entities = self.repository.list_all()
        entity = self.require(entity_id, entities)
        parent = None
        if entity.is_task and entity.project_id:
            parent = next((e for e in entities
                           if e.is_project and e.project_id == entity.project_id), None)
        # fresh scan: collisions are reported against what is on disk now
        matches = self.find_matches(entity_id)
        return ViewResult(
            entity=entity,
            path=Path(entity.file_path).resolve(),
            url=self.url_for(entity),
            parent=parent,
            matches=matches,
        )
