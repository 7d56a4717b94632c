"""Human-readable reports for each command.

Every function returns the lines to print; cli.py does the echoing.
"""
from typing import List

from opc.content import CreateResult, DeleteResult, ListResult, UpdateResult, ViewResult, KIND_LABELS
from opc.models import Entity
from opc.theme import (BOLD, DIM, HEADER_COLOR, ID_COLOR, STATUS_COLOR, SUCCESS_COLOR,
                       WARNING_COLOR, color, status_text)

RULE_WIDTH = 62


def _kind(entity: Entity) -> str:
    return KIND_LABELS.get(entity.type, entity.type.capitalize() or "Entry")


def _id_line(entity: Entity) -> str:
    return f"{_kind(entity)} ID: {color(entity.entity_id or '-', ID_COLOR)}"


# -------------------- list --------------------
def list_lines(result: ListResult) -> List[str]:
    lines: List[str] = []
    if result.show_projects and result.projects:
        lines += ["", color("Projects:", HEADER_COLOR, BOLD), "=" * RULE_WIDTH]
        for p in result.projects:
            lines += [
                color(f"Project ID: {p.project_id}", STATUS_COLOR['completed'], BOLD),
                f"Title:  {color(p.display_title, BOLD)}",
                f"Status: {status_text(p.status)}",
                f"File:   {p.file_name}",
                "-" * RULE_WIDTH,
            ]
    if result.show_tasks and result.tasks:
        lines += ["", color("Tasks:", HEADER_COLOR, BOLD), "=" * RULE_WIDTH]
        for t in result.tasks:
            lines += [
                color(f"Task ID: {t.task_id}", STATUS_COLOR['in-progress'], BOLD),
                f"Title:   {color(t.display_title, BOLD)}",
                f"Project: {color(t.project_title or '-', SUCCESS_COLOR)} ({t.project_id or '-'})",
                f"Status:  {status_text(t.status)}",
                f"File:    {t.file_name}",
                "-" * RULE_WIDTH,
            ]
    if not result.projects and not result.tasks:
        lines += ["", color("No matching projects or tasks.", WARNING_COLOR)]
    else:
        lines += ["", color(f"Found {len(result.projects)} project(s) and {len(result.tasks)} task(s).", DIM)]
    return lines


# -------------------- create / update / delete --------------------
def create_lines(result: CreateResult) -> List[str]:
    entity = result.entity
    lines = ["", color(f"{_kind(entity)} created.", SUCCESS_COLOR), _id_line(entity)]
    if result.parent is not None:
        lines.append(f"Project: {color(result.parent.display_title, SUCCESS_COLOR)} ({result.parent.project_id})")
    lines += [
        f"File: {color(str(result.path), DIM)}",
        f"URL:  {result.url}",
    ]
    return lines


def update_lines(result: UpdateResult, entity_id: str) -> List[str]:
    entity = result.entity
    if not result.changed:
        return ["", color(f"Status unchanged, still {result.new_status}.", WARNING_COLOR)]
    return [
        "",
        color(f"{_kind(entity)} status updated.", SUCCESS_COLOR),
        f"ID:     {color(entity_id, ID_COLOR)}",
        f"Title:  {color(entity.display_title, BOLD)}",
        f"Status: {status_text(result.old_status)} -> {status_text(result.new_status)}",
        f"File:   {color(entity.file_path or '', DIM)}",
    ]


def delete_lines(result: DeleteResult, entity_id: str) -> List[str]:
    entity = result.entity
    if not result.deleted:
        return [color("Delete cancelled.", WARNING_COLOR)]
    return [
        "",
        color(f"{_kind(entity)} deleted.", SUCCESS_COLOR),
        f"ID:    {color(entity_id, ID_COLOR)}",
        f"Title: {color(entity.display_title, BOLD)}",
        f"File:  {color(entity.file_path or '', DIM)}",
    ]


def entity_summary_lines(entity: Entity, entity_id: str) -> List[str]:
    """Shown before update/delete prompts so the user sees what was resolved."""
    return [
        "",
        color(f"{_kind(entity)}:", BOLD),
        f"ID:             {color(entity_id, ID_COLOR)}",
        f"Title:          {color(entity.display_title, BOLD)}",
        f"Current status: {status_text(entity.status)}",
    ]


# -------------------- view --------------------
def view_lines(result: ViewResult, entity_id: str) -> List[str]:
    entity = result.entity
    lines = [
        "",
        color(f"{_kind(entity)} location:", SUCCESS_COLOR),
        f"ID:     {color(entity_id, ID_COLOR)}",
        f"Title:  {color(entity.display_title, BOLD)}",
        f"Type:   {entity.type}",
        f"Status: {status_text(entity.status)}",
        f"Path:   {color(str(result.path), DIM)}",
        f"URL:    {result.url}",
    ]
    if entity.is_task:
        suffix = "" if result.parent is not None else color(" [project file missing]", WARNING_COLOR)
        lines.append(f"Project: {color(entity.project_title or '-', SUCCESS_COLOR)} ({entity.project_id or '-'}){suffix}")
    if result.ambiguous:
        lines += ["", color("Warning:", WARNING_COLOR) + color(" several entries match this id", DIM),
                  color("Matching entries:", DIM)]
        for idx, match in enumerate(result.matches, start=1):
            lines.append(color(f"{idx}. {_kind(match)}: {match.display_title} ({match.file_name})", DIM))
        lines.append(color(f'Hint: run "opc list --id {entity_id}" for full details', DIM))
    return lines
