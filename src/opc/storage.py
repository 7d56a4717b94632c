"""Persistence helpers: scan, read, write and delete markdown entries.

The repository is re-read on every call; there is no cache. A missing
content directory reads as an empty corpus and is created on first write.
Malformed front matter is skipped with a warning unless strict=True.
"""
import logging
from pathlib import Path
from typing import List, Union

from opc import front_matter
from opc.errors import ContentIOError, ParseError
from opc.models import Entity

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ContentRepository:
    def __init__(self, content_dir: PathLike, strict: bool = False):
        self.content_dir = Path(content_dir)
        self.strict = strict
        self.skipped: List[ParseError] = []

    # -------------------- queries --------------------
    def list_all(self) -> List[Entity]:
        """Parse every *.md file in the content directory (sorted by name)."""
        self.skipped = []
        if not self.content_dir.is_dir():
            logger.debug("content directory %s does not exist", self.content_dir)
            return []
        entities: List[Entity] = []
        for path in sorted(self.content_dir.glob('*.md')):
            if not path.is_file():
                continue
            try:
                entities.append(self.load(path))
            except ParseError as exc:
                if self.strict:
                    raise
                logger.warning("skipping %s: %s", path.name, exc.reason)
                self.skipped.append(exc)
        logger.debug("scanned %d entries in %s", len(entities), self.content_dir)
        return entities

    def list_projects(self) -> List[Entity]:
        return [e for e in self.list_all() if e.is_project]

    def list_tasks(self) -> List[Entity]:
        return [e for e in self.list_all() if e.is_task]

    def load(self, path: PathLike) -> Entity:
        path = Path(path)
        try:
            text = self.read_text(path)
        except UnicodeDecodeError as exc:
            raise ParseError(str(path), f"not valid UTF-8 ({exc.reason})") from exc
        meta, _ = front_matter.parse(text, str(path))
        return Entity.from_metadata(meta, file_path=str(path), file_name=path.name)

    # -------------------- file operations --------------------
    def file_path(self, file_name: str) -> Path:
        return self.content_dir / file_name

    def read_text(self, path: PathLike) -> str:
        try:
            with open(path, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except OSError as exc:
            raise ContentIOError(str(path), exc) from exc

    def write_new(self, path: PathLike, text: str) -> Path:
        """Create a file; fails instead of overwriting an existing one."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'x', encoding='utf-8', newline='') as f:
                f.write(text)
        except OSError as exc:
            raise ContentIOError(str(path), exc) from exc
        logger.info("created %s", path)
        return path

    def replace(self, path: PathLike, text: str) -> Path:
        path = Path(path)
        try:
            with open(path, 'w', encoding='utf-8', newline='') as f:
                f.write(text)
        except OSError as exc:
            raise ContentIOError(str(path), exc) from exc
        logger.info("rewrote %s", path)
        return path

    def unlink(self, path: PathLike) -> None:
        path = Path(path)
        try:
            path.unlink()
        except OSError as exc:
            raise ContentIOError(str(path), exc) from exc
        logger.info("deleted %s", path)
