"""Identifier allocation and title -> file name / URL derivation.

Decisions:
- IDs are "<prefix><N>"; the next one is max(N) + 1 over live entries, so a
  deleted id is never handed out again while a higher one exists.
- File names keep the title verbatim (CJK and other scripts included); only
  characters the file system rejects are replaced.
- Whitespace runs become a single hyphen so "My Project" -> "My-Project".
"""
from __future__ import annotations
import re
import time
import unicodedata
from datetime import date
from pathlib import Path
from typing import Iterable, Optional
from urllib.parse import quote

from opc.models import ID_PREFIX

MAX_TITLE_LENGTH = 50
UNSAFE_CHARS_RE = re.compile(r'[/\\:*?"<>|]')
WHITESPACE_RE = re.compile(r"\s+")
DATE_PREFIX_RE = re.compile(r"^\d{4}-\d{2}-\d{2}-(.+)\.md$")


# -------------------- ids --------------------
def id_number(entity_id: Optional[str], prefix: str) -> Optional[int]:
    """Numeric suffix of an id, or None when it does not look like prefix+digits."""
    if not entity_id:
        return None
    match = re.fullmatch(rf"{re.escape(prefix)}(\d+)", entity_id.strip())
    return int(match.group(1)) if match else None


def next_id(kind: str, existing: Iterable[Optional[str]]) -> str:
    prefix = ID_PREFIX[kind]
    numbers = [n for n in (id_number(i, prefix) for i in existing) if n is not None]
    return f"{prefix}{max(numbers, default=0) + 1}"


# -------------------- file names --------------------
def timestamp_suffix(now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return str(now_ms)[-6:]


def sanitize_title(title: str) -> str:
    safe = UNSAFE_CHARS_RE.sub('-', title).strip()
    return WHITESPACE_RE.sub('-', safe)


def file_name(title: Optional[str], kind: str, today: Optional[date] = None,
              now_ms: Optional[int] = None) -> str:
    """'<YYYY-MM-DD>-<title>.md', or '<YYYY-MM-DD>-<kind>-<stamp>.md' for blank titles."""
    day = (today or date.today()).isoformat()
    safe = sanitize_title(title or '')
    if not safe:
        return f"{day}-{kind}-{timestamp_suffix(now_ms)}.md"
    truncated = safe[:MAX_TITLE_LENGTH].rstrip('-') or safe[:MAX_TITLE_LENGTH]
    return f"{day}-{truncated}.md"


def disambiguate(name: str, taken) -> str:
    """Append -2, -3, ... before the extension until `taken(name)` is False."""
    if not taken(name):
        return name
    stem = name[:-3] if name.endswith('.md') else name
    counter = 2
    while taken(f"{stem}-{counter}.md"):
        counter += 1
    return f"{stem}-{counter}.md"


def file_path(content_dir, name: str) -> Path:
    return Path(content_dir) / name


def build_url(base_url: str, name: str) -> str:
    """Public URL for a content file: date prefix and .md stripped, percent-encoded."""
    match = DATE_PREFIX_RE.match(name)
    slug = match.group(1) if match else re.sub(r"\.md$", "", name)
    return f"{base_url}{quote(slug, safe='')}"


# -------------------- transliteration --------------------
def transliterate(text: str, now_ms: Optional[int] = None) -> str:
    """Best-effort ASCII slug for titles in other scripts.

    Accents are folded away; characters without an ASCII form are dropped.
    When nothing survives, the first three characters plus a timestamp
    fragment are used so the result is never empty.
    """
    folded = unicodedata.normalize('NFKD', text).encode('ascii', 'ignore').decode('ascii')
    slug = re.sub(r"[^a-z0-9]+", '-', folded.lower()).strip('-')
    if slug:
        return slug
    return f"{text.strip()[:3]}-{timestamp_suffix(now_ms)}"
