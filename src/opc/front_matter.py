"""Front-matter codec: parse with python-frontmatter, write in a fixed layout.

Decisions:
- Reading goes through python-frontmatter (YAML, safe loader).
- Writing is line oriented so the layout stays stable: one key per line in
  FIELD_ORDER, tags as a bracketed JSON-style list, image as a nested block.
- Status updates rewrite a single line in place instead of re-dumping the
  whole header, so hand edits elsewhere in the file survive untouched.
"""
from __future__ import annotations
import json
import re
from typing import Any, Dict, List, Mapping, Tuple

import frontmatter
import yaml

from opc.errors import ParseError

DELIMITER = "---"
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


_YAML_HANDLER = frontmatter.YAMLHandler()


def _load_header(text: str) -> Any:
    """Raw YAML value of the header block, or None when there is no block."""
    text = text.strip()
    if not _YAML_HANDLER.detect(text):
        return None
    try:
        header, _ = _YAML_HANDLER.split(text)
    except ValueError:
        return None
    return _YAML_HANDLER.load(header)


def parse(text: str, path: str = "<string>") -> Tuple[Dict[str, Any], str]:
    """Return (metadata, body).

    Raises ParseError on invalid YAML, on values YAML cannot build (such as
    an impossible date) and on a header that is not a key/value mapping.
    """
    try:
        header = _load_header(text)
        post = frontmatter.loads(text)
    except (yaml.YAMLError, ValueError) as exc:
        raise ParseError(path, _first_line(str(exc))) from exc
    if header is not None and not isinstance(header, dict):
        raise ParseError(path, "front matter is not a mapping")
    return dict(post.metadata), post.content


def format_field(key: str, value: Any) -> str:
    """Render one top-level key (may span lines for nested mappings)."""
    if key == "tags" and isinstance(value, (list, tuple)):
        return f"{key}: {json.dumps([str(v) for v in value], ensure_ascii=False)}\n"
    if key == "pubDate" and isinstance(value, str) and ISO_DATE_RE.match(value):
        return f"{key}: {value}\n"
    return yaml.safe_dump(
        {key: value},
        allow_unicode=True,
        sort_keys=False,
        default_flow_style=False,
        width=float("inf"),
    )


def serialize(metadata: Mapping[str, Any], body: str = "") -> str:
    """Build a complete markdown document: header, blank line, body."""
    header = "".join(format_field(k, v) for k, v in metadata.items())
    return f"{DELIMITER}\n{header}{DELIMITER}\n\n{body}"


def replace_field(text: str, key: str, value: Any, path: str = "<string>") -> str:
    """Rewrite a single top-level front-matter key, leaving other bytes alone.

    The key is appended just before the closing delimiter when missing.
    """
    lines: List[str] = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip("\r\n") != DELIMITER:
        raise ParseError(path, "missing front matter block")
    end = None
    for idx in range(1, len(lines)):
        if lines[idx].rstrip("\r\n") == DELIMITER:
            end = idx
            break
    if end is None:
        raise ParseError(path, "unterminated front matter block")

    newline = "\r\n" if lines[0].endswith("\r\n") else "\n"
    rendered = format_field(key, value).replace("\n", newline)
    key_re = re.compile(rf"^{re.escape(key)}\s*:")
    for idx in range(1, end):
        if key_re.match(lines[idx]):
            # drop indented continuation lines of a nested value
            stop = idx + 1
            while stop < end and lines[stop][:1] in (" ", "\t"):
                stop += 1
            return "".join(lines[:idx]) + rendered + "".join(lines[stop:])
    return "".join(lines[:end]) + rendered + "".join(lines[end:])


def _first_line(message: str) -> str:
    return message.strip().splitlines()[0] if message.strip() else "invalid YAML"
