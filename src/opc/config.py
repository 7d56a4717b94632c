"""Runtime settings for the content manager.

Decisions:
- Priority: real env var > .env file in the working directory > default.
- Command-line options override all three (applied in cli.py).
- The content directory default is the blog collection of the Astro site,
  relative to the directory the command runs in.
"""
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

DEFAULT_CONTENT_DIR = Path("src") / "content" / "blog"
DEFAULT_BASE_URL = "http://localhost:4321/blog/"
DEFAULT_AUTHOR = "博主"

SETTING_KEYS = {"OPC_CONTENT_DIR", "OPC_BASE_URL", "OPC_AUTHOR", "OPC_STRICT"}


@dataclass
class Settings:
    content_dir: Path = DEFAULT_CONTENT_DIR
    base_url: str = DEFAULT_BASE_URL
    author: str = DEFAULT_AUTHOR
    strict: bool = False


def _truthy(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def read_env_file(path: Path, keys=SETTING_KEYS) -> Dict[str, str]:
    """Parse KEY=VALUE lines, keeping only the requested keys.

    Blank lines and '#' comments are skipped; surrounding quotes are removed.
    """
    overrides: Dict[str, str] = {}
    if not path.is_file():
        return overrides
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        v = v.strip().strip('"').strip("'")
        if k in keys:
            overrides[k] = v
    return overrides


def load_settings(environ: Optional[Mapping[str, str]] = None,
                  env_file: Optional[Path] = None) -> Settings:
    environ = os.environ if environ is None else environ
    env_file = Path.cwd() / '.env' if env_file is None else env_file
    file_values = read_env_file(env_file)

    def pick(key: str) -> Optional[str]:
        return environ.get(key) or file_values.get(key)

    content_dir = pick('OPC_CONTENT_DIR')
    return Settings(
        content_dir=Path(content_dir).expanduser() if content_dir else DEFAULT_CONTENT_DIR,
        base_url=pick('OPC_BASE_URL') or DEFAULT_BASE_URL,
        author=pick('OPC_AUTHOR') or DEFAULT_AUTHOR,
        strict=_truthy(pick('OPC_STRICT')),
    )
