"""Color & style helpers.

Decisions:
- Status colors follow the site: todo yellow, in-progress blue, completed green.
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Supports palette overrides via environment or the working directory's .env.
"""
from __future__ import annotations
import os, sys
from pathlib import Path

from opc.config import read_env_file

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_COLORTERM = os.environ.get("COLORTERM", "").lower()
_USE_TRUECOLOR = _ENABLE and any(tok in _COLORTERM for tok in ("truecolor", "24bit"))

def _code(part: str) -> str:
    return f"\033[{part}m" if _ENABLE else ''

def _hex_to_rgb(hex_code: str) -> tuple[int,int,int]:
    h = hex_code.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def _is_hex(value: str) -> bool:
    h = value.lstrip('#')
    return len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h)

def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    r6, g6, b6 = to_6(r), to_6(g), to_6(b)
    return f"\033[38;5;{16 + 36 * r6 + 6 * g6 + b6}m"

def _from_hex(hex_code: str) -> str:
    if not _ENABLE:
        return ''
    r, g, b = _hex_to_rgb(hex_code)
    if _USE_TRUECOLOR:
        return f"\033[38;2;{r};{g};{b}m"
    return _fg_256(r, g, b)

RESET = _code('0')
BOLD = _code('1')
DIM = _code('2')

HEX_PRIMARY_DEFAULT = '#2AA3B8'
HEX_TODO_DEFAULT = '#E5C07B'
HEX_INPROGRESS_DEFAULT = '#61AFEF'
HEX_COMPLETED_DEFAULT = '#98C379'
HEX_ERROR = '#E06C75'

_PALETTE_KEYS = {'OPC_PRIMARY', 'OPC_TODO', 'OPC_INPROGRESS', 'OPC_COMPLETED'}
_ENV_OVERRIDES = {
    k: '#' + v.lstrip('#')
    for k, v in read_env_file(Path.cwd() / '.env', _PALETTE_KEYS).items()
    if _is_hex(v)
}

def _resolve(key: str, default: str) -> str:
    value = os.environ.get(key)
    if value and _is_hex(value):
        return '#' + value.lstrip('#')
    return _ENV_OVERRIDES.get(key, default)

PRIMARY = _from_hex(_resolve('OPC_PRIMARY', HEX_PRIMARY_DEFAULT))
C_TODO = _from_hex(_resolve('OPC_TODO', HEX_TODO_DEFAULT))
C_INPROGRESS = _from_hex(_resolve('OPC_INPROGRESS', HEX_INPROGRESS_DEFAULT))
C_COMPLETED = _from_hex(_resolve('OPC_COMPLETED', HEX_COMPLETED_DEFAULT))
C_ERROR = _from_hex(HEX_ERROR)

STATUS_COLOR = {
    'todo': C_TODO,
    'in-progress': C_INPROGRESS,
    'completed': C_COMPLETED,
}

HEADER_COLOR = PRIMARY
ID_COLOR = PRIMARY + BOLD
SUCCESS_COLOR = C_COMPLETED
WARNING_COLOR = C_TODO
ERROR_COLOR = C_ERROR

def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE:
        return text
    return ''.join(styles) + text + RESET

def status_text(status: str) -> str:
    return color(status, STATUS_COLOR.get(status, DIM))

__all__ = [
    'color','status_text','RESET','BOLD','DIM','STATUS_COLOR','HEADER_COLOR','ID_COLOR',
    'SUCCESS_COLOR','WARNING_COLOR','ERROR_COLOR',
]
