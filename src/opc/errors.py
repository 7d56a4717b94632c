"""Exception hierarchy for content operations.

ContentManager raises these; the click layer catches OpcError at the command
boundary and turns it into a message on stderr plus exit status 1.
"""
from typing import Iterable, Optional


class OpcError(Exception):
    """Base class for every error the CLI reports to the user."""


class NotFound(OpcError):
    def __init__(self, entity_id: str, message: Optional[str] = None):
        self.entity_id = entity_id
        super().__init__(message or f'No project or task with id "{entity_id}".')


class ValidationError(OpcError):
    """Bad user input, raised before anything is written."""


class InvalidStatus(ValidationError):
    def __init__(self, status: str, valid: Iterable[str]):
        self.status = status
        self.valid = tuple(valid)
        super().__init__(f'Invalid status "{status}". Valid values: {", ".join(self.valid)}')


class ParseError(OpcError):
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot parse front matter in {path}: {reason}")


class ContentIOError(OpcError):
    """Wraps an OSError from a read, write or unlink."""

    def __init__(self, path: str, error: OSError):
        self.path = path
        self.error = error
        super().__init__(str(error))
