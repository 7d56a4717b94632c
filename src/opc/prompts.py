"""Answer providers: where create/update/delete get their interactive input.

ClickAnswers asks on the terminal via click.prompt / click.confirm.
ScriptedAnswers replays a dict of answers keyed by question name, so the
content operations run headless (tests, scripted use).
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple

import click

Choice = Tuple[str, str]  # (value, label shown to the user)


class AnswerProvider:
    def text(self, name: str, message: str, default: Optional[str] = None,
             required: bool = False) -> str:
        raise NotImplementedError

    def choose(self, name: str, message: str, choices: Sequence[Choice],
               default: Optional[str] = None) -> str:
        raise NotImplementedError

    def confirm(self, name: str, message: str, default: bool = False) -> bool:
        raise NotImplementedError


class ClickAnswers(AnswerProvider):
    def text(self, name, message, default=None, required=False):
        def _check(value: str) -> str:
            if required and not value.strip():
                raise click.BadParameter("a value is required")
            return value

        if default is None and not required:
            default = ''
        return click.prompt(message, default=default, value_proc=_check,
                            show_default=bool(default))

    def choose(self, name, message, choices, default=None):
        values = [value for value, _ in choices]
        for idx, (value, label) in enumerate(choices, start=1):
            click.echo(f"  {idx}. {label}")
        default_index = values.index(default) + 1 if default in values else None

        def _pick(raw: str) -> str:
            raw = raw.strip()
            if raw in values:
                return raw
            if raw.isdigit() and 1 <= int(raw) <= len(values):
                return values[int(raw) - 1]
            raise click.BadParameter(f"choose 1-{len(values)} or one of: {', '.join(values)}")

        return click.prompt(message, default=str(default_index) if default_index else None,
                            value_proc=_pick)

    def confirm(self, name, message, default=False):
        return click.confirm(message, default=default)


class ScriptedAnswers(AnswerProvider):
    """Return pre-recorded answers; fall back to each question's default."""

    def __init__(self, answers: Optional[Dict[str, Any]] = None):
        self.answers: Dict[str, Any] = dict(answers or {})
        self.asked: List[str] = []

    def _get(self, name: str, default: Any) -> Any:
        self.asked.append(name)
        return self.answers.get(name, default)

    def text(self, name, message, default=None, required=False):
        value = self._get(name, default)
        return '' if value is None else str(value)

    def choose(self, name, message, choices, default=None):
        value = self._get(name, default)
        if value is None and choices:
            value = choices[0][0]
        return value

    def confirm(self, name, message, default=False):
        return bool(self._get(name, default))
