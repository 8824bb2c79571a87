"""Rendering of action results."""

import re
from collections.abc import Mapping
from pprint import pformat
from typing import Any, Protocol, runtime_checkable

from faceplate import document
from faceplate.exceptions import RenderError
from faceplate.models import ActionDescriptor, RenderFormat

LINE_WIDTH = 79

HUMAN = RenderFormat(name='for_humans', kind='human')
JSON = RenderFormat(name='json', kind='document')
YAML = RenderFormat(name='yaml', kind='encoder', encoder='to_yaml')
TEXT = RenderFormat(name='text', kind='encoder', encoder='to_text')

FORMATS: dict[str, RenderFormat] = {
    'for_humans': HUMAN,
    'human': HUMAN,
    'json': JSON,
    'pson': JSON,
    'document': JSON,
    'yaml': YAML,
    'text': TEXT,
    's': TEXT,
}


@runtime_checkable
class YamlEncodable(Protocol):
    """Results that can render themselves as YAML."""

    def to_yaml(self) -> str: ...


@runtime_checkable
class TextEncodable(Protocol):
    """Results that can render themselves as plain text."""

    def to_text(self) -> str: ...


ENCODER_CAPABILITIES: dict[str, type] = {
    'to_yaml': YamlEncodable,
    'to_text': TextEncodable,
}


def resolve_render_format(name: str) -> RenderFormat:
    """Map a format name from the command line onto a known format.

    Raises:
        RenderError: If the format is not in the catalog.
    """
    render_format = FORMATS.get(name.strip().lower())
    if render_format is None:
        msg = f"I don't know how to render '{name}'"
        raise RenderError(msg)
    return render_format


def _is_table(result: Any) -> bool:
    return (
        isinstance(result, Mapping)
        and bool(result)
        and all(isinstance(key, str | int | float) for key in result)
    )


def render_for_humans(result: Any) -> str:
    """Render a result for a terminal.

    Strings and numbers are shown as they are. A mapping with string or
    numeric keys becomes a two-column table sorted by key, nested values
    wrapped with a hanging indent. Anything else is pretty-printed.
    """
    if isinstance(result, str):
        return result
    if isinstance(result, int | float) and not isinstance(result, bool):
        return str(result)

    if _is_table(result):
        column_a = max(len(str(key)) for key in result) + 2
        column_b = max(LINE_WIDTH - column_a, 1)
        hanging = ' ' * column_a
        lines = []
        for key, value in sorted(result.items(), key=lambda item: str(item[0])):
            text = pformat(value, width=column_b)
            text = re.sub(r'\n *', lambda m: m.group(0) + hanging, text)
            lines.append(str(key).ljust(column_a) + text)
        return '\n'.join(lines) + '\n'

    return pformat(result)


def render_document(result: Any) -> str:
    """Render a result in the document format."""
    try:
        return document.dumps(result, pretty=True)
    except (TypeError, ValueError, RecursionError) as exc:
        msg = f'Cannot render {type(result).__name__} as json: {exc}'
        raise RenderError(msg) from exc


def render_with_encoder(result: Any, encoder: str) -> str:
    """Ask the result to encode itself, if it has that capability."""
    capability = ENCODER_CAPABILITIES.get(encoder)
    if capability is None or not isinstance(result, capability):
        msg = f'{type(result).__name__} cannot be rendered with {encoder}'
        raise RenderError(msg)
    return getattr(result, encoder)()


def render(result: Any, render_format: RenderFormat, action: ActionDescriptor | None = None) -> str:
    """Render an action result, applying the action's render hook first."""
    if action is not None:
        hook = action.when_rendering(render_format.name)
        if hook is not None:
            result = hook(result)

    if render_format.kind == 'human':
        return render_for_humans(result)
    if render_format.kind == 'document':
        return render_document(result)
    return render_with_encoder(result, render_format.encoder or '')
