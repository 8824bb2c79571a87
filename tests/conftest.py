from collections.abc import Callable
from typing import Any

import pytest

from faceplate.logging import configure_logging
from faceplate.models import ActionDescriptor, Face, OptionSpec
from faceplate.registry import FaceRegistry


@pytest.fixture(autouse=True)
def _logging() -> None:
    configure_logging()


def _list(*args: Any) -> dict[str, Any]:
    *names, options = args
    return {'names': names, 'options': options}


def _show(name: str, options: dict[str, Any]) -> dict[str, Any]:
    return {'name': name, **options}


def _resize(width: str, height: str, options: dict[str, Any]) -> str:
    return f'{width}x{height}'


def build_widget_face(**handlers: Callable[..., Any]) -> Face:
    """A face with face-wide options, a default action and actions of arity 1 and 2."""
    return Face(
        name='widget',
        summary='Manage widgets.',
        options=(
            OptionSpec.from_declarations('--color COLOR', help='Widget color'),
            OptionSpec.from_declarations('--limit [N]', help='Maximum widgets'),
            OptionSpec.from_declarations('--quiet', '-q'),
        ),
        actions=(
            ActionDescriptor(name='list', handler=handlers.get('list', _list), default=True),
            ActionDescriptor(
                name='show',
                handler=handlers.get('show', _show),
                required_args=1,
                options=(OptionSpec.from_declarations('--template TEMPLATE'),),
            ),
            ActionDescriptor(name='resize', handler=handlers.get('resize', _resize), required_args=2),
        ),
    )


def build_gadget_face() -> Face:
    """A face without a default action."""
    return Face(
        name='gadget',
        actions=(ActionDescriptor(name='spin', handler=lambda options: 'spinning'),),
    )


@pytest.fixture
def registry() -> FaceRegistry:
    return FaceRegistry([build_widget_face(), build_gadget_face()])
