"""Faces whose actions map onto indirection operations."""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

from faceplate.indirection import Indirection
from faceplate.logging import get_logger
from faceplate.models import ActionDescriptor, Face, OptionSpec
from faceplate.request import Operation, ResourceRequest
from faceplate.settings import Settings

logger = get_logger(__name__)

INDIRECTOR_OPTIONS: tuple[OptionSpec, ...] = (
    OptionSpec.from_declarations('--node NAME', help='Node the request is made on behalf of'),
    OptionSpec.from_declarations('--ignore-cache', help='Bypass any cached copy'),
    OptionSpec.from_declarations('--ignore-terminus', help='Only consult the cache'),
)


def _plain(result: Any) -> Any:
    """Turn payload models into plain data for the human renderer."""
    if isinstance(result, BaseModel):
        return result.model_dump()
    if isinstance(result, list):
        return [_plain(item) for item in result]
    return result


def _operation(
    indirection: Indirection,
    method: Operation,
    settings: Settings | None,
) -> Callable[..., Any]:
    def handler(key: str, options: dict[str, Any]) -> Any:
        request = ResourceRequest(indirection.name, method, key, options, settings=settings)
        logger.info('indirected_request', method=method, request=str(request))
        return indirection.execute(request)

    handler.__name__ = method
    return handler


def _info(indirection: Indirection) -> Callable[..., Any]:
    def handler(options: dict[str, Any]) -> dict[str, str]:
        terminus = indirection.terminus
        return {
            'indirection': indirection.name,
            'model': indirection.model.__name__,
            'terminus': type(terminus).__name__ if terminus is not None else 'none',
        }

    return handler


def indirector_actions(
    indirection: Indirection,
    settings: Settings | None = None,
) -> tuple[ActionDescriptor, ...]:
    """The find, search, save, destroy and info actions for an indirection."""
    hooks = {'for_humans': _plain}
    summaries = {
        'find': f'Retrieve a {indirection.name} by key.',
        'search': f'Search for {indirection.name} objects.',
        'save': f'Save a {indirection.name}.',
        'destroy': f'Delete a {indirection.name}.',
    }
    actions = [
        ActionDescriptor(
            name=method,
            handler=_operation(indirection, method, settings),
            summary=summary,
            required_args=1,
            render_hooks=hooks,
        )
        for method, summary in summaries.items()
    ]
    actions.append(
        ActionDescriptor(
            name='info',
            handler=_info(indirection),
            summary=f'Describe the {indirection.name} indirection.',
        ),
    )
    return tuple(actions)


def define_indirector_face(
    indirection: Indirection,
    *,
    version: str = '0.0.1',
    summary: str | None = None,
    description: str | None = None,
    settings: Settings | None = None,
) -> Face:
    """Create a face exposing an indirection's operations as actions."""
    return Face(
        name=indirection.name,
        version=version,
        summary=summary,
        description=description,
        options=INDIRECTOR_OPTIONS,
        actions=indirector_actions(indirection, settings),
    )
