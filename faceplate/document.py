"""Document serialization: JSON that allows non-finite numbers and typed documents.

A typed document is a mapping of the form
``{"document_type": <name>, "data": {...}}``. Classes registered with
:func:`register_document_type` are rebuilt from their ``data`` by
:func:`loads` through their ``from_document`` classmethod. Callers can hand
:func:`loads` their own ``document_types`` lookup instead.
"""

import json
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel

from faceplate.logging import get_logger

logger = get_logger(__name__)

DOCUMENT_TYPE_KEY = 'document_type'
DATA_KEY = 'data'

_document_types: dict[str, type] = {}

# Read-only view of the registered types
DOCUMENT_TYPES: Mapping[str, type] = MappingProxyType(_document_types)


def register_document_type(name: str, cls: type) -> None:
    """Register a class that can be rebuilt from a typed document.

    Each name is bound once, when the defining module is imported.

    Raises:
        ValueError: If the name is already bound to another class.
    """
    registered = _document_types.setdefault(name, cls)
    if registered is not cls:
        msg = f"Document type '{name}' is already registered to {registered.__name__}"
        raise ValueError(msg)


def document_type(name: str) -> type | None:
    """Look up a registered document type."""
    return _document_types.get(name)


def to_document_value(value: Any) -> Any:
    """Convert objects the json module cannot handle into plain data."""
    if hasattr(value, 'to_document'):
        return value.to_document()
    if isinstance(value, BaseModel):
        return value.model_dump(mode='json')
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, set | frozenset | tuple):
        return list(value)
    msg = f'Object of type {type(value).__name__} is not serializable as a document'
    raise TypeError(msg)


def dumps(value: Any, *, pretty: bool = False) -> str:
    """Serialize a value to the document format."""
    return json.dumps(
        value,
        default=to_document_value,
        allow_nan=True,
        ensure_ascii=False,
        indent=2 if pretty else None,
    )


def from_typed_document(
    document: Mapping[str, Any],
    *,
    document_types: Mapping[str, type] | None = None,
    **context: Any,
) -> Any:
    """Rebuild an object from a typed document, or return it unchanged."""
    name = document.get(DOCUMENT_TYPE_KEY)
    if name is None:
        return document
    cls = (DOCUMENT_TYPES if document_types is None else document_types).get(name)
    if cls is None:
        logger.debug('unknown_document_type', document_type=name)
        return document
    return cls.from_document(document.get(DATA_KEY) or {}, **context)


def loads(text: str, *, document_types: Mapping[str, type] | None = None, **context: Any) -> Any:
    """Parse a document; a typed document at the top level is rebuilt.

    ``document_types`` maps type names to classes and defaults to the
    registered types. Extra keyword arguments are handed to the class's
    ``from_document``.
    """
    value = json.loads(text)
    if isinstance(value, Mapping):
        return from_typed_document(value, document_types=document_types, **context)
    return value
