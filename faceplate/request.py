"""Resource requests: everything needed to address one indirection call.

A request names an indirection (``key``, ``catalog``...), an operation and
either a key or a payload instance. URI-shaped keys are decomposed into
server, port, protocol and environment, and the key is rewritten to the
resource-local part of the URI. Requests serialize to typed documents so
they can be rebuilt on the far side of a transport.
"""

import re
from collections.abc import Mapping
from enum import Enum
from typing import Any
from urllib.parse import quote, quote_plus, unquote, urlsplit

from pydantic import BaseModel

from faceplate import document
from faceplate.exceptions import AddressError, EncodingError, IndirectionError, MalformedRequestError
from faceplate.indirection import OPERATIONS, Indirection, IndirectionRegistry, Operation
from faceplate.logging import get_logger
from faceplate.settings import Settings

logger = get_logger(__name__)

DOCUMENT_TYPE = 'IndirectorRequest'

OPTION_ATTRIBUTES = (
    'ip',
    'node',
    'authenticated',
    'ignore_terminus',
    'ignore_cache',
    'instance',
    'environment',
)

REGISTERED_PROTOCOL = 'puppet'

DEFAULT_PORTS = {'http': 80, 'https': 443}

_URI_KEY = re.compile(r'^\w+:/')
_WINDOWS_ABSOLUTE = re.compile(r'^(?:[A-Za-z]:[\\/]|\\\\)')


def is_absolute_path(path: str) -> bool:
    """Tell whether a string is an absolute POSIX or Windows filesystem path."""
    return path.startswith('/') or bool(_WINDOWS_ABSOLUTE.match(path))


def is_uri_key(key: str) -> bool:
    """Tell whether a request key should be decomposed as a URI."""
    return bool(_URI_KEY.match(key)) and not is_absolute_path(key)


class ResourceRequest:
    """One operation against a named resource collection."""

    def __init__(
        self,
        indirection_name: str,
        method: Operation,
        key_or_instance: Any,
        options_or_instance: Any = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        if method not in OPERATIONS:
            msg = f"Unknown operation '{method}'; supported operations are {', '.join(OPERATIONS)}"
            raise MalformedRequestError(msg)

        if options_or_instance is None or isinstance(options_or_instance, Mapping):
            options = dict(options_or_instance or {})
            self.instance: Any = None
        else:
            options = {}
            self.instance = options_or_instance

        self.indirection_name = str(indirection_name)
        self.method = method
        self.settings = settings or Settings()

        self.ip: str | None = None
        self.node: str | None = None
        self.authenticated: bool | None = None
        self.ignore_cache: bool | None = None
        self.ignore_terminus: bool | None = None
        self.use_cache: bool | None = None
        self.environment: str | None = None

        self.server: str | None = None
        self.port: int | None = None
        self.protocol: str | None = None
        self.uri: str | None = None
        self.key: str | None = None

        options = {str(name): value for name, value in options.items()}
        self._set_attributes(options)
        self.options: dict[str, Any] = options

        key = None
        if isinstance(key_or_instance, str | Enum):
            key = key_or_instance.value if isinstance(key_or_instance, Enum) else key_or_instance
        elif self.instance is None:
            self.instance = key_or_instance

        if key:
            if is_uri_key(key):
                self._set_uri_key(key)
            else:
                self.key = key

        if not self.key and self.instance is not None:
            self.key = getattr(self.instance, 'name', None)

    def __repr__(self) -> str:
        return f'<ResourceRequest {self.method} {self}>'

    def __str__(self) -> str:
        return self.uri if self.uri else f'/{self.indirection_name}/{self.key}'

    @property
    def escaped_key(self) -> str:
        return quote(self.key or '')

    def is_authenticated(self) -> bool:
        return bool(self.authenticated)

    def should_ignore_cache(self) -> bool:
        return bool(self.ignore_cache)

    def should_ignore_terminus(self) -> bool:
        return bool(self.ignore_terminus)

    def should_use_cache(self) -> bool:
        """Whether a cached object may be used; true unless set otherwise."""
        if self.use_cache is None:
            return True
        return bool(self.use_cache)

    def is_plural(self) -> bool:
        """Whether the request addresses many resources rather than one."""
        return self.method == 'search'

    def indirection(self, indirections: IndirectionRegistry) -> Indirection:
        """Look up the addressed indirection."""
        return indirections.instance(self.indirection_name)

    def model(self, indirections: IndirectionRegistry) -> type[BaseModel]:
        """Payload type of the addressed indirection."""
        return self.indirection(indirections).model

    def query_string(self) -> str:
        """Encode the options as a URL query component.

        Returns an empty string when there are no options.

        Raises:
            EncodingError: If an option value has a type that cannot be encoded.
        """
        if not self.options:
            return ''

        pairs = []
        for name, value in self.options.items():
            if value is None:
                continue
            pairs.append(f'{name}={self._encode_query_value(value)}')
        return '?' + '&'.join(pairs)

    def to_hash(self) -> dict[str, Any]:
        """Options merged with the well-known attributes that are set."""
        result = dict(self.options)
        result.update(self._attributes())
        return result

    def to_document(self) -> dict[str, Any]:
        """Typed document form of the request."""
        data: dict[str, Any] = {
            'type': self.indirection_name,
            'method': self.method,
            'key': self.key,
        }
        attributes = {name: value for name, value in self._attributes().items() if name != 'instance'}
        attributes.update(self.options)
        if attributes:
            data['attributes'] = attributes
        if self.instance is not None:
            data['instance'] = self.instance

        return {document.DOCUMENT_TYPE_KEY: DOCUMENT_TYPE, document.DATA_KEY: data}

    def to_json(self) -> str:
        return document.dumps(self)

    @classmethod
    def from_document(
        cls,
        data: Mapping[str, Any],
        *,
        indirections: IndirectionRegistry | None = None,
        settings: Settings | None = None,
    ) -> 'ResourceRequest':
        """Rebuild a request from the ``data`` part of its document.

        ``indirections`` is only needed when the document carries an
        instance, to validate it through the indirection's payload model.

        Raises:
            MalformedRequestError: If the type, method or key is missing, or
                the method is not a known operation.
            IndirectionError: If an instance is present but cannot be
                validated against a known indirection.
        """
        for field, label in (('type', 'indirection name'), ('method', 'method name'), ('key', 'key')):
            if not data.get(field):
                msg = f'No {label} provided in document data'
                raise MalformedRequestError(msg)

        request = cls(
            data['type'],
            data['method'],
            data['key'],
            data.get('attributes') or {},
            settings=settings,
        )

        instance = data.get('instance')
        if instance is not None:
            if indirections is None:
                msg = f"Cannot rebuild the '{request.indirection_name}' instance without an indirection registry"
                raise IndirectionError(msg)
            model = request.model(indirections)
            request.instance = instance if isinstance(instance, model) else model.model_validate(instance)

        return request

    def _attributes(self) -> dict[str, Any]:
        attributes = {name: getattr(self, name) for name in OPTION_ATTRIBUTES if getattr(self, name)}
        if self.use_cache is not None:
            attributes['use_cache'] = self.use_cache
        return attributes

    def _set_attributes(self, options: dict[str, Any]) -> None:
        for attribute in (*OPTION_ATTRIBUTES, 'use_cache'):
            if attribute in options:
                setattr(self, attribute, options.pop(attribute))

    def _set_uri_key(self, key: str) -> None:
        """Parse the key as a URI, setting the addressing attributes."""
        self.uri = key
        try:
            uri = urlsplit(quote(key, safe=":/?#[]@!$&'()*+,;=%~"))
            port = uri.port
        except ValueError as exc:
            msg = f'Could not understand URL {key}: {exc}'
            raise AddressError(msg) from exc

        # file URIs are plain filesystem paths
        if uri.scheme == 'file':
            self.key = unquote(uri.path)
            return

        if uri.hostname:
            self.server = uri.hostname

        if not port and uri.scheme == REGISTERED_PROTOCOL:
            self.port = self.settings.masterport
        else:
            self.port = port or DEFAULT_PORTS.get(uri.scheme, 0)

        self.protocol = uri.scheme
        path = unquote(uri.path.removeprefix('/'))

        if uri.scheme == REGISTERED_PROTOCOL:
            self.key = path
            return

        environment, _indirection, resource_key = (path.split('/', 2) + ['', ''])[:3]
        self.key = resource_key
        if environment:
            self.environment = environment

        logger.debug(
            'decomposed_uri_key',
            uri=self.uri,
            server=self.server,
            port=self.port,
            environment=self.environment,
        )

    @staticmethod
    def _encode_query_value(value: Any) -> str:
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, int | float):
            return str(value)
        if isinstance(value, str):
            return quote_plus(value)
        if isinstance(value, Enum):
            return quote_plus(str(value.value))
        if isinstance(value, list | tuple):
            return quote_plus(document.dumps(value))
        msg = f"HTTP REST queries cannot handle values of type '{type(value).__name__}'"
        raise EncodingError(msg)


document.register_document_type(DOCUMENT_TYPE, ResourceRequest)
