"""Indirections: named resource collections and the termini that serve them."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Literal, Protocol, get_args, runtime_checkable

from pydantic import BaseModel, ConfigDict

from faceplate.exceptions import IndirectionError
from faceplate.logging import get_logger

if TYPE_CHECKING:
    from faceplate.request import ResourceRequest

logger = get_logger(__name__)

Operation = Literal['find', 'search', 'save', 'destroy', 'head']

OPERATIONS: tuple[str, ...] = get_args(Operation)


@runtime_checkable
class Terminus(Protocol):
    """Backend that fulfils resource requests for one indirection."""

    def find(self, request: ResourceRequest) -> Any: ...

    def search(self, request: ResourceRequest) -> Any: ...

    def save(self, request: ResourceRequest) -> Any: ...

    def destroy(self, request: ResourceRequest) -> Any: ...

    def head(self, request: ResourceRequest) -> Any: ...


class Indirection(BaseModel):
    """A named collection, the payload model it holds, and its terminus."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    model: type[BaseModel]
    terminus: Terminus | None = None

    def execute(self, request: ResourceRequest) -> Any:
        """Hand a request to the terminus method matching its operation."""
        if self.terminus is None:
            msg = f"No terminus configured for indirection '{self.name}'"
            raise IndirectionError(msg)

        operations = {
            'find': self.terminus.find,
            'search': self.terminus.search,
            'save': self.terminus.save,
            'destroy': self.terminus.destroy,
            'head': self.terminus.head,
        }
        operation = operations.get(request.method)
        if operation is None:
            msg = f"Indirection '{self.name}' does not support operation '{request.method}'"
            raise IndirectionError(msg)

        logger.debug(
            'executing_request',
            indirection=self.name,
            method=request.method,
            key=request.key,
        )
        return operation(request)


class IndirectionRegistry:
    """Immutable lookup of indirections by name."""

    def __init__(self, indirections: Iterable[Indirection] = ()) -> None:
        self._indirections = {indirection.name: indirection for indirection in indirections}

    def __contains__(self, name: object) -> bool:
        return name in self._indirections

    def names(self) -> list[str]:
        return sorted(self._indirections)

    def get(self, name: str) -> Indirection | None:
        return self._indirections.get(name)

    def instance(self, name: str) -> Indirection:
        """Return the named indirection, raising when it is unknown."""
        indirection = self._indirections.get(name)
        if indirection is None:
            msg = f"Could not find indirection '{name}'"
            raise IndirectionError(msg)
        return indirection
