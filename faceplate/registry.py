"""Face registry: the lookup the resolver consults for action schemas."""

from collections.abc import Iterable
from typing import Protocol

from faceplate.exceptions import FaceplateError
from faceplate.models import ActionDescriptor, Face


class ActionSchemaLookup(Protocol):
    """Read-only access to the faces available to a CLI surface."""

    def face(self, name: str) -> Face | None: ...


class FaceRegistry:
    """Immutable collection of faces, keyed by name."""

    def __init__(self, faces: Iterable[Face] = ()) -> None:
        self._faces: dict[str, Face] = {}
        for face in faces:
            if face.name in self._faces:
                msg = f'Face registered twice: {face.name}'
                raise FaceplateError(msg)
            self._faces[face.name] = face

    def __contains__(self, name: object) -> bool:
        return name in self._faces

    def __iter__(self):
        return iter(self._faces[name] for name in sorted(self._faces))

    def names(self) -> list[str]:
        return sorted(self._faces)

    def face(self, name: str) -> Face | None:
        """Return the named face, or None."""
        return self._faces.get(name)

    def actions(self, name: str) -> tuple[ActionDescriptor, ...]:
        """Return all actions of a face, empty when the face is unknown."""
        face = self._faces.get(name)
        return face.actions if face else ()

    def action(self, name: str, action_name: str) -> ActionDescriptor | None:
        """Return one action of a face, or None."""
        face = self._faces.get(name)
        return face.get_action(action_name) if face else None

    def default_action(self, name: str) -> ActionDescriptor | None:
        """Return the default action of a face, or None."""
        face = self._faces.get(name)
        return face.get_default_action() if face else None
