"""Built-in faces."""

from collections.abc import Iterable

from faceplate.faces.help import define_help_face
from faceplate.faces.indirector import define_indirector_face
from faceplate.faces.key import Key, define_key_face, key_indirection
from faceplate.models import Face
from faceplate.registry import FaceRegistry
from faceplate.settings import Settings


def build_registry(faces: Iterable[Face]) -> FaceRegistry:
    """Registry of the given faces plus the help face describing them."""
    registry = FaceRegistry([*faces, define_help_face(lambda: registry)])
    return registry


def default_registry(settings: Settings | None = None) -> FaceRegistry:
    """Registry of the faces shipped with faceplate."""
    return build_registry([define_key_face(settings=settings)])


__all__ = [
    'Key',
    'build_registry',
    'default_registry',
    'define_help_face',
    'define_indirector_face',
    'define_key_face',
    'key_indirection',
]
