"""The help face."""

from collections.abc import Callable
from typing import Any

from faceplate.exceptions import FaceplateError
from faceplate.help import action_help, face_help, registry_help
from faceplate.models import ActionDescriptor, Face
from faceplate.registry import FaceRegistry


def define_help_face(registry: Callable[[], FaceRegistry]) -> Face:
    """Create the help face; ``registry`` returns the faces to describe."""

    def help_action(*args: Any) -> str:
        *names, _options = args
        faces = registry()
        if not names:
            return registry_help(faces)

        face = faces.face(names[0])
        if face is None:
            msg = f"Could not find face '{names[0]}'"
            raise FaceplateError(msg)
        if len(names) == 1:
            return face_help(face)

        action = face.get_action(names[1])
        if action is None:
            msg = f'{face.name} does not respond to action {names[1]}'
            raise FaceplateError(msg)
        return action_help(face, action)

    return Face(
        name='help',
        summary='Display faceplate help.',
        actions=(
            ActionDescriptor(
                name='help',
                handler=help_action,
                summary='Display help about faces and their actions.',
                default=True,
            ),
        ),
    )
