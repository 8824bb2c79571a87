"""Running one face action from the command line."""

import sys
from typing import Any, TextIO

from faceplate.exceptions import ArityError, FaceplateError, NoActionError
from faceplate.help import face_help
from faceplate.logging import configure_logging, console, err_console, get_logger
from faceplate.models import InvocationState
from faceplate.registry import FaceRegistry
from faceplate.rendering import render
from faceplate.resolver import ActionResolver, Resolution
from faceplate.settings import Settings

logger = get_logger(__name__)


def check_arity(state: InvocationState) -> None:
    """Ensure an action declaring N > 0 positional arguments gets exactly N.

    Actions declaring none accept any number, since the options bag is
    always passed as a trailing extra argument.
    """
    wanted = state.action.required_args
    if wanted <= 0:
        return
    given = len(state.plain_arguments)
    if given != wanted:
        raise ArityError(given=given, wanted=wanted)


class FaceApplication:
    """Resolve a command line against a face, invoke the action, print the result."""

    def __init__(
        self,
        face_name: str,
        registry: FaceRegistry,
        *,
        settings: Settings | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.face_name = face_name
        self.registry = registry
        self.settings = settings or Settings()
        self._stdout = stdout
        self.state: InvocationState | None = None

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    def run(self, argv: list[str]) -> bool:
        """Run the face for a command line; True on success.

        An interrupt cancels the run quietly and still counts as success.
        """
        try:
            resolution = self.parse_options(argv)
            if resolution is None:
                return False
            return self.main(resolution)
        except KeyboardInterrupt:
            err_console.print('Cancelling Face')
            return True

    def parse_options(self, argv: list[str]) -> Resolution | None:
        """Resolve the command line, reporting fatal errors."""
        try:
            resolver = ActionResolver(self.registry, self.face_name, settings=self.settings)
            resolution = resolver.resolve(argv)
        except NoActionError as exc:
            logger.error(str(exc))
            face = self.registry.face(self.face_name)
            if face is not None:
                self.emit(face_help(face))
            return None
        except FaceplateError as exc:
            logger.error(str(exc))
            return None

        if resolution.log_level:
            configure_logging(level=resolution.log_level)
        self.settings = resolution.settings
        self.state = resolution.invocation_state()
        return resolution

    def main(self, resolution: Resolution) -> bool:
        """Invoke the resolved action and print its rendered result."""
        state = self.state or resolution.invocation_state()
        face, action = state.face, state.action
        try:
            check_arity(state)
            result = action.handler(*state.arguments)
            if result is not None and result != '':
                self.emit(render(result, state.render_format, action))
        except KeyboardInterrupt:
            raise
        except Exception as exc:  # noqa: BLE001 - top-level CLI guard
            if self.settings.trace:
                console.print_exception()

            if isinstance(exc, ArityError):
                logger.error(
                    f'faceplate {face.name} {action.name}: '
                    f'{exc.wanted} argument expected but {exc.given} given',
                )
                logger.error(f"Try 'faceplate help {face.name} {action.name}' for usage")
            else:
                logger.error(str(exc))
            return False
        return True

    def emit(self, text: Any) -> None:
        text = str(text)
        self.stdout.write(text if text.endswith('\n') else text + '\n')
