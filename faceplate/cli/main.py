"""Main CLI entry point for faceplate."""

import sys

from faceplate.application import FaceApplication
from faceplate.exceptions import ConfigurationError
from faceplate.faces import default_registry
from faceplate.help import registry_help
from faceplate.logging import configure_logging, get_logger
from faceplate.settings import discover_settings

logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Run ``faceplate <face> [options] [action] [args...]``; returns the exit code."""
    argv = sys.argv[1:] if argv is None else list(argv)
    configure_logging()

    try:
        settings = discover_settings()
    except ConfigurationError as exc:
        logger.error(str(exc))
        return 1

    registry = default_registry(settings)
    if argv and argv[0] in ('-h', '--help'):
        sys.stdout.write(registry_help(registry) + '\n')
        return 0

    if not argv or argv[0] not in registry:
        if argv:
            logger.error(f"Could not find face '{argv[0]}'")
        sys.stdout.write(registry_help(registry) + '\n')
        return 1

    face_name, *rest = argv
    application = FaceApplication(face_name, registry, settings=settings)
    return 0 if application.run(rest) else 1


def cli() -> None:
    """Console-script wrapper mapping success to the process exit status."""
    sys.exit(main())


if __name__ == '__main__':
    cli()
