"""Exception hierarchy for faceplate.

Errors raised while resolving a command line are fatal to the run and are
reported by :class:`faceplate.application.FaceApplication`. Errors raised
while building or serializing a resource request propagate to the caller.
"""

from __future__ import annotations


class FaceplateError(Exception):
    """Base exception for all faceplate errors."""


class ConfigurationError(FaceplateError):
    """Raised when the settings file is missing or invalid."""


class ParseError(FaceplateError):
    """Raised for an unrecognized or malformed command-line option."""

    def __init__(self, option: str, message: str | None = None) -> None:
        self.option = option
        super().__init__(message or f'invalid option: {option}')


class NoActionError(FaceplateError):
    """Raised when no action word was given and the face has no default."""

    def __init__(self, face_name: str, message: str | None = None) -> None:
        self.face_name = face_name
        super().__init__(
            message or f'{face_name} does not have a default action, and no action was given',
        )


class ArityError(FaceplateError):
    """Raised when an action receives the wrong number of positional arguments."""

    def __init__(self, given: int, wanted: int) -> None:
        self.given = given
        self.wanted = wanted
        super().__init__(f'wrong number of arguments ({given} for {wanted})')


class RenderError(FaceplateError):
    """Raised when a render format is unknown or cannot be applied."""


class AddressError(FaceplateError):
    """Raised when a URI-shaped request key cannot be parsed."""


class EncodingError(FaceplateError):
    """Raised when a request option cannot be encoded in a query string."""


class MalformedRequestError(FaceplateError):
    """Raised when a serialized request document lacks a required field."""


class IndirectionError(FaceplateError):
    """Raised when an indirection is unknown or has no terminus."""
