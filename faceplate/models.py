"""Pydantic models for faceplate."""

import re
from collections.abc import Callable
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

_DECLARATION = re.compile(r'^(?P<flag>-{1,2}(?:\[no-\])?[\w-]+)(?:[ =](?P<arg>\[?[^\s\]]+\]?))?$')


def looks_like_flag(token: str | None) -> bool:
    """Tell whether a command-line token starts with a flag marker."""
    return token is not None and token.startswith('-') and token != '-'


def normalize_flag(flag: str) -> str:
    """Spell a long flag with dashes only; short flags are unchanged."""
    if flag.startswith('--'):
        return '--' + flag[2:].replace('_', '-')
    return flag


def flag_aliases(flag: str) -> tuple[str, ...]:
    """The dash and underscore spellings of a long flag."""
    if not flag.startswith('--'):
        return (flag,)
    dashed = normalize_flag(flag)
    underscored = '--' + dashed[2:].replace('-', '_')
    return tuple(dict.fromkeys((flag, dashed, underscored)))


class OptionSpec(BaseModel):
    """A single command-line option accepted by a face or an action."""

    model_config = ConfigDict(frozen=True)

    name: str
    flags: tuple[str, ...]
    argument: str | None = None
    optional_argument: bool = False
    negatable: bool = False
    help: str | None = None

    @field_validator('flags')
    @classmethod
    def validate_flags(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Validate that every spelling carries a flag marker."""
        if not v:
            msg = 'An option needs at least one flag spelling'
            raise ValueError(msg)
        for flag in v:
            if not looks_like_flag(flag):
                msg = f'Option flag must start with "-": {flag}'
                raise ValueError(msg)
        return v

    @classmethod
    def from_declarations(cls, *declarations: str, help: str | None = None) -> 'OptionSpec':  # noqa: A002
        """Build an option from optparse-style declarations.

        Supports formats:
        - --flag, -f
        - --name VALUE or --name=VALUE (mandatory argument)
        - --name [VALUE] (optional argument)
        - --[no-]flag (negatable boolean)
        """
        flags: list[str] = []
        argument = None
        optional = False
        negatable = False
        for declaration in declarations:
            match = _DECLARATION.match(declaration.strip())
            if not match:
                msg = f'Invalid option declaration: {declaration}'
                raise ValueError(msg)
            flag, arg = match.group('flag'), match.group('arg')
            if '[no-]' in flag:
                negatable = True
                flag = flag.replace('[no-]', '')
            if arg:
                optional = arg.startswith('[')
                argument = arg.strip('[]')
            flags.append(flag)

        long_flags = [flag for flag in flags if flag.startswith('--')]
        name = (long_flags or flags)[0].lstrip('-').replace('-', '_')
        return cls(
            name=name,
            flags=tuple(flags),
            argument=argument,
            optional_argument=optional,
            negatable=negatable,
            help=help,
        )

    @property
    def takes_argument(self) -> bool:
        """Whether the option consumes a value."""
        return self.argument is not None

    @property
    def spellings(self) -> tuple[str, ...]:
        """All accepted spellings, including the negated long forms."""
        if not self.negatable:
            return self.flags
        negated = tuple(f'--no-{flag[2:]}' for flag in self.flags if flag.startswith('--'))
        return self.flags + negated

    def matches(self, item: str) -> bool:
        """Check whether a raw command-line token spells this option.

        Long names match with dashes and underscores interchangeable, and an
        inline ``=value`` is ignored.
        """
        flag = normalize_flag(item.split('=', 1)[0])
        return any(flag == normalize_flag(spelling) for spelling in self.spellings)


class ActionDescriptor(BaseModel):
    """A named operation exposed by a face."""

    model_config = ConfigDict(frozen=True)

    name: str
    handler: Callable[..., Any]
    summary: str | None = None
    options: tuple[OptionSpec, ...] = ()
    required_args: int = Field(default=0, ge=0)
    default: bool = False
    render_as: str | None = None
    render_hooks: dict[str, Callable[[Any], Any]] = Field(default_factory=dict)

    def get_option(self, name: str) -> OptionSpec | None:
        """Look up one of the action's own options by name."""
        return next((option for option in self.options if option.name == name), None)

    def when_rendering(self, format_name: str) -> Callable[[Any], Any] | None:
        """Return the render hook registered for a format, if any."""
        return self.render_hooks.get(format_name)


class Face(BaseModel):
    """A resource-type plugin: face-wide options plus a set of actions."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str = '0.0.1'
    summary: str | None = None
    description: str | None = None
    options: tuple[OptionSpec, ...] = ()
    actions: tuple[ActionDescriptor, ...] = ()

    @field_validator('actions')
    @classmethod
    def validate_actions(cls, v: tuple[ActionDescriptor, ...]) -> tuple[ActionDescriptor, ...]:
        """Validate action names are unique and at most one is the default."""
        names = [action.name for action in v]
        if len(names) != len(set(names)):
            msg = f'Duplicate action names: {names}'
            raise ValueError(msg)
        if sum(1 for action in v if action.default) > 1:
            msg = 'A face can have only one default action'
            raise ValueError(msg)
        return v

    def get_action(self, name: str) -> ActionDescriptor | None:
        """Look up an action by name."""
        return next((action for action in self.actions if action.name == name), None)

    def get_default_action(self) -> ActionDescriptor | None:
        """Return the action flagged as default, if any."""
        return next((action for action in self.actions if action.default), None)

    def get_option(self, name: str) -> OptionSpec | None:
        """Look up a face-wide option by name."""
        return next((option for option in self.options if option.name == name), None)

    def find_option(self, item: str) -> OptionSpec | None:
        """Find the face-wide option spelled by a raw command-line token."""
        return next((option for option in self.options if option.matches(item)), None)

    def action_options(self, action: ActionDescriptor) -> tuple[OptionSpec, ...]:
        """Full option schema of an action: face-wide options first."""
        return self.options + action.options


RenderKind = Literal['human', 'document', 'encoder']


class RenderFormat(BaseModel):
    """A resolved output format."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: RenderKind
    encoder: str | None = None


class InvocationState(BaseModel):
    """Everything known about one CLI run once the command line is resolved."""

    face: Face
    action: ActionDescriptor
    is_default_action: bool = False
    render_format: RenderFormat
    arguments: list[Any] = Field(default_factory=list)

    @property
    def plain_arguments(self) -> list[Any]:
        """Positional arguments without the trailing options bag."""
        return self.arguments[:-1]

    @property
    def options(self) -> dict[str, Any]:
        """The options bag appended to the positional arguments."""
        return self.arguments[-1] if self.arguments else {}
