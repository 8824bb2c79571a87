"""Two-phase command-line resolution for faces.

Each action contributes its own options, so the legal flags are only known
once the action is. Phase one walks the command line, skipping the flags
that are legal for every action, until it reaches the action word. Phase two
parses the whole command line with argparse using the built-in options, the
settings flags and the schema of the action found in phase one.
"""

import argparse
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from faceplate.exceptions import FaceplateError, NoActionError, ParseError
from faceplate.logging import get_logger
from faceplate.models import (
    ActionDescriptor,
    Face,
    InvocationState,
    OptionSpec,
    RenderFormat,
    flag_aliases,
    looks_like_flag,
)
from faceplate.registry import ActionSchemaLookup
from faceplate.rendering import HUMAN, resolve_render_format
from faceplate.settings import RUN_MODES, SettingDefinition, Settings

logger = get_logger(__name__)

BUILTIN_OPTIONS: tuple[OptionSpec, ...] = (
    OptionSpec.from_declarations('--debug', '-d', help='Enable debug output'),
    OptionSpec.from_declarations('--verbose', '-v', help='Enable verbose output'),
    OptionSpec.from_declarations('--render-as FORMAT', help='Render the result in FORMAT'),
    OptionSpec.from_declarations('--mode RUNMODE', '-r', help='Run mode: user, agent or master'),
)

_NEGATIVE_NUMBER = re.compile(r'^-\d+$|^-\d*\.\d+$')
_ARGPARSE_OPTION = re.compile(r'^argument ([^:/ ]+)')

_BUILTIN_DEST = 'builtin__'
_SETTING_DEST = 'setting__'
_OPTION_DEST = 'option__'


class _OptionParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting."""

    def error(self, message: str):
        match = _ARGPARSE_OPTION.match(message)
        raise ParseError(match.group(1) if match else '', message)


class Resolution(BaseModel):
    """Outcome of resolving one command line."""

    model_config = ConfigDict(frozen=True)

    face: Face
    action: ActionDescriptor
    is_default_action: bool = False
    arguments: list[str] = Field(default_factory=list)
    options: dict[str, Any] = Field(default_factory=dict)
    render_format: RenderFormat = HUMAN
    settings: Settings = Field(default_factory=Settings)
    log_level: str | None = None

    def invocation_state(self) -> InvocationState:
        """Invocation state with the options bag appended to the arguments."""
        return InvocationState(
            face=self.face,
            action=self.action,
            is_default_action=self.is_default_action,
            render_format=self.render_format,
            arguments=[*self.arguments, dict(self.options)],
        )


def setting_option(definition: SettingDefinition) -> OptionSpec:
    """Describe a settings flag as an option; non-boolean settings take a value."""
    return OptionSpec(
        name=definition.name,
        flags=(definition.flag,),
        argument=None if definition.boolean else definition.name.upper(),
        negatable=definition.boolean,
        help=definition.description,
    )


def _add_option(parser: argparse.ArgumentParser, option: OptionSpec, dest: str) -> None:
    kwargs: dict[str, Any] = {'dest': dest, 'default': argparse.SUPPRESS, 'help': option.help}
    if option.negatable:
        kwargs['action'] = argparse.BooleanOptionalAction
    elif not option.takes_argument:
        kwargs['action'] = 'store_true'
    elif option.optional_argument:
        kwargs.update(nargs='?', const=True, metavar=option.argument)
    else:
        kwargs['metavar'] = option.argument
    spellings = dict.fromkeys(alias for flag in option.flags for alias in flag_aliases(flag))
    parser.add_argument(*spellings, **kwargs)


def _skips_next(option: OptionSpec, item: str, next_item: str | None) -> bool:
    if not option.takes_argument or '=' in item:
        return False
    return not (option.optional_argument and looks_like_flag(next_item))


class ActionResolver:
    """Resolve a command line for one face against an explicit face lookup."""

    def __init__(
        self,
        lookup: ActionSchemaLookup,
        face_name: str,
        *,
        settings: Settings | None = None,
    ) -> None:
        face = lookup.face(face_name)
        if face is None:
            msg = f"Could not find face '{face_name}'"
            raise FaceplateError(msg)
        self.face = face
        self.settings = settings or Settings()
        self.setting_options = tuple(setting_option(d) for d in Settings.definitions())

    def find_global_option(self, item: str) -> OptionSpec | None:
        """Find an option legal for every action: face-wide, settings or built-in."""
        for candidates in (self.face.options, self.setting_options, BUILTIN_OPTIONS):
            option = next((candidate for candidate in candidates if candidate.matches(item)), None)
            if option is not None:
                return option
        return None

    def find_action(self, argv: list[str]) -> tuple[ActionDescriptor, bool]:
        """Phase one: identify the action without parsing option values.

        Returns:
            The action and whether it is a default-action substitution.

        Raises:
            ParseError: If a flag before the action word is not recognized.
            NoActionError: If no action is named and the face has no default.
        """
        word = None
        index = 0
        while index < len(argv):
            item = argv[index]
            if not looks_like_flag(item):
                word = item
                break

            option = self.find_global_option(item)
            if option is None:
                raise ParseError(item.split('=', 1)[0])

            next_item = argv[index + 1] if index + 1 < len(argv) else None
            if _skips_next(option, item, next_item):
                index += 1
            index += 1

        if word is not None:
            action = self.face.get_action(word)
            if action is not None:
                logger.debug('found_action', face=self.face.name, action=action.name)
                return action, False

        default = self.face.get_default_action()
        if default is None:
            if word is not None:
                msg = f'{self.face.name} does not respond to action {word}'
                raise NoActionError(self.face.name, msg)
            raise NoActionError(self.face.name)

        logger.debug('using_default_action', face=self.face.name, action=default.name)
        return default, True

    def build_parser(self, action: ActionDescriptor) -> argparse.ArgumentParser:
        """Argument parser for the built-in, settings and action options."""
        parser = _OptionParser(
            prog=f'faceplate {self.face.name} {action.name}',
            add_help=False,
            allow_abbrev=False,
        )
        try:
            for option in BUILTIN_OPTIONS:
                _add_option(parser, option, _BUILTIN_DEST + option.name)
            for option in self.setting_options:
                _add_option(parser, option, _SETTING_DEST + option.name)
            for option in self.face.action_options(action):
                _add_option(parser, option, _OPTION_DEST + option.name)
        except argparse.ArgumentError as exc:
            raise ParseError(exc.argument_name or '', str(exc)) from exc
        return parser

    def resolve(self, argv: list[str]) -> Resolution:
        """Resolve the action, its options and the render format.

        Raises:
            ParseError: For unknown flags, bad values or an invalid run mode.
            NoActionError: If no action can be determined.
            RenderError: If --render-as names an unknown format.
        """
        argv = list(argv)
        action, is_default = self.find_action(argv)

        parser = self.build_parser(action)
        namespace, extras = parser.parse_known_args(argv)

        arguments: list[str] = []
        for token in extras:
            if token == '--':
                continue
            if looks_like_flag(token) and not _NEGATIVE_NUMBER.match(token):
                raise ParseError(token.split('=', 1)[0])
            arguments.append(token)

        # The action word is the first positional unless it was substituted
        if not is_default and arguments and arguments[0] == action.name:
            arguments.pop(0)

        values = vars(namespace)
        builtins = {k[len(_BUILTIN_DEST) :]: v for k, v in values.items() if k.startswith(_BUILTIN_DEST)}
        overrides = {k[len(_SETTING_DEST) :]: v for k, v in values.items() if k.startswith(_SETTING_DEST)}
        options = {k[len(_OPTION_DEST) :]: v for k, v in values.items() if k.startswith(_OPTION_DEST)}

        mode = builtins.get('mode')
        if mode is not None:
            if mode not in RUN_MODES:
                msg = f'Invalid run mode {mode}; supported modes are {", ".join(RUN_MODES)}'
                raise ParseError('--mode', msg)
            overrides['run_mode'] = mode

        try:
            settings = self.settings.with_overrides(**overrides)
        except ValidationError as exc:
            bad = ', '.join(str(error['loc'][0]) for error in exc.errors())
            msg = f'Invalid value for setting: {bad}'
            raise ParseError(bad, msg) from exc

        if 'render_as' in builtins:
            render_format = resolve_render_format(builtins['render_as'])
        elif action.render_as:
            render_format = resolve_render_format(action.render_as)
        else:
            render_format = HUMAN

        log_level = None
        if builtins.get('debug'):
            log_level = 'debug'
        elif builtins.get('verbose'):
            log_level = 'info'

        resolution = Resolution(
            face=self.face,
            action=action,
            is_default_action=is_default,
            arguments=arguments,
            options=options,
            render_format=render_format,
            settings=settings,
            log_level=log_level,
        )
        logger.debug(
            'resolved_command_line',
            face=self.face.name,
            action=action.name,
            default_action=is_default,
            render_as=render_format.name,
            _verbose_arguments=arguments,
            _verbose_options=options,
        )
        return resolution
