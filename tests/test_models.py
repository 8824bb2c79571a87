"""Tests for faceplate models."""

from dataclasses import dataclass

import pytest
from pydantic import ValidationError

from faceplate.models import (
    ActionDescriptor,
    Face,
    InvocationState,
    OptionSpec,
    flag_aliases,
    looks_like_flag,
)
from faceplate.rendering import HUMAN


@dataclass
class DeclarationCase:
    """Option declarations and the spec they should produce."""

    name: str
    declarations: tuple[str, ...]
    expected_name: str
    expected_flags: tuple[str, ...]
    expected_argument: str | None = None
    expected_optional: bool = False
    expected_negatable: bool = False


class TestOptionSpecDeclarations:
    """Tests for OptionSpec.from_declarations."""

    @pytest.mark.parametrize(
        'case',
        [
            DeclarationCase('boolean', ('--quiet', '-q'), 'quiet', ('--quiet', '-q')),
            DeclarationCase('short_first', ('-q', '--quiet'), 'quiet', ('-q', '--quiet')),
            DeclarationCase('mandatory', ('--color COLOR',), 'color', ('--color',), 'COLOR'),
            DeclarationCase('mandatory_equals', ('--color=COLOR',), 'color', ('--color',), 'COLOR'),
            DeclarationCase('optional', ('--limit [N]',), 'limit', ('--limit',), 'N', expected_optional=True),
            DeclarationCase('dashed_name', ('--render-as FORMAT',), 'render_as', ('--render-as',), 'FORMAT'),
            DeclarationCase('negatable', ('--[no-]trace',), 'trace', ('--trace',), expected_negatable=True),
            DeclarationCase('short_only', ('-x',), 'x', ('-x',)),
        ],
        ids=lambda case: case.name,
    )
    def test_declarations(self, case: DeclarationCase) -> None:
        option = OptionSpec.from_declarations(*case.declarations)

        assert option.name == case.expected_name
        assert option.flags == case.expected_flags
        assert option.argument == case.expected_argument
        assert option.optional_argument is case.expected_optional
        assert option.negatable is case.expected_negatable

    def test_invalid_declaration(self) -> None:
        with pytest.raises(ValueError, match='Invalid option declaration'):
            OptionSpec.from_declarations('color')

    def test_flags_need_marker(self) -> None:
        with pytest.raises(ValidationError, match='must start with'):
            OptionSpec(name='color', flags=('color',))

    def test_flags_required(self) -> None:
        with pytest.raises(ValidationError, match='at least one flag'):
            OptionSpec(name='color', flags=())


class TestOptionSpecMatching:
    """Tests for matching raw tokens against an option."""

    @pytest.mark.parametrize(
        ('item', 'expected'),
        [
            ('--ignore-cache', True),
            ('--ignore_cache', True),
            ('--ignore-cache=yes', True),
            ('-i', True),
            ('--ignore', False),
            ('--no-ignore-cache', False),
        ],
    )
    def test_matches(self, item: str, expected: bool) -> None:
        option = OptionSpec.from_declarations('--ignore-cache', '-i')

        assert option.matches(item) is expected

    def test_negated_spelling(self) -> None:
        option = OptionSpec.from_declarations('--[no-]trace')

        assert option.spellings == ('--trace', '--no-trace')
        assert option.matches('--no-trace')

    def test_underscore_declaration(self) -> None:
        option = OptionSpec.from_declarations('--ignore_cache')

        assert option.matches('--ignore-cache')
        assert option.matches('--ignore_cache')


def test_looks_like_flag() -> None:
    assert looks_like_flag('--x')
    assert looks_like_flag('-x')
    assert not looks_like_flag('-')
    assert not looks_like_flag('x')
    assert not looks_like_flag(None)


def test_flag_aliases() -> None:
    assert flag_aliases('--ignore-cache') == ('--ignore-cache', '--ignore_cache')
    assert flag_aliases('--ignore_cache') == ('--ignore_cache', '--ignore-cache')
    assert flag_aliases('--debug') == ('--debug',)
    assert flag_aliases('-d') == ('-d',)


def _noop(*args: object) -> None:
    return None


class TestFace:
    """Tests for Face validation and lookups."""

    def test_lookups(self) -> None:
        color = OptionSpec.from_declarations('--color COLOR')
        template = OptionSpec.from_declarations('--template T')
        show = ActionDescriptor(name='show', handler=_noop, options=(template,))
        listing = ActionDescriptor(name='list', handler=_noop, default=True)
        face = Face(name='widget', options=(color,), actions=(show, listing))

        assert face.get_action('show') is show
        assert face.get_action('nope') is None
        assert face.get_default_action() is listing
        assert face.get_option('color') is color
        assert face.find_option('--color=red') is color
        assert face.find_option('--template') is None
        assert face.action_options(show) == (color, template)
        assert show.get_option('template') is template

    def test_duplicate_actions(self) -> None:
        action = ActionDescriptor(name='show', handler=_noop)

        with pytest.raises(ValidationError, match='Duplicate action names'):
            Face(name='widget', actions=(action, action))

    def test_single_default(self) -> None:
        actions = (
            ActionDescriptor(name='a', handler=_noop, default=True),
            ActionDescriptor(name='b', handler=_noop, default=True),
        )

        with pytest.raises(ValidationError, match='only one default action'):
            Face(name='widget', actions=actions)

    def test_negative_arity_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ActionDescriptor(name='a', handler=_noop, required_args=-1)

    def test_render_hooks(self) -> None:
        hook = str
        action = ActionDescriptor(name='a', handler=_noop, render_hooks={'for_humans': hook})

        assert action.when_rendering('for_humans') is hook
        assert action.when_rendering('json') is None


def test_invocation_state_splits_options() -> None:
    action = ActionDescriptor(name='a', handler=_noop)
    state = InvocationState(
        face=Face(name='f', actions=(action,)),
        action=action,
        render_format=HUMAN,
        arguments=['x', {'quiet': True}],
    )

    assert state.plain_arguments == ['x']
    assert state.options == {'quiet': True}
