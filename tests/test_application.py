"""Tests for running face actions end to end."""

import pytest
from pytest_mock import MockerFixture

from faceplate.application import FaceApplication, check_arity
from faceplate.exceptions import ArityError
from faceplate.models import ActionDescriptor, Face, InvocationState
from faceplate.registry import FaceRegistry
from faceplate.rendering import HUMAN
from faceplate.settings import Settings

from .conftest import build_gadget_face, build_widget_face


def _state(required_args: int, arguments: list) -> InvocationState:
    action = ActionDescriptor(name='act', handler=lambda *a: None, required_args=required_args)
    return InvocationState(
        face=Face(name='f', actions=(action,)),
        action=action,
        render_format=HUMAN,
        arguments=arguments,
    )


class TestCheckArity:
    """Tests for positional argument count checks."""

    def test_exact_count(self) -> None:
        check_arity(_state(2, ['a', 'b', {}]))

    @pytest.mark.parametrize('given', [0, 1, 3])
    def test_mismatch(self, given: int) -> None:
        arguments = ['x'] * given + [{}]

        with pytest.raises(ArityError) as excinfo:
            check_arity(_state(2, arguments))

        assert excinfo.value.given == given
        assert excinfo.value.wanted == 2

    def test_zero_arity_accepts_anything(self) -> None:
        check_arity(_state(0, ['a', 'b', 'c', {}]))


class TestFaceApplication:
    """Tests for FaceApplication.run."""

    def test_renders_result_for_humans(self, registry: FaceRegistry, capsys: pytest.CaptureFixture) -> None:
        assert FaceApplication('widget', registry).run(['show', 'bolt', '--color', 'red']) is True

        out = capsys.readouterr().out
        assert out == "color  'red'\nname   'bolt'\n"

    def test_renders_string_result(self, registry: FaceRegistry, capsys: pytest.CaptureFixture) -> None:
        assert FaceApplication('widget', registry).run(['resize', '10', '20']) is True

        assert capsys.readouterr().out == '10x20\n'

    def test_renders_json(self, registry: FaceRegistry, capsys: pytest.CaptureFixture) -> None:
        assert FaceApplication('widget', registry).run(['--render-as', 'json', 'show', 'bolt']) is True

        assert capsys.readouterr().out == '{\n  "name": "bolt"\n}\n'

    def test_no_result_prints_nothing(self, capsys: pytest.CaptureFixture) -> None:
        registry = FaceRegistry([build_widget_face(show=lambda name, options: None)])

        assert FaceApplication('widget', registry).run(['show', 'bolt']) is True

        assert capsys.readouterr().out == ''

    def test_empty_string_result_prints_nothing(self, capsys: pytest.CaptureFixture) -> None:
        registry = FaceRegistry([build_widget_face(show=lambda name, options: '')])

        assert FaceApplication('widget', registry).run(['show', 'bolt']) is True

        assert capsys.readouterr().out == ''

    def test_default_action_receives_all_words(
        self,
        registry: FaceRegistry,
        capsys: pytest.CaptureFixture,
    ) -> None:
        application = FaceApplication('widget', registry)

        assert application.run(['alpha', 'beta']) is True

        assert application.state is not None
        assert application.state.is_default_action is True
        assert application.state.arguments == ['alpha', 'beta', {}]
        assert "['alpha', 'beta']" in capsys.readouterr().out

    def test_arity_error_message(self, registry: FaceRegistry, capsys: pytest.CaptureFixture) -> None:
        assert FaceApplication('widget', registry).run(['resize', '10']) is False

        out = capsys.readouterr().out
        assert 'faceplate widget resize: 2 argument expected but 1 given' in out
        assert "Try 'faceplate help widget resize' for usage" in out

    def test_action_error_shows_message(self, capsys: pytest.CaptureFixture) -> None:
        def explode(name: str, options: dict) -> None:
            msg = 'widget is jammed'
            raise RuntimeError(msg)

        registry = FaceRegistry([build_widget_face(show=explode)])

        assert FaceApplication('widget', registry).run(['show', 'bolt']) is False

        out = capsys.readouterr().out
        assert 'widget is jammed' in out
        assert 'Traceback' not in out

    def test_trace_setting_prints_traceback(self, capsys: pytest.CaptureFixture) -> None:
        def explode(name: str, options: dict) -> None:
            msg = 'widget is jammed'
            raise RuntimeError(msg)

        registry = FaceRegistry([build_widget_face(show=explode)])

        assert FaceApplication('widget', registry).run(['--trace', 'show', 'bolt']) is False

        out = capsys.readouterr().out
        assert 'Traceback' in out
        assert 'widget is jammed' in out

    def test_parse_error_is_fatal(self, registry: FaceRegistry, capsys: pytest.CaptureFixture) -> None:
        assert FaceApplication('widget', registry).run(['--bogus', 'show']) is False

        assert 'invalid option: --bogus' in capsys.readouterr().out

    def test_no_action_prints_help(self, capsys: pytest.CaptureFixture) -> None:
        registry = FaceRegistry([build_gadget_face()])

        assert FaceApplication('gadget', registry).run([]) is False

        out = capsys.readouterr().out
        assert 'gadget does not have a default action' in out
        assert 'USAGE: faceplate gadget <action>' in out

    def test_unsupported_encoder(self, registry: FaceRegistry, capsys: pytest.CaptureFixture) -> None:
        assert FaceApplication('widget', registry).run(['show', 'bolt', '--render-as', 'yaml']) is False

        assert 'dict cannot be rendered with to_yaml' in capsys.readouterr().out

    def test_interrupt_cancels_cleanly(self, mocker: MockerFixture, capsys: pytest.CaptureFixture) -> None:
        handler = mocker.Mock(side_effect=KeyboardInterrupt)
        registry = FaceRegistry([build_widget_face(show=handler)])

        assert FaceApplication('widget', registry).run(['show', 'bolt']) is True

        assert 'Cancelling Face' in capsys.readouterr().err
        handler.assert_called_once_with('bolt', {})

    def test_debug_flag_configures_logging(self, registry: FaceRegistry, mocker: MockerFixture) -> None:
        configure = mocker.patch('faceplate.application.configure_logging')

        assert FaceApplication('widget', registry).run(['-d', 'show', 'bolt']) is True

        configure.assert_called_once_with(level='debug')

    def test_settings_follow_command_line(self, registry: FaceRegistry) -> None:
        application = FaceApplication('widget', registry, settings=Settings(masterport=1))

        assert application.run(['--masterport', '2', 'show', 'bolt']) is True

        assert application.settings.masterport == 2
