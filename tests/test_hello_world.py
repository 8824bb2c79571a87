"""Basic smoke tests for faceplate."""

from faceplate import __version__
from faceplate.faces import default_registry
from faceplate.help import registry_help


def test_version_import() -> None:
    """Test that we can import the version."""
    assert __version__ == '0.0.0.dev0'


def test_default_faces() -> None:
    """The shipped registry has the key face and the help face."""
    assert default_registry().names() == ['help', 'key']


def test_registry_help() -> None:
    """Test that registry help can be generated without errors."""
    help_text = registry_help(default_registry())
    assert 'faceplate' in help_text
    assert 'Display faceplate help.' in help_text
