"""faceplate: action dispatch for pluggable command-line faces."""

__version__ = '0.0.0.dev0'
