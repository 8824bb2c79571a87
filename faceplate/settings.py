"""Settings store for faceplate, optionally read from YAML."""

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from faceplate.exceptions import ConfigurationError
from faceplate.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILENAME = 'faceplate.config.yaml'
CONFIG_ENV_VAR = 'FACEPLATE_CONFIG'

RUN_MODES = ('user', 'agent', 'master')

# Settings that are not exposed as command-line flags
_NO_FLAG = frozenset({'run_mode'})


class SettingDefinition(BaseModel):
    """A named setting and the flag spellings that set it on the command line."""

    model_config = ConfigDict(frozen=True)

    name: str
    default: Any = None
    description: str | None = None
    boolean: bool = False

    @property
    def flag(self) -> str:
        """Primary long flag for the setting."""
        return '--' + self.name.replace('_', '-')

    @property
    def optparse_args(self) -> tuple[str, ...]:
        """Declarations as they appear in usage output."""
        if self.boolean:
            return (f'--[no-]{self.flag[2:]}',)
        return (f'{self.flag} {self.name.upper()}',)

    @property
    def spellings(self) -> tuple[str, ...]:
        """Every spelling accepted for this setting."""
        if self.boolean:
            return (self.flag, f'--no-{self.flag[2:]}')
        return (self.flag,)

    def matches(self, item: str) -> bool:
        """Check whether a raw command-line token spells this setting."""
        return item.split('=', 1)[0] in self.spellings


class Settings(BaseModel):
    """Read-only configuration values for one run."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    masterport: int = Field(default=8140, ge=0, le=65535, description='Port the master listens on')
    server: str = Field(default='puppet', description='Default server to contact')
    environment: str = Field(default='production', description='Environment to address')
    trace: bool = Field(default=False, description='Print stack traces on errors')
    run_mode: Literal['user', 'agent', 'master'] = Field(default='user', description='Run mode')

    @classmethod
    def definitions(cls) -> list[SettingDefinition]:
        """Enumerate the settings that can be given as command-line flags."""
        return [
            SettingDefinition(
                name=name,
                default=field.default,
                description=field.description,
                boolean=field.annotation is bool,
            )
            for name, field in cls.model_fields.items()
            if name not in _NO_FLAG
        ]

    @classmethod
    def find_definition(cls, item: str) -> SettingDefinition | None:
        """Find the setting spelled by a raw command-line token."""
        return next((d for d in cls.definitions() if d.matches(item)), None)

    def with_overrides(self, **overrides: Any) -> 'Settings':
        """Return a validated copy with some values replaced."""
        if not overrides:
            return self
        return type(self).model_validate({**self.model_dump(), **overrides})


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        msg = f'configuration file not found: {config_path}'
        raise ConfigurationError(msg)

    logger.debug('loading_config', config=str(config_path))
    try:
        with config_path.open() as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        msg = f'failed to parse YAML: {exc}'
        raise ConfigurationError(msg) from exc

    if not isinstance(data, dict):
        msg = f'configuration root must be a mapping in {config_path}'
        raise ConfigurationError(msg)

    return data


def load_settings(config_path: Path) -> Settings:
    """Load settings from a YAML file."""
    config_data = _load_yaml_config(config_path)

    try:
        return Settings.model_validate(config_data)
    except ValidationError as exc:
        logger.error('config_validation_failed', _verbose_errors=exc.errors())
        msg = f'invalid faceplate configuration in {config_path}'
        raise ConfigurationError(msg) from exc


def discover_settings(cwd: Path | None = None) -> Settings:
    """Load settings from $FACEPLATE_CONFIG or ./faceplate.config.yaml.

    Falls back to defaults when neither exists. A path named explicitly in
    the environment must exist.
    """
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        return load_settings(Path(explicit))

    candidate = (cwd or Path.cwd()) / DEFAULT_CONFIG_FILENAME
    if candidate.exists():
        return load_settings(candidate)
    return Settings()


__all__ = [
    'CONFIG_ENV_VAR',
    'DEFAULT_CONFIG_FILENAME',
    'RUN_MODES',
    'SettingDefinition',
    'Settings',
    'discover_settings',
    'load_settings',
]
