"""The key face: certificate keys."""

import yaml
from pydantic import BaseModel, field_validator

from faceplate.faces.indirector import define_indirector_face
from faceplate.indirection import Indirection, Terminus
from faceplate.models import Face
from faceplate.settings import Settings

DESCRIPTION = """
Keys are created for you automatically when certificate
requests are generated with 'faceplate certificate generate'.
"""


class Key(BaseModel):
    """A certificate key, identified by its certname."""

    name: str
    content: str | None = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate that name is not empty."""
        if not v.strip():
            msg = 'Key name cannot be empty'
            raise ValueError(msg)
        return v.strip()

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.model_dump(), sort_keys=True, default_flow_style=False)

    def to_text(self) -> str:
        return self.content or ''


def key_indirection(terminus: Terminus | None = None) -> Indirection:
    return Indirection(name='key', model=Key, terminus=terminus)


def define_key_face(terminus: Terminus | None = None, settings: Settings | None = None) -> Face:
    """Create, save, and remove certificate keys."""
    return define_indirector_face(
        key_indirection(terminus),
        summary='Create, save, and remove certificate keys.',
        description=DESCRIPTION,
        settings=settings,
    )
