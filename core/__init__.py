"""Domain layer shared by the viewer and the renderer.

This package has no pygame or network dependencies. Key modules include:

- models: pydantic wire models for snapshots, config and environment
- exceptions: error taxonomy for remote-service failures
- config: display constants and client settings
"""

from . import exceptions as exceptions
from . import models as models

__all__ = [
    "exceptions",
    "models",
]
