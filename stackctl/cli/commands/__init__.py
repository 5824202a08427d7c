# stackctl/cli/commands/__init__.py
"""CLI commands"""

from . import backup
from . import health
from . import lifecycle
from . import update

__all__ = [
    "backup",
    "health",
    "lifecycle",
    "update",
]
