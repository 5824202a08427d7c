# stackctl/cli/decorators/__init__.py
"""CLI decorators"""

from .preflight import require_stack

__all__ = [
    'require_stack',
]
