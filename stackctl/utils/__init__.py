# stackctl/utils/__init__.py
"""Utility functions for stackctl"""

from .async_utils import run_async, gather_in_threads
from .clock import Clock
from .file_utils import create_from_template, copy_into
from .formatting import format_duration, short_revision
from .git_utils import GitRepository, GitCommandError, read_submodules
from .template_utils import render_template
from .version_utils import parse_version, extract_version, is_at_least

__all__ = [
    # Async utilities
    "run_async",
    "gather_in_threads",

    # Clock
    "Clock",

    # File utilities
    "create_from_template",
    "copy_into",

    # Formatting
    "format_duration",
    "short_revision",

    # Git utilities
    "GitRepository",
    "GitCommandError",
    "read_submodules",

    # Template utilities
    "render_template",

    # Version utilities
    "parse_version",
    "extract_version",
    "is_at_least",
]
