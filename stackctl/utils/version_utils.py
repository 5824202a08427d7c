"""Version handling utilities"""

import re
from typing import Optional

from packaging.version import parse, Version, InvalidVersion

_VERSION_IN_TEXT = re.compile(r"(\d+\.\d+(?:\.\d+)?)")


def parse_version(version_str: str) -> Optional[Version]:
    """
    Parse version string

    Args:
        version_str: Version string

    Returns:
        Version object or None if invalid
    """
    try:
        return parse(version_str.strip().lstrip("v"))
    except (InvalidVersion, AttributeError):
        return None


def extract_version(text: str) -> Optional[Version]:
    """
    Extract the first version number from tool output

    ``docker-compose version 1.29.2, build 5becea4c`` and
    ``Docker Compose version v2.24.6`` both yield a Version.

    Args:
        text: Output of a ``version`` command

    Returns:
        Version object or None if no version is present
    """
    match = _VERSION_IN_TEXT.search(text or "")
    if not match:
        return None
    return parse_version(match.group(1))


def is_at_least(version: Optional[Version], minimum: str) -> bool:
    """
    Check a version against a minimum

    Args:
        version: Parsed version (None means unknown)
        minimum: Minimum version string

    Returns:
        True if version is known and not older than minimum
    """
    if version is None:
        return False
    return version >= parse(minimum)
