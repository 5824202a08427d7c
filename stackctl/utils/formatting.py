"""Formatting utilities for display"""


def format_duration(seconds: float) -> str:
    """Format duration in seconds to human readable format

    Args:
        seconds: Duration in seconds

    Returns:
        Human readable duration string

    Examples:
        >>> format_duration(1.5)
        '1.5s'
        >>> format_duration(95)
        '1m 35s'
    """
    if seconds < 60:
        return f"{seconds:.1f}s"

    minutes, secs = divmod(int(seconds), 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"

    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m"


def short_revision(revision: str, length: int = 7) -> str:
    """Abbreviate a revision for display

    Examples:
        >>> short_revision("0123456789abcdef")
        '0123456'
    """
    return (revision or "")[:length]

