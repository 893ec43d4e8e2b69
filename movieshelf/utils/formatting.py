from __future__ import annotations


def convert_minutes_to_time(minutes: int) -> str:
    """
    Format a runtime in minutes as `"<hours>h <minutes>m"` (e.g. 90 -> "1h 30m").

    Only defined for non-negative input.
    """

    hours, mins = divmod(int(minutes), 60)
    return f"{hours}h {mins}m"
