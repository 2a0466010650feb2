"""Match clock arithmetic on "m:ss" strings."""

SECONDS_PER_MINUTE = 60


def parse_clock(value: str) -> int:
    """
    Convert a "m:ss" clock string to total seconds.

    Raises:
        ValueError: If the string is not a valid non-negative clock.
    """
    minutes_str, sep, seconds_str = value.strip().partition(":")
    if not sep:
        raise ValueError(f"Invalid clock value: {value!r}")
    minutes = int(minutes_str)
    seconds = int(seconds_str)
    if minutes < 0 or not 0 <= seconds < SECONDS_PER_MINUTE:
        raise ValueError(f"Invalid clock value: {value!r}")
    return minutes * SECONDS_PER_MINUTE + seconds


def format_clock(total_seconds: int) -> str:
    """Render seconds as "m:ss", clamping anything negative to 0:00."""
    total_seconds = max(0, int(total_seconds))
    return f"{total_seconds // SECONDS_PER_MINUTE}:{total_seconds % SECONDS_PER_MINUTE:02d}"


def advance_clock(time_remaining: str, elapsed_seconds: int) -> str:
    """
    Run the clock down by elapsed_seconds.

    The result never goes below 0:00 and never wraps.

    Example:
        advance_clock("3:30", 200) -> "0:10"
        advance_clock("1:00", 200) -> "0:00"
    """
    return format_clock(parse_clock(time_remaining) - max(0, elapsed_seconds))
