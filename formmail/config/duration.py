"""Duration strings used by the rate limit window setting.

Two spellings are accepted: compact unit strings ("15m", "1h30m") and
ISO-8601 durations ("PT15M", "P1D").
"""

import re


class DurationParseError(ValueError):
    """Raised when a duration string cannot be parsed."""

    pass


_UNITS = (("d", 86400), ("h", 3600), ("m", 60), ("s", 1))
_UNIT_SECONDS = dict(_UNITS)

_ISO_PATTERN = re.compile(
    r"^P(?:(?P<d>\d+)D)?(?:T(?:(?P<h>\d+)H)?(?:(?P<m>\d+)M)?(?:(?P<s>\d+(?:\.\d+)?)S)?)?$"
)
_COMPACT_PATTERN = re.compile(r"^(?:\d+[smhd])+$")
_COMPACT_PART = re.compile(r"(\d+)([smhd])")


def parse_duration(duration_str: str) -> int:
    """
    Parse a duration string to whole seconds.

    Examples:
        >>> parse_duration("15m")
        900
        >>> parse_duration("PT15M")
        900

    Raises:
        DurationParseError: If the string is empty, malformed or zero
    """
    text = re.sub(r"\s+", "", duration_str or "").lower()
    if not text:
        raise DurationParseError("Duration string cannot be empty")

    if text.startswith("p"):
        match = _ISO_PATTERN.match(text.upper())
        if not match:
            raise DurationParseError(
                f"Invalid ISO-8601 duration: '{duration_str}'. Expected e.g. 'PT15M', 'PT1H30M' or 'P1D'"
            )
        total = sum(
            int(float(value)) * _UNIT_SECONDS[unit]
            for unit, value in match.groupdict().items()
            if value
        )
    else:
        if not _COMPACT_PATTERN.match(text):
            raise DurationParseError(
                f"Invalid duration: '{duration_str}'. "
                "Use digits followed by s, m, h or d, e.g. '15m' or '1h30m'"
            )
        total = sum(int(num) * _UNIT_SECONDS[unit] for num, unit in _COMPACT_PART.findall(text))

    if total == 0:
        raise DurationParseError(f"Duration cannot be zero: '{duration_str}'")
    return total


def describe_duration(seconds: int) -> str:
    """Render seconds in the largest whole unit, e.g. 900 -> "15 minutes"."""
    names = {"d": "day", "h": "hour", "m": "minute", "s": "second"}
    for unit, size in _UNITS:
        if seconds >= size or unit == "s":
            count = seconds // size
            return f"{count} {names[unit]}{'' if count == 1 else 's'}"
    return f"{seconds} seconds"


def validate_duration_range(
    duration_seconds: int,
    min_seconds: int = 1,
    max_seconds: int = 86400,
    label: str = "Duration",
) -> None:
    """Check that a parsed duration lies within [min_seconds, max_seconds].

    Raises:
        DurationParseError: Naming the setting via label
    """
    if duration_seconds < min_seconds:
        raise DurationParseError(
            f"{label} too short: {describe_duration(duration_seconds)}. "
            f"Minimum is {describe_duration(min_seconds)}."
        )
    if duration_seconds > max_seconds:
        raise DurationParseError(
            f"{label} too long: {describe_duration(duration_seconds)}. "
            f"Maximum is {describe_duration(max_seconds)}."
        )
