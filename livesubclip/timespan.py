"""Time span parsing and formatting helpers.

Two textual forms are in use: the .NET ``TimeSpan`` invariant format
(``[-][d.]hh:mm:ss[.fffffff]``) that callers store as their last subclip end
time, and ISO-8601 durations (``PT1H2M3.5S``) on the control-plane wire.
"""

import re
from datetime import timedelta
from fractions import Fraction

RE_TIMESPAN = re.compile(
    r"^(?P<sign>-)?(?:(?P<days>\d+)\.)?(?P<hours>\d{1,2}):(?P<minutes>\d{1,2}):(?P<seconds>\d{1,2})"
    r"(?:\.(?P<fraction>\d{1,7}))?$"
)
RE_ISO_DURATION = re.compile(
    r"^(?P<sign>-)?P(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$"
)


def ticks_to_timedelta(ticks: int, time_scale: int) -> timedelta:
    """Convert a tick count to a duration, rounded to the nearest microsecond."""
    if time_scale <= 0:
        raise ValueError(f"time_scale must be positive, got {time_scale}")
    return timedelta(microseconds=round(Fraction(ticks * 1_000_000, time_scale)))


def _fraction_to_microseconds(fraction: str) -> int:
    # Up to 7 digits (100 ns ticks); the last digit is rounded away.
    return round(Fraction(int(fraction), 10 ** len(fraction)) * 1_000_000)


def parse_timespan(text: str) -> timedelta:
    """Parse a .NET TimeSpan string or an ISO-8601 duration."""
    if not isinstance(text, str):
        raise ValueError(f"Time span must be a string, got {type(text).__name__}")
    value = text.strip()

    m = RE_TIMESPAN.match(value)
    if m:
        hours, minutes, seconds = int(m["hours"]), int(m["minutes"]), int(m["seconds"])
        if hours > 23 or minutes > 59 or seconds > 59:
            raise ValueError(f"Time span component out of range: {text!r}")
        td = timedelta(
            days=int(m["days"] or 0),
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            microseconds=_fraction_to_microseconds(m["fraction"]) if m["fraction"] else 0,
        )
        return -td if m["sign"] else td

    m = RE_ISO_DURATION.match(value)
    has_component = m and any(m[k] is not None for k in ("days", "hours", "minutes", "seconds"))
    if has_component and not value.endswith("T"):
        seconds = Fraction(m["seconds"]) if m["seconds"] else Fraction(0)
        td = timedelta(
            days=int(m["days"] or 0),
            hours=int(m["hours"] or 0),
            minutes=int(m["minutes"] or 0),
            microseconds=round(seconds * 1_000_000),
        )
        return -td if m["sign"] else td

    raise ValueError(f"Unrecognized time span: {text!r}")


def _split(td: timedelta) -> tuple[str, int, int, int, int, int]:
    sign = "-" if td < timedelta(0) else ""
    td = abs(td)
    hours, rem = divmod(td.seconds, 3600)
    minutes, seconds = divmod(rem, 60)
    return sign, td.days, hours, minutes, seconds, td.microseconds


def format_timespan(td: timedelta) -> str:
    """Format *td* the way .NET ``TimeSpan.ToString()`` does."""
    sign, days, hours, minutes, seconds, micros = _split(td)
    text = f"{sign}{days}." if days else sign
    text += f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    if micros:
        text += f".{micros:06d}0"
    return text


def format_iso_duration(td: timedelta) -> str:
    """Format *td* as an ISO-8601 duration with hours as the largest unit."""
    sign, days, hours, minutes, seconds, micros = _split(td)
    hours += days * 24
    text = f"{sign}PT"
    if hours:
        text += f"{hours}H"
    if minutes:
        text += f"{minutes}M"
    if seconds or micros or not (hours or minutes):
        if micros:
            text += f"{seconds}.{micros:06d}".rstrip("0") + "S"
        else:
            text += f"{seconds}S"
    return text
