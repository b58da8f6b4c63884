"""Date helpers shared by the analytics calculators.

Weekdays are indexed Sunday-first (0=Sunday .. 6=Saturday) to match the
dashboard charts, unlike ``datetime.weekday()`` which starts on Monday.
"Local" dates are always computed in the timezone of the reference
instant ``now`` that the caller passes in.
"""
from datetime import date, datetime, timedelta, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal, localcontext
from math import isfinite
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


def weekday_index(d: date) -> int:
    return (d.weekday() + 1) % 7


def ensure_aware(dt: datetime) -> datetime:
    """Interpret naive datetimes as UTC (SQLite drops the offset)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_instant(value) -> datetime:
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return ensure_aware(datetime.fromisoformat(text))
        except ValueError:
            raise ValueError(f"unparsable start time {value!r}") from None
    raise ValueError(f"unparsable start time {value!r}")


def parse_minutes(value) -> float:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"invalid duration {value!r}")
    try:
        minutes = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"invalid duration {value!r}") from None
    if not isfinite(minutes):
        raise ValueError(f"invalid duration {value!r}")
    if minutes < 0:
        raise ValueError(f"negative duration {value!r}")
    return minutes


def reference_timezone(now: datetime) -> tzinfo:
    return now.tzinfo or timezone.utc


def resolve_timezone(name: str | None) -> tzinfo:
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {name}") from None


def local_date(instant: datetime, tz: tzinfo) -> date:
    return ensure_aware(instant).astimezone(tz).date()


def date_range(end: date, days: int) -> list[date]:
    """``days`` consecutive dates in ascending order, the last one being ``end``."""
    return [end - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def round_half_up(value: float, ndigits: int = 0):
    quantum = Decimal(1).scaleb(-ndigits)
    exact = Decimal(str(value))
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the kept decimals
        ctx.prec = max(ctx.prec, exact.adjusted() + ndigits + 2)
        rounded = exact.quantize(quantum, rounding=ROUND_HALF_UP)
    if ndigits == 0:
        return int(rounded)
    return float(rounded)


def format_duration(minutes: float = 0) -> str:
    """Human label for a minute count, e.g. ``"1 hour 5 minutes"``."""
    total = round_half_up(minutes or 0)
    hours, mins = divmod(total, 60)

    if hours == 0:
        return f"{mins} minute{'s' if mins != 1 else ''}"
    hour_label = f"{hours} hour{'s' if hours > 1 else ''}"
    if mins == 0:
        return hour_label
    return f"{hour_label} {mins} minute{'s' if mins > 1 else ''}"
