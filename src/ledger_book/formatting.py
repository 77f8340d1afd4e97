"""Date and value formatting according to a book's locale settings."""

import re
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo

from ledger_book.domain.value_objects import DecimalSeparator

# Book date patterns use the Java SimpleDateFormat letters, e.g. dd/MM/yyyy
_DATE_TOKENS = re.compile(r"yyyy|yy|MM|M|dd|d|HH|H|mm|ss")


def format_date(
    value: date | datetime, pattern: str, time_zone: str | None = None
) -> str:
    """Render a date with a book date pattern.

    Aware datetimes (and naive ones, taken as UTC) are shifted to time_zone
    first when one is given. Plain dates are rendered as-is.
    """
    if isinstance(value, datetime) and time_zone:
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        value = value.astimezone(ZoneInfo(time_zone))

    hour = getattr(value, "hour", 0)
    minute = getattr(value, "minute", 0)
    second = getattr(value, "second", 0)
    fields = {
        "yyyy": f"{value.year:04d}",
        "yy": f"{value.year % 100:02d}",
        "MM": f"{value.month:02d}",
        "M": str(value.month),
        "dd": f"{value.day:02d}",
        "d": str(value.day),
        "HH": f"{hour:02d}",
        "H": str(hour),
        "mm": f"{minute:02d}",
        "ss": f"{second:02d}",
    }
    return _DATE_TOKENS.sub(lambda m: fields[m.group(0)], pattern)


def round_value(value: Decimal | int | float | str, fraction_digits: int) -> Decimal:
    """Round half-up to the given number of fraction digits."""
    exponent = Decimal(1).scaleb(-fraction_digits)
    return Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)


def format_value(
    value: Decimal | int | float | str,
    decimal_separator: DecimalSeparator,
    fraction_digits: int,
) -> str:
    """Format an amount with fixed fraction digits and no digit grouping."""
    text = f"{round_value(value, fraction_digits):f}"
    return text.replace(".", decimal_separator.symbol)
