from time import gmtime as _gmtime, localtime as _localtime, struct_time
from typing import NamedTuple

MONTH_NAMES = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)
# "Tus" is the established spelling of the host's table
WEEKDAY_NAMES = ("Sun", "Mon", "Tus", "Wed", "Thu", "Fri", "Sat")


class Breakdown(NamedTuple):
    """The calendar fields of an instant in a given timezone mode.

    ``wday`` counts from Sunday (0) and ``yday`` is 0-based,
    following the C ``struct tm`` convention of the host.
    """

    year: int
    month: int
    mday: int
    hour: int
    minute: int
    second: int
    wday: int
    yday: int
    isdst: bool

    @classmethod
    def from_struct_time(cls, t: struct_time, /) -> "Breakdown":
        return cls(
            t.tm_year,
            t.tm_mon,
            t.tm_mday,
            t.tm_hour,
            t.tm_min,
            # glibc may report a leap second as 60; we don't handle those
            min(t.tm_sec, 59),
            # struct_time counts weekdays from Monday, days of year from 1
            (t.tm_wday + 1) % 7,
            t.tm_yday - 1,
            t.tm_isdst > 0,
        )


def breakdown(secs: int, utc: bool, /) -> Breakdown:
    """Break down epoch seconds into calendar fields, using the platform's
    UTC or local conversion.

    Raises ``OverflowError``, ``OSError`` or ``ValueError`` if the platform
    can't represent the instant. The caller decides how to report this.
    """
    return Breakdown.from_struct_time((_gmtime if utc else _localtime)(secs))


def is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


# 1-indexed days per month
_MONTHDAYS = (0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
# 1-indexed days before the start of each month, in a common year
_DAYS_BEFORE_MONTH = (0, 0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)
# days from 0001-01-01 up to 1970-01-01
_EPOCH_DAYS = 719_162


def days_in_month(year: int, month: int) -> int:
    return _MONTHDAYS[month] + (month == 2 and is_leap(year))


def utc_fields_to_secs(
    year: int, month: int, day: int, hour: int, minute: int, second: int
) -> int:
    """Convert UTC wall-clock fields to epoch seconds, in the proleptic
    Gregorian calendar.

    Years have no upper bound here: whether the result can be broken
    down again is up to the platform.

    Raises ``ValueError`` for fields that don't form a valid date and time.
    """
    if year < 1:
        raise ValueError("year must be positive")
    if not 1 <= month <= 12:
        raise ValueError("month out of range")
    if not 1 <= day <= days_in_month(year, month):
        raise ValueError("day out of range")
    if not (0 <= hour < 24 and 0 <= minute < 60 and 0 <= second < 60):
        raise ValueError("time out of range")
    y = year - 1
    days = (
        y * 365
        + y // 4
        - y // 100
        + y // 400
        + _DAYS_BEFORE_MONTH[month]
        + (month > 2 and is_leap(year))
        + day
        - 1
        - _EPOCH_DAYS
    )
    return days * 86_400 + hour * 3_600 + minute * 60 + second
