# The MIT License (MIT)
#
# Copyright (c) Arie Bovenberg
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

# Maintainer's notes:
#
# - Why is the value type in one file?
#   - Flat is better than nested
#   - It's easier to vendor (i.e. copy-paste) this library if needed
# - Unlike most datetime types, ``Time`` is mutable: ``to_utc()`` and
#   ``to_local()`` switch the timezone mode in place. The cached calendar
#   breakdown is recomputed eagerly whenever the mode or the seconds change,
#   so accessors never need to normalize.
# - Microseconds are carried as a separate slot and are never carried into
#   the seconds after arithmetic. Only whole seconds are exact.
from __future__ import annotations

__version__ = "0.1.0"

import enum
from math import floor
from numbers import Real
from struct import pack, unpack
from time import time_ns
from typing import TYPE_CHECKING, Optional

from ._common import (
    MONTH_NAMES,
    WEEKDAY_NAMES,
    Breakdown,
    breakdown,
    utc_fields_to_secs,
)

__all__ = [
    "Time",
    "Zone",
    # Exceptions
    "ArgumentError",
    "InvalidTimeError",
    "OutOfRangeError",
]


class Zone(enum.Enum):
    """The timezone modes of a :class:`Time`.

    ``UNSET`` only exists while a value is being constructed.
    """

    UNSET = 0
    UTC = 1
    LOCAL = 2

    @property
    def display_name(self) -> Optional[str]:
        """``"UTC"`` or ``"LOCAL"``, or ``None`` for ``UNSET``"""
        return _ZONE_NAMES[self.value]


_ZONE_NAMES = (None, "UTC", "LOCAL")
_object_new = object.__new__


class ArgumentError(ValueError):
    """An argument is missing or can't be used"""


class InvalidTimeError(ArgumentError):
    """Calendar fields don't describe a representable time"""


class OutOfRangeError(ValueError):
    """The platform can't represent the time in a calendar"""


if TYPE_CHECKING:
    from typing import final
else:

    def final(cls):

        def init_subclass_not_allowed(cls, **kwargs):
            raise TypeError("Subclassing not allowed")

        cls.__init_subclass__ = init_subclass_not_allowed
        return cls


@final
class Time:
    """A point in time with whole-second precision and a microsecond slot,
    viewed either in UTC or in the system's local timezone.

    The constructor takes *microseconds* since the UNIX epoch and creates
    a value in the local timezone. Use :meth:`now`, :meth:`at` or :meth:`gm`
    for the other ways to create one.

    Example
    -------
    >>> t = Time.gm(2000, 1, 1)
    Time(2000-01-01 00:00:00 UTC)
    >>> t.wday
    6
    >>> str(t + 90)
    'Sat Jan 01 00:01:30 UTC 2000'
    """

    __slots__ = ("_sec", "_usec", "_zone", "_tm")

    _sec: int
    _usec: int
    _zone: Zone
    _tm: Breakdown

    def __init__(self, microseconds: float, /) -> None:
        if not isinstance(microseconds, Real):
            raise TypeError("microseconds must be a real number")
        if isinstance(microseconds, int):
            secs = microseconds // 1_000_000
        else:
            secs = _floor_secs(microseconds / 1_000_000)
        self._set(secs, 0, Zone.LOCAL)

    @classmethod
    def now(cls) -> Time:
        """The current time of the system clock in the local timezone.

        Sub-second resolution is not captured: ``usec`` is always 0.
        """
        return cls._from_parts(time_ns() // 1_000_000_000, 0, Zone.LOCAL)

    @classmethod
    def at(cls, value: Time | float | None = None, /) -> Time:
        """Create a time from a number of seconds since the epoch,
        or from another :class:`Time`.

        A number creates a value in the local timezone. Another ``Time``
        gives a value with the same whole seconds and timezone mode.

        Example
        -------
        >>> Time.at(1.5).usec
        500000
        >>> Time.at(Time.gm(1970, 1, 1, second=3)).timestamp()
        3
        """
        if value is None or value is False:
            raise ArgumentError("Need at least one argument.")
        if isinstance(value, Time):
            return cls._from_parts(value._sec, 0, value._zone)
        if not isinstance(value, Real):
            raise TypeError(
                f"can't convert {type(value).__name__} into a time"
            )
        return cls._construct(value, Zone.LOCAL)

    @classmethod
    def gm(
        cls,
        year: float,
        month: float = 1,
        day: float = 1,
        hour: float = 0,
        minute: float = 0,
        second: float = 0,
        usec: float = 0,
    ) -> Time:
        """Create a time from calendar fields interpreted as UTC.

        Fractional fields are floored. ``usec`` is accepted for
        compatibility, but values built from fields always have ``usec``
        of 0.

        Raises :class:`InvalidTimeError` if the fields don't form a valid
        date and time, or if the platform can't represent the result.
        """
        try:
            secs = utc_fields_to_secs(
                *[floor(f) for f in (year, month, day, hour, minute, second)]
            )
            return cls._from_parts(secs, 0, Zone.UTC)
        except (ValueError, OverflowError):
            raise InvalidTimeError("Not a valid time.") from None

    @property
    def year(self) -> int:
        return self._tm.year

    @property
    def month(self) -> int:
        """The month, from 1 to 12"""
        return self._tm.month

    @property
    def mday(self) -> int:
        """The day of the month"""
        return self._tm.mday

    @property
    def day(self) -> bool:
        """Whether daylight saving time is in effect.

        Note
        ----
        This matches the host interface, where ``day`` is an alias of
        ``dst?``. Use :attr:`mday` for the day of the month.
        """
        return self._tm.isdst

    @property
    def hour(self) -> int:
        return self._tm.hour

    @property
    def minute(self) -> int:
        return self._tm.minute

    @property
    def second(self) -> int:
        return self._tm.second

    @property
    def usec(self) -> int:
        return self._usec

    @property
    def wday(self) -> int:
        """The day of the week, from 0 (Sunday) to 6 (Saturday)"""
        return self._tm.wday

    @property
    def yday(self) -> int:
        """The day of the year, starting at 0 for January 1st"""
        return self._tm.yday

    @property
    def tz(self) -> Zone:
        return self._zone

    @property
    def zone(self) -> Optional[str]:
        """The name of the timezone mode: ``"UTC"`` or ``"LOCAL"``"""
        return self._zone.display_name

    def is_dst(self) -> bool:
        return self._tm.isdst

    def is_utc(self) -> bool:
        return self._zone is Zone.UTC

    def timestamp(self) -> int:
        """The whole seconds since the UNIX epoch"""
        return self._sec

    def timestamp_float(self) -> float:
        """The seconds since the UNIX epoch, including microseconds"""
        return self._sec + self._usec / 1_000_000

    def to_utc(self) -> Time:
        """Switch to the UTC timezone mode, in place. Returns ``self``."""
        self._set(self._sec, self._usec, Zone.UTC)
        return self

    def to_local(self) -> Time:
        """Switch to the local timezone mode, in place. Returns ``self``."""
        self._set(self._sec, self._usec, Zone.LOCAL)
        return self

    def copy_from(self, src: Time, /) -> Time:
        """Overwrite this time with the complete state of ``src``,
        including its calendar fields. Returns ``self``.

        Raises ``TypeError`` if ``src`` isn't exactly the same type.
        """
        if src is self:
            return self
        if type(src) is not type(self):
            raise TypeError("wrong argument class")
        self._sec = src._sec
        self._usec = src._usec
        self._zone = src._zone
        self._tm = src._tm
        return self

    def asctime(self) -> str:
        """Format in the ``asctime`` style of the host

        Example
        -------
        >>> Time.gm(1970, 1, 1).asctime()
        'Thu Jan 01 00:00:00 UTC 1970'
        """
        tm = self._tm
        return (
            f"{WEEKDAY_NAMES[tm.wday]} {MONTH_NAMES[tm.month - 1]} "
            f"{tm.mday:02d} {tm.hour:02d}:{tm.minute:02d}:{tm.second:02d} "
            f"{'UTC ' if self._zone is Zone.UTC else ''}{tm.year}"
        )

    def __str__(self) -> str:
        """Same as :meth:`asctime`"""
        return self.asctime()

    def compare(self, other: object, /) -> Optional[int]:
        """Three-way comparison: -1, 0 or 1.
        Returns ``None`` if ``other`` isn't a :class:`Time`.
        """
        if not isinstance(other, Time):
            return None
        a = (self._sec, self._usec)
        b = (other._sec, other._usec)
        return (a > b) - (a < b)

    def __eq__(self, other: object) -> bool:
        """Check if two times have the same seconds and microseconds.
        The timezone mode is ignored.

        Example
        -------
        >>> Time.at(1000.0) == Time.at(1000.0).to_utc()
        True
        """
        if not isinstance(other, Time):
            return NotImplemented
        return (self._sec, self._usec) == (other._sec, other._usec)

    # mutable: to_utc, to_local and copy_from change a value in place
    __hash__ = None  # type: ignore[assignment]

    def __lt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return (self._sec, self._usec) < (other._sec, other._usec)

    def __le__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return (self._sec, self._usec) <= (other._sec, other._usec)

    def __gt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return (self._sec, self._usec) > (other._sec, other._usec)

    def __ge__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return (self._sec, self._usec) >= (other._sec, other._usec)

    def __add__(self, seconds: float) -> Time:
        """Add a number of seconds, keeping the timezone mode.

        Example
        -------
        >>> Time.gm(2020, 8, 15) + 3600.5
        Time(2020-08-15 01:00:00.500000 UTC)
        """
        if isinstance(seconds, Real):
            return self._construct(
                self.timestamp_float() + seconds, self._zone
            )
        return NotImplemented

    def __sub__(self, seconds: float) -> Time:
        """Subtract a number of seconds, keeping the timezone mode."""
        if isinstance(seconds, Real):
            return self._construct(
                self.timestamp_float() - seconds, self._zone
            )
        return NotImplemented

    def __repr__(self) -> str:
        tm = self._tm
        return (
            f"Time({tm.year:04d}-{tm.month:02d}-{tm.mday:02d} "
            f"{tm.hour:02d}:{tm.minute:02d}:{tm.second:02d}"
            + bool(self._usec) * f".{self._usec:06d}"
            + f" {self.zone})"
        )

    def __copy__(self) -> Time:
        return _object_new(Time).copy_from(self)

    def __deepcopy__(self, _) -> Time:
        return _object_new(Time).copy_from(self)

    # a custom pickle implementation with a smaller payload
    def __reduce__(self) -> tuple[object, ...]:
        return (
            _unpkl_time,
            (pack("<qlB", self._sec, self._usec, self._zone.value),),
        )

    def _set(self, secs: int, usec: int, zone: Zone) -> None:
        if zone is Zone.UNSET:
            raise ValueError("timezone mode must be UTC or LOCAL")
        # normalize first, so a failure leaves the value untouched
        tm = _checked_breakdown(secs, zone)
        self._sec = secs
        self._usec = usec
        self._zone = zone
        self._tm = tm

    @classmethod
    def _from_parts(cls, secs: int, usec: int, zone: Zone) -> Time:
        self = _object_new(cls)
        self._set(secs, usec, zone)
        return self

    @classmethod
    def _construct(cls, seconds: float, zone: Zone) -> Time:
        # split the rounded total, so usec always stays below one second
        try:
            secs, usec = divmod(round(seconds * 1_000_000), 1_000_000)
        except (OverflowError, ValueError):
            raise OutOfRangeError(f"Time out of range: {seconds!r}") from None
        return cls._from_parts(secs, usec, zone)


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
def _unpkl_time(data: bytes) -> Time:
    secs, usec, zone = unpack("<qlB", data)
    return Time._from_parts(secs, usec, Zone(zone))


def _floor_secs(value: float) -> int:
    try:
        return floor(value)
    except (OverflowError, ValueError):
        raise OutOfRangeError(f"Time out of range: {value!r}") from None


def _checked_breakdown(secs: int, zone: Zone) -> Breakdown:
    try:
        return breakdown(secs, zone is Zone.UTC)
    except (OverflowError, OSError, ValueError):
        raise OutOfRangeError(
            f"Time out of range: {secs} seconds since the epoch"
        ) from None


def _patch_time_frozen(t: Time) -> None:
    global time_ns

    def time_ns() -> int:
        return t._sec * 1_000_000_000 + t._usec * 1_000


def _patch_time_keep_ticking(t: Time) -> None:
    global time_ns

    _patched_at = time_ns()
    _time_ns = time_ns

    def time_ns() -> int:
        return (
            t._sec * 1_000_000_000
            + t._usec * 1_000
            + _time_ns()
            - _patched_at
        )


def _unpatch_time() -> None:
    global time_ns

    from time import time_ns
