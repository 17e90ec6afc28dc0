"""The method table through which a host scripting environment reaches
:class:`~caltime.Time`.

The host hands over already-unwrapped values. This module checks that the
receiver really is a ``Time``, marshals numeric arguments the way the host's
``"f"`` format does, enforces arity, and maps each host method name onto the
Python API.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, NamedTuple

from ._pycaltime import ArgumentError, OutOfRangeError, Time

__all__ = [
    "CLASS_METHODS",
    "METHODS",
    "NoMethodError",
    "call",
    "send",
]

_log = logging.getLogger(__name__)

CLASS_NAME = "Time"


class NoMethodError(AttributeError):
    """The host asked for a method that isn't registered"""


class Method(NamedTuple):
    func: Callable[..., Any]
    required: int = 0
    optional: int = 0


def _to_float(value: object) -> float:
    # bool is an int subclass, but the host doesn't treat it as a number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"can't convert {type(value).__name__} into Float")
    try:
        return float(value)
    except OverflowError:
        raise OutOfRangeError("integer out of Float range") from None


def _new(micros: object) -> Time:
    return Time(_to_float(micros))


def _at(value: object = None) -> Time:
    if value is None or value is False or isinstance(value, Time):
        return Time.at(value)
    return Time.at(_to_float(value))


def _gm(*fields: object) -> Time:
    return Time.gm(*map(_to_float, fields))


def _initialize(self: Time, micros: object) -> Time:
    Time.__init__(self, _to_float(micros))
    return self


def _eq(self: Time, other: object) -> bool:
    return isinstance(other, Time) and self == other


def _add(self: Time, seconds: object) -> Time:
    return self + _to_float(seconds)


def _sub(self: Time, seconds: object) -> Time:
    return self - _to_float(seconds)


CLASS_METHODS: dict[str, Method] = {
    "new": Method(_new, 1),
    "now": Method(Time.now),
    "at": Method(_at, 0, 1),
    "gm": Method(_gm, 1, 6),
}

METHODS: dict[str, Method] = {
    "==": Method(_eq, 1),
    "<=>": Method(Time.compare, 1),
    "+": Method(_add, 1),
    "-": Method(_sub, 1),
    "to_s": Method(Time.asctime),
    "asctime": Method(Time.asctime),
    "ctime": Method(Time.asctime),
    # the host registers 'day' as an alias of 'dst?'
    "day": Method(Time.is_dst),
    "dst?": Method(Time.is_dst),
    "gmt?": Method(Time.is_utc),
    "gmtime": Method(Time.to_utc),
    "hour": Method(lambda t: t.hour),
    "localtime": Method(Time.to_local),
    "mday": Method(lambda t: t.mday),
    "min": Method(lambda t: t.minute),
    "mon": Method(lambda t: t.month),
    "month": Method(lambda t: t.month),
    "sec": Method(lambda t: t.second),
    "to_i": Method(Time.timestamp),
    "to_f": Method(Time.timestamp_float),
    "usec": Method(lambda t: t.usec),
    "utc": Method(Time.to_utc),
    "utc?": Method(Time.is_utc),
    "wday": Method(lambda t: t.wday),
    "yday": Method(lambda t: t.yday),
    "year": Method(lambda t: t.year),
    "zone": Method(lambda t: t.zone),
    "initialize": Method(_initialize, 1),
    "initialize_copy": Method(Time.copy_from, 1),
}


def _lookup(table: dict[str, Method], name: str, sep: str) -> Method:
    try:
        return table[name]
    except KeyError:
        _log.debug("no method %s%s%s", CLASS_NAME, sep, name)
        raise NoMethodError(
            f"undefined method '{name}' for {CLASS_NAME}"
        ) from None


def _check_arity(name: str, m: Method, argc: int) -> None:
    if m.required <= argc <= m.required + m.optional:
        return
    if m.optional:
        expected = f"{m.required}..{m.required + m.optional}"
    else:
        expected = str(m.required)
    _log.debug("wrong arity for %s: %d for %s", name, argc, expected)
    raise ArgumentError(
        f"wrong number of arguments ({argc} for {expected})"
    )


def call(name: str, *args: object) -> Time:
    """Invoke a class method, e.g. ``call("gm", 2000, 1, 1)``"""
    m = _lookup(CLASS_METHODS, name, ".")
    _check_arity(name, m, len(args))
    _log.debug("dispatch %s.%s", CLASS_NAME, name)
    return m.func(*args)  # type: ignore[no-any-return]


def send(receiver: object, name: str, *args: object) -> Any:
    """Invoke an instance method on ``receiver``, e.g. ``send(t, "utc?")``"""
    m = _lookup(METHODS, name, "#")
    if not isinstance(receiver, Time):
        _log.debug("rejected receiver %r for %s", receiver, name)
        raise TypeError(
            f"wrong argument type {type(receiver).__name__} "
            f"(expected {CLASS_NAME})"
        )
    _check_arity(name, m, len(args))
    _log.debug("dispatch %s#%s", CLASS_NAME, name)
    return m.func(receiver, *args)
