from __future__ import annotations

import time as _time
from contextlib import contextmanager as _contextmanager
from dataclasses import dataclass as _dataclass
from typing import Iterator as _Iterator

from . import binding
from ._pycaltime import *
from ._pycaltime import (  # for the docs
    __all__,
    __version__,
    _patch_time_frozen,
    _patch_time_keep_ticking,
    _unpatch_time,
    _unpkl_time,
)

__all__ = [*__all__, "binding", "patch_current_time", "reset_system_tz"]


@_dataclass
class _TimePatch:
    _pin: Time
    _keep_ticking: bool

    def shift(self, seconds: float) -> None:
        if self._keep_ticking:
            self._pin = new = Time.now() + seconds
            _patch_time_keep_ticking(new)
        else:
            self._pin = new = self._pin + seconds
            _patch_time_frozen(new)


@_contextmanager
def patch_current_time(
    t: Time, /, *, keep_ticking: bool
) -> _Iterator[_TimePatch]:
    """Patch the current time to a fixed value (for testing purposes).
    Behaves as a context manager or decorator, with similar semantics to
    ``unittest.mock.patch``.

    Important
    ---------

    * This function should be used only for testing purposes. It is not
      thread-safe or part of the stable API.
    * This function only affects :meth:`Time.now`. It does not
      affect the standard library's time functions or any other libraries.
      Use the ``time_machine`` package if you also want to patch other libraries.
    * It doesn't affect the system timezone. Use :func:`reset_system_tz`
      together with the ``TZ`` environment variable for that.

    Example
    -------

    >>> from caltime import Time, patch_current_time
    >>> t = Time.gm(1980, 3, 2, 2)
    >>> with patch_current_time(t, keep_ticking=False) as p:
    ...     assert Time.now() == t
    ...     p.shift(4 * 3600)
    ...     assert Time.now() == t + 4 * 3600
    ...
    >>> assert Time.now() != t
    """
    if keep_ticking:
        _patch_time_keep_ticking(t)
    else:
        _patch_time_frozen(t)

    try:
        yield _TimePatch(t, keep_ticking)
    finally:
        _unpatch_time()


def reset_system_tz() -> None:
    """Re-read the system timezone (i.e. the ``TZ`` environment variable)
    used for the local timezone mode.

    Existing :class:`Time` values keep their calendar fields until their
    mode is switched again. Only has an effect on Unix-like systems.
    """
    if hasattr(_time, "tzset"):
        _time.tzset()
