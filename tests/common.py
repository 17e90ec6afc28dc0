import os
from contextlib import contextmanager
from unittest.mock import patch

from caltime import reset_system_tz

# POSIX TZ strings don't need the zoneinfo database to be installed
AMS_TZ_POSIX = "CET-1CEST,M3.5.0,M10.5.0/3"
NYC_TZ_POSIX = "EST5EDT,M3.2.0,M11.1.0"


class AlwaysEqual:
    def __eq__(self, _):
        return True


class NeverEqual:
    def __eq__(self, _):
        return False


class AlwaysLarger:
    def __lt__(self, _):
        return False

    def __le__(self, _):
        return False

    def __gt__(self, _):
        return True

    def __ge__(self, _):
        return True


class AlwaysSmaller:
    def __lt__(self, _):
        return True

    def __le__(self, _):
        return True

    def __gt__(self, _):
        return False

    def __ge__(self, _):
        return False


@contextmanager
def system_tz(name):
    try:
        with patch.dict(os.environ, {"TZ": name}):
            reset_system_tz()
            yield
    finally:
        reset_system_tz()  # don't forget to reset the timezone after the patch!


def system_tz_ams():
    return system_tz(AMS_TZ_POSIX)


def system_tz_nyc():
    return system_tz(NYC_TZ_POSIX)
