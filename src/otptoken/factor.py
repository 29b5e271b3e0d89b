import datetime
import math
from collections import namedtuple
from typing import Optional, Union

from .errors import InvalidPeriod, InvalidTime

U64_MAX = 2**64 - 1

Instant = Union[datetime.datetime, int, float]


def seconds_since_epoch(at: Instant) -> Union[int, float]:
    """
    Converts an instant to seconds since the Unix epoch.

    Naive datetimes are taken to be in UTC.
    """
    if isinstance(at, datetime.datetime):
        if at.tzinfo is None:
            at = at.replace(tzinfo=datetime.timezone.utc)
        return at.timestamp()
    return at


class _Variant(object):
    # Counter(30) and Timer(30) are different factors even though both are 1-tuples.
    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and tuple.__eq__(self, other)

    def __ne__(self, other: object) -> bool:
        return not self == other

    def __hash__(self) -> int:
        return hash((type(self).__name__, tuple(self)))


class Counter(_Variant, namedtuple("Counter", ["value"])):
    """
    HOTP moving factor: an explicit 8-byte counter, managed by the caller.
    After each use the counter should be incremented to stay in sync with
    the server (see ``Generator.successor``).
    """

    __slots__ = ()

    def __new__(cls, value: int) -> "Counter":
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError("counter must be an integer, got {!r}".format(value))
        if not 0 <= value <= U64_MAX:
            raise ValueError("counter must fit in an unsigned 64-bit integer, got {}".format(value))
        return super().__new__(cls, value)

    def counter_value(self, at: Optional[Instant] = None) -> int:
        return self.value


class Timer(_Variant, namedtuple("Timer", ["period"])):
    """
    TOTP moving factor. The period (seconds, may be fractional) divides the
    time elapsed since the Unix epoch into steps; the step index is the
    counter fed to the HMAC.
    """

    __slots__ = ()

    def counter_value(self, at: Instant) -> int:
        time_since_epoch = seconds_since_epoch(at)
        # "not >=" so that NaN is rejected too
        if not time_since_epoch >= 0:
            raise InvalidTime(time_since_epoch)
        validate_period(self.period)

        if isinstance(time_since_epoch, int) and isinstance(self.period, int):
            steps = time_since_epoch // self.period
        else:
            try:
                steps = time_since_epoch / self.period
            except OverflowError as e:
                raise InvalidTime(time_since_epoch) from e
            if not steps < 2**64:
                raise InvalidTime(time_since_epoch)
            steps = math.floor(steps)
        if steps > U64_MAX:
            raise InvalidTime(time_since_epoch)
        return steps


MovingFactor = Union[Counter, Timer]


def validate_period(period: Union[int, float]) -> None:
    if isinstance(period, bool) or not isinstance(period, (int, float)) or not period > 0:
        raise InvalidPeriod(period)
    if isinstance(period, float) and not math.isfinite(period):
        raise InvalidPeriod(period)


def validate_factor(factor: MovingFactor) -> None:
    if isinstance(factor, Counter):
        return
    if isinstance(factor, Timer):
        validate_period(factor.period)
        return
    raise TypeError("moving factor must be a Counter or a Timer, got {!r}".format(factor))


def counter_value(factor: MovingFactor, at: Instant) -> int:
    """
    Calculates the counter value for the moving factor at the given instant.

    For a ``Counter`` this is the stored value; for a ``Timer`` it is the
    number of whole periods since the Unix epoch.

    :param factor: the moving factor
    :param at: the target time, as a datetime or seconds since the epoch.
        Must not be before the epoch when the factor is a ``Timer``.
    :raises InvalidTime: if ``at`` precedes the epoch
    :raises InvalidPeriod: if the timer period is not positive
    :returns: the HMAC counter for ``at``
    """
    if isinstance(factor, Counter):
        return factor.counter_value(at)
    if isinstance(factor, Timer):
        return factor.counter_value(at)
    raise TypeError("moving factor must be a Counter or a Timer, got {!r}".format(factor))
