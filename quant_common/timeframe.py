"""
Time intervals with explicit end semantics.

A Timeframe is bounded by two UTC instants and is valid only inside the
legal range [MIN_TIME, MAX_TIME]. The end is exclusive unless ``inclusive``
is set. Shifting or extending a timeframe clamps its bounds into the legal
range, so operations never produce an invalid timeframe.

Time spans are either exact (``pd.Timedelta``/``datetime.timedelta``) or
calendar based (``pd.DateOffset``); the helpers at the bottom of this module
create the common ones.

Examples
--------
>>> tf = Timeframe.parse("2020-01-01", "2020-08-01")
>>> len(tf.split(months(3)))
3
>>> str(Timeframe.parse("2019", "2020"))
'[2019-01-01T00:00:00Z - 2020-01-01T00:00:00Z>'
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import ClassVar, List, Optional, Tuple, Union

import numpy as np
import pandas as pd
import pytz

from .constants import MAX_TIME, MIN_TIME, ONE_YEAR
from .errors import InvalidArgumentError, InvalidIntervalError

TimeSpan = Union[pd.Timedelta, timedelta, pd.DateOffset]

_OUT_OF_BOUNDS = (OverflowError, pd.errors.OutOfBoundsDatetime, pd.errors.OutOfBoundsTimedelta)


def to_utc(value) -> pd.Timestamp:
    """
    Coerce a timestamp-like value to a timezone-aware UTC Timestamp.

    Naive values are interpreted as UTC.
    """
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        raise InvalidArgumentError(f"invalid time: {value!r}")
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def _span_sign(span: TimeSpan) -> int:
    if isinstance(span, pd.DateOffset):
        value = sum(v for v in span.kwds.values() if isinstance(v, (int, float))) * span.n
    else:
        value = pd.Timedelta(span).value
    return (value > 0) - (value < 0)


def _shift(time: pd.Timestamp, span: TimeSpan, forward: bool) -> pd.Timestamp:
    """Move ``time`` by ``span`` and clamp the result into the legal range."""
    try:
        result = time + span if forward else time - span
    except _OUT_OF_BOUNDS:
        moves_forward = (_span_sign(span) >= 0) == forward
        return MAX_TIME if moves_forward else MIN_TIME
    if result < MIN_TIME:
        return MIN_TIME
    if result > MAX_TIME:
        return MAX_TIME
    return result


def _parse_instant(text: str) -> pd.Timestamp:
    text = text.strip()
    if len(text) == 4:
        text = f"{text}-01-01T00:00:00"
    elif len(text) == 7:
        text = f"{text}-01T00:00:00"
    elif len(text) == 10:
        text = f"{text}T00:00:00"
    return to_utc(text)


def _format_instant(time: pd.Timestamp, fmt: Optional[str] = None) -> str:
    if time == MIN_TIME:
        return "MIN"
    if time == MAX_TIME:
        return "MAX"
    if fmt is None:
        text = time.strftime("%Y-%m-%dT%H:%M:%S")
        if time.microsecond or time.nanosecond:
            text += f".{time.microsecond:06d}{time.nanosecond:03d}".rstrip("0")
        return text + "Z"
    if fmt.endswith("%f"):
        return time.strftime(fmt)[:-3]
    return time.strftime(fmt)


@dataclass(frozen=True)
class Timeframe:
    """
    Interval between two instants.

    Attributes
    ----------
    start : pd.Timestamp
        Start of the timeframe, always included
    end : pd.Timestamp
        End of the timeframe
    inclusive : bool
        Whether ``end`` itself belongs to the timeframe

    Raises
    ------
    InvalidIntervalError
        When ``end < start`` or a bound lies outside [MIN_TIME, MAX_TIME]
    """

    start: pd.Timestamp
    end: pd.Timestamp
    inclusive: bool = False

    INFINITE: ClassVar["Timeframe"]
    EMPTY: ClassVar["Timeframe"]

    BLACK_MONDAY_1987: ClassVar["Timeframe"]
    FINANCIAL_CRISIS_2008: ClassVar["Timeframe"]
    TEN_YEAR_BULL_MARKET_2009: ClassVar["Timeframe"]
    FLASH_CRASH_2010: ClassVar["Timeframe"]
    CORONA_CRASH_2020: ClassVar["Timeframe"]

    def __post_init__(self):
        start = to_utc(self.start)
        end = to_utc(self.end)
        if end < start:
            raise InvalidIntervalError(f"end time has to be larger or equal than start time, found {start} - {end}")
        if start < MIN_TIME:
            raise InvalidIntervalError(f"start time has to be larger or equal than {MIN_TIME}, found {start}")
        if end > MAX_TIME:
            raise InvalidIntervalError(f"end time has to be smaller or equal than {MAX_TIME}, found {end}")
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)
        object.__setattr__(self, "inclusive", bool(self.inclusive))

    # ========================================================================
    # Factories
    # ========================================================================

    @classmethod
    def parse(cls, first: str, last: str, inclusive: bool = False) -> "Timeframe":
        """
        Create a timeframe from two strings.

        Accepted forms are a year ("2019"), a month ("2019-03"), a day
        ("2019-03-01") or a full time ("2019-03-01T09:30:00", optionally
        with an offset). Times without an offset are UTC.
        """
        return cls(_parse_instant(first), _parse_instant(last), inclusive)

    @classmethod
    def from_years(cls, first: int, last: int, zone=None) -> "Timeframe":
        """
        Timeframe from January 1st of ``first`` until (excluding) January 1st
        of ``last``, in ``zone`` (default UTC).
        """
        if zone is None:
            zone = pytz.utc
        elif isinstance(zone, str):
            zone = pytz.timezone(zone)
        start = zone.localize(datetime(first, 1, 1))
        end = zone.localize(datetime(last, 1, 1))
        return cls(start, end)

    @classmethod
    def past(cls, span: TimeSpan) -> "Timeframe":
        """Timeframe that ends now and covers ``span``."""
        end = pd.Timestamp.now(tz="UTC")
        return cls(_shift(end, span, forward=False), end)

    @classmethod
    def next(cls, span: TimeSpan) -> "Timeframe":
        """Timeframe that starts now and covers ``span``."""
        start = pd.Timestamp.now(tz="UTC")
        return cls(start, _shift(start, span, forward=True))

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def duration(self) -> pd.Timedelta:
        return self.end - self.start

    def is_empty(self) -> bool:
        return self.start == self.end and not self.inclusive

    def is_infinite(self) -> bool:
        return self == Timeframe.INFINITE

    def to_inclusive(self) -> "Timeframe":
        return replace(self, inclusive=True)

    def _before_end(self, time: pd.Timestamp) -> bool:
        return time < self.end or (self.inclusive and time == self.end)

    def contains(self, time) -> bool:
        """True when ``time`` lies within the timeframe."""
        if self.is_infinite():
            return True
        time = to_utc(time)
        return time >= self.start and self._before_end(time)

    __contains__ = contains

    def is_single_day(self, zone=None) -> bool:
        """True when start and end fall on the same local date in ``zone``."""
        if self.start == MIN_TIME or self.end == MAX_TIME:
            return False
        if zone is None:
            from .config import Config

            zone = Config.default_zone
        real_end = self.end if self.inclusive else self.end - pd.Timedelta(1, unit="ns")
        return self.start.tz_convert(zone).date() == real_end.tz_convert(zone).date()

    # ========================================================================
    # Set operations
    # ========================================================================

    def intersect(self, other: "Timeframe") -> "Timeframe":
        """
        Overlapping part of two timeframes.

        Returns EMPTY when the timeframes do not overlap.
        """
        start = max(self.start, other.start)
        if self.end < other.end:
            end, inclusive = self.end, self.inclusive
        elif other.end < self.end:
            end, inclusive = other.end, other.inclusive
        else:
            end, inclusive = self.end, self.inclusive and other.inclusive
        if start > end or (start == end and not inclusive):
            return Timeframe.EMPTY
        return Timeframe(start, end, inclusive)

    def union(self, other: "Timeframe") -> "Timeframe":
        """Smallest timeframe that covers both timeframes."""
        start = min(self.start, other.start)
        if self.end > other.end:
            end, inclusive = self.end, self.inclusive
        elif other.end > self.end:
            end, inclusive = other.end, other.inclusive
        else:
            end, inclusive = self.end, self.inclusive or other.inclusive
        return Timeframe(start, end, inclusive)

    def overlap(self, other: "Timeframe") -> bool:
        return not self.intersect(other).is_empty()

    # ========================================================================
    # Shifting
    # ========================================================================

    def extend(self, before: TimeSpan, after: Optional[TimeSpan] = None) -> "Timeframe":
        """Move the start back by ``before`` and the end forward by ``after``."""
        if after is None:
            after = before
        return Timeframe(
            _shift(self.start, before, forward=False),
            _shift(self.end, after, forward=True),
            self.inclusive,
        )

    def __add__(self, span):
        if not isinstance(span, (timedelta, pd.DateOffset)):
            return NotImplemented
        return Timeframe(_shift(self.start, span, True), _shift(self.end, span, True), self.inclusive)

    def __sub__(self, span):
        if not isinstance(span, (timedelta, pd.DateOffset)):
            return NotImplemented
        return Timeframe(_shift(self.start, span, False), _shift(self.end, span, False), self.inclusive)

    # ========================================================================
    # Splitting
    # ========================================================================

    def split(
        self,
        period: TimeSpan,
        overlap: TimeSpan = pd.Timedelta(0),
        include_remaining: bool = True,
    ) -> List["Timeframe"]:
        """
        Split into consecutive timeframes of ``period``.

        Parameters
        ----------
        period : time span
            Length of each part
        overlap : time span, default 0
            How much each part overlaps the previous one
        include_remaining : bool, default True
            Whether to keep a last part that is shorter than ``period``

        Returns
        -------
        list of Timeframe
            The last part ends at ``end`` and keeps this timeframe's
            ``inclusive`` flag.
        """
        result = []
        last = self.start
        while True:
            nxt = _shift(last, period, forward=True)
            if nxt >= self.end:
                if nxt == self.end or include_remaining:
                    result.append(Timeframe(last, self.end, self.inclusive))
                return result
            result.append(Timeframe(last, nxt))
            following = _shift(nxt, overlap, forward=False)
            if following <= last:
                raise InvalidArgumentError(f"period {period} with overlap {overlap} does not advance")
            last = following

    def split_train_test(self, test_size: Union[float, TimeSpan]) -> Tuple["Timeframe", "Timeframe"]:
        """
        Split into a train and a test timeframe.

        ``test_size`` is either the fraction of the duration used for testing
        (between 0.0 and 1.0) or the length of the test timeframe.
        """
        if isinstance(test_size, (timedelta, pd.DateOffset)):
            border = _shift(self.end, test_size, forward=False)
            if border <= self.start:
                raise InvalidArgumentError(f"test size {test_size} should be smaller than {self}")
        else:
            if not 0.0 <= test_size <= 1.0:
                raise InvalidArgumentError(f"test size has to be between 0.0 and 1.0, got {test_size}")
            train_ms = int(self.duration / pd.Timedelta(milliseconds=1) * (1.0 - test_size))
            border = self.start + pd.Timedelta(milliseconds=train_ms)
        return Timeframe(self.start, border), Timeframe(border, self.end, self.inclusive)

    def sample(
        self,
        period: TimeSpan,
        samples: int = 1,
        resolution: TimeSpan = pd.Timedelta(days=1),
        rng: Optional[np.random.Generator] = None,
    ) -> List["Timeframe"]:
        """
        Draw distinct random timeframes of ``period`` that fit in this one.

        Start times are aligned to ``resolution`` from ``start``. Uses the
        shared ``Config.random`` generator unless ``rng`` is given.
        """
        latest = _shift(self.end, period, forward=False)
        if latest <= self.start:
            raise InvalidArgumentError(f"{period} too large for {self}")
        resolution = pd.Timedelta(resolution)
        choices = (latest - self.start) // resolution
        if samples > choices:
            raise InvalidArgumentError(
                f"cannot draw {samples} distinct samples, only {choices} possible at resolution {resolution}"
            )
        if rng is None:
            from .config import Config

            rng = Config.random
        offsets = rng.choice(choices, size=samples, replace=False)
        result = []
        for offset in offsets:
            start = self.start + resolution * int(offset)
            result.append(Timeframe(start, start + period))
        return result

    def to_timeline(self, step: TimeSpan) -> List[pd.Timestamp]:
        """All instants from ``start`` spaced by ``step`` that lie within the timeframe."""
        timeline = []
        time = self.start
        while self.contains(time):
            timeline.append(time)
            nxt = _shift(time, step, forward=True)
            if nxt <= time:
                if nxt == MAX_TIME and time == MAX_TIME:
                    break
                raise InvalidArgumentError(f"step {step} does not advance")
            time = nxt
        return timeline

    def annualize(self, rate: float) -> float:
        """
        Convert a return over this timeframe into a yearly return.

        Losses beyond -100% have no real-valued yearly equivalent and
        yield NaN.

        Examples
        --------
        >>> round(Timeframe.parse("2019", "2020").annualize(0.1), 4)
        0.1
        """
        if self.duration <= pd.Timedelta(0):
            raise InvalidArgumentError("cannot annualize over a zero-length timeframe")
        growth = 1.0 + rate
        if growth < 0.0:
            return np.nan
        years = ONE_YEAR / self.duration
        return growth ** years - 1.0

    # ========================================================================
    # Display
    # ========================================================================

    def __str__(self) -> str:
        marker = "]" if self.inclusive else ">"
        return f"[{_format_instant(self.start)} - {_format_instant(self.end)}{marker}"

    def to_pretty_string(self) -> str:
        """Human-readable form whose precision depends on the duration."""
        seconds = self.duration.total_seconds()
        if seconds < 1:
            fmt = "%Y-%m-%d %H:%M:%S.%f"
        elif seconds < 60:
            fmt = "%Y-%m-%d %H:%M:%S"
        elif seconds < 3600 * 24:
            fmt = "%Y-%m-%d %H:%M"
        else:
            fmt = "%Y-%m-%d"
        return f"{_format_instant(self.start, fmt)} - {_format_instant(self.end, fmt)}"


Timeframe.INFINITE = Timeframe(MIN_TIME, MAX_TIME, True)
Timeframe.EMPTY = Timeframe(MIN_TIME, MIN_TIME)

# Timeframes of significant events in the history of trading
Timeframe.BLACK_MONDAY_1987 = Timeframe.parse("1987-10-19T14:30:00Z", "1987-10-19T21:00:00Z")
Timeframe.FINANCIAL_CRISIS_2008 = Timeframe.parse("2008-09-08T00:00:00Z", "2009-03-10T00:00:00Z")
Timeframe.TEN_YEAR_BULL_MARKET_2009 = Timeframe.parse("2009-03-10T00:00:00Z", "2019-03-10T00:00:00Z")
Timeframe.FLASH_CRASH_2010 = Timeframe.parse("2010-05-06T19:30:00Z", "2010-05-06T20:15:00Z")
Timeframe.CORONA_CRASH_2020 = Timeframe.parse("2020-02-17T00:00:00Z", "2020-03-17T00:00:00Z")


# ============================================================================
# Time spans
# ============================================================================

def years(n: int) -> pd.DateOffset:
    return pd.DateOffset(years=n)


def months(n: int) -> pd.DateOffset:
    return pd.DateOffset(months=n)


def weeks(n: int) -> pd.DateOffset:
    return pd.DateOffset(weeks=n)


def days(n: int) -> pd.DateOffset:
    return pd.DateOffset(days=n)


def hours(n: float) -> pd.Timedelta:
    return pd.Timedelta(hours=n)


def minutes(n: float) -> pd.Timedelta:
    return pd.Timedelta(minutes=n)


def seconds(n: float) -> pd.Timedelta:
    return pd.Timedelta(seconds=n)


def millis(n: float) -> pd.Timedelta:
    return pd.Timedelta(milliseconds=n)
