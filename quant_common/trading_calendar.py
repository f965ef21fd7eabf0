"""
Trading calendars.

A TradingCalendar answers two questions for a local calendar date: is it a
trading day, and what are the local opening and closing times. Exchanges
combine a calendar with a timezone to turn these into UTC instants.

- SimpleTradingCalendar: fixed hours, a fixed weekend and no holidays
- MarketTradingCalendar: exchange holidays and early closes from
  pandas_market_calendars (e.g., 'NYSE', 'LSE', 'CME_Energy')

"""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import date, time
from typing import Dict, Iterable, Optional, Tuple, Union

import pandas_market_calendars as mcal

from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

SATURDAY = 5
SUNDAY = 6


def to_local_time(value: Union[str, time]) -> time:
    """
    Parse "HH:MM", "HH:MM:SS" or "HH:MM:SS.fff" into a time of day.

    "24:00" denotes the end of the day and parses to midnight; as a closing
    time it means the following local midnight.
    """
    if isinstance(value, time):
        return value
    if value.strip() in ("24:00", "24:00:00"):
        return time.min
    try:
        return time.fromisoformat(value)
    except ValueError as exc:
        raise InvalidArgumentError(f"invalid time of day: {value!r}") from exc


class TradingCalendar(ABC):
    """Strategy that decides trading days and local trading hours."""

    @abstractmethod
    def is_trading_day(self, day: date) -> bool:
        pass

    @abstractmethod
    def get_opening_time(self, day: date) -> Optional[time]:
        """Local opening time, or None when ``day`` is not a trading day."""
        pass

    @abstractmethod
    def get_closing_time(self, day: date) -> Optional[time]:
        """Local closing time, or None when ``day`` is not a trading day."""
        pass


class SimpleTradingCalendar(TradingCalendar):
    """
    Calendar with the same hours on every weekday and no holidays.

    Parameters
    ----------
    opening : str or time, default "09:30"
        Local opening time
    closing : str or time, default "16:00"
        Local closing time, must be after ``opening``; "24:00" closes at
        the following local midnight
    weekend : iterable of int, default (SATURDAY, SUNDAY)
        Weekdays (Monday=0) without trading. Pass an empty tuple for
        markets that trade every day.
    """

    def __init__(
        self,
        opening: Union[str, time] = "09:30",
        closing: Union[str, time] = "16:00",
        weekend: Iterable[int] = (SATURDAY, SUNDAY),
    ):
        self.opening = to_local_time(opening)
        self.closing = to_local_time(closing)
        if self.closing != time.min and self.closing <= self.opening:
            raise InvalidArgumentError(f"closing {self.closing} must be after opening {self.opening}")
        self.weekend = frozenset(weekend)

    def is_trading_day(self, day: date) -> bool:
        return day.weekday() not in self.weekend

    def get_opening_time(self, day: date) -> Optional[time]:
        return self.opening if self.is_trading_day(day) else None

    def get_closing_time(self, day: date) -> Optional[time]:
        return self.closing if self.is_trading_day(day) else None

    def __repr__(self) -> str:
        return f"SimpleTradingCalendar({self.opening}-{self.closing}, weekend={sorted(self.weekend)})"


class MarketTradingCalendar(TradingCalendar):
    """
    Holiday and early-close aware calendar backed by pandas_market_calendars.

    Sessions are loaded one calendar year at a time and cached.

    Parameters
    ----------
    name : str
        Calendar name known to pandas_market_calendars, e.g. 'NYSE'

    Examples
    --------
    >>> nyse = MarketTradingCalendar("NYSE")
    >>> nyse.is_trading_day(date(2023, 7, 4))  # Independence Day
    False
    >>> nyse.get_closing_time(date(2023, 11, 24))  # Day after Thanksgiving
    datetime.time(13, 0)
    """

    def __init__(self, name: str):
        self.name = name
        self._calendar = mcal.get_calendar(name)
        self._sessions: Dict[int, Dict[date, Tuple[time, time]]] = {}
        self._lock = threading.Lock()

    @property
    def tz(self):
        """Timezone in which the calendar's local times are expressed."""
        return self._calendar.tz

    def _year_sessions(self, year: int) -> Dict[date, Tuple[time, time]]:
        sessions = self._sessions.get(year)
        if sessions is not None:
            return sessions
        with self._lock:
            sessions = self._sessions.get(year)
            if sessions is None:
                schedule = self._calendar.schedule(
                    start_date=f"{year}-01-01",
                    end_date=f"{year}-12-31",
                )
                sessions = {}
                for day, row in schedule.iterrows():
                    opening = row["market_open"].tz_convert(self.tz).time()
                    closing = row["market_close"].tz_convert(self.tz).time()
                    sessions[day.date()] = (opening, closing)
                self._sessions[year] = sessions
                logger.debug(f"Loaded {len(sessions)} {self.name} sessions for {year}")
            return sessions

    def _session(self, day: date) -> Optional[Tuple[time, time]]:
        return self._year_sessions(day.year).get(day)

    def is_trading_day(self, day: date) -> bool:
        return self._session(day) is not None

    def get_opening_time(self, day: date) -> Optional[time]:
        session = self._session(day)
        return session[0] if session else None

    def get_closing_time(self, day: date) -> Optional[time]:
        session = self._session(day)
        return session[1] if session else None

    def __repr__(self) -> str:
        return f"MarketTradingCalendar('{self.name}')"
