"""
Exchange registry.

An Exchange couples a code with a timezone, an optional currency and a
TradingCalendar, and answers questions such as "is this instant within
trading hours". Exchanges are registered once and looked up by code; a
lookup of an unknown code returns the shared ``Exchange.DEFAULT`` instance.

"""

import logging
import threading
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Union

import pandas as pd
import pytz

from .constants import DEFAULT_EXCHANGE_ZONE, EXCHANGE_CURRENCIES, EXCHANGE_SPECS
from .currency import Currency, to_currency
from .errors import InvalidArgumentError, NoTradingError
from .timeframe import Timeframe, to_utc
from .trading_calendar import SimpleTradingCalendar, TradingCalendar

logger = logging.getLogger(__name__)

_registry_lock = threading.Lock()
_registry: Dict[str, "Exchange"] = {}


class Exchange:
    """
    A trading venue with its own timezone and trading calendar.

    Attributes
    ----------
    code : str
        Exchange code, e.g. "NYSE". The default exchange has code ""
    zone : pytz timezone
        Local timezone of the exchange
    currency : Currency or None
        Currency in which the exchange trades, when known
    calendar : TradingCalendar
        Decides trading days and local trading hours

    Examples
    --------
    >>> us = Exchange.get_instance("US")
    >>> us.is_trading("2022-01-03T20:00:00Z")
    True
    >>> us.is_trading("2022-01-03T08:00:00Z")
    False
    """

    DEFAULT: "Exchange"

    def __init__(
        self,
        code: str,
        zone,
        calendar: TradingCalendar,
        currency: Optional[Currency] = None,
    ):
        self.code = code
        self.zone = pytz.timezone(zone) if isinstance(zone, str) else zone
        self.calendar = calendar
        self.currency = currency

    # ========================================================================
    # Registry
    # ========================================================================

    @classmethod
    def get_instance(cls, code: str) -> "Exchange":
        """Registered exchange for ``code``, or ``Exchange.DEFAULT`` when unknown."""
        exchange = _registry.get(code)
        if exchange is None:
            logger.debug(f"Unknown exchange code {code!r}, using default exchange")
            return cls.DEFAULT
        return exchange

    @classmethod
    def add_instance(
        cls,
        code: str,
        zone: str,
        opening: str = "09:30",
        closing: str = "16:00",
        currency: Optional[Union[Currency, str]] = None,
        calendar: Optional[TradingCalendar] = None,
    ) -> "Exchange":
        """
        Register (or replace) an exchange.

        Registering the empty code replaces ``Exchange.DEFAULT``.

        Parameters
        ----------
        code : str
            Exchange code
        zone : str
            IANA timezone name, e.g. "Europe/London"
        opening, closing : str
            Local trading hours, used when no ``calendar`` is given
        currency : Currency or str, optional
            Trading currency
        calendar : TradingCalendar, optional
            Calendar to use instead of a SimpleTradingCalendar
        """
        if zone not in pytz.all_timezones_set:
            raise InvalidArgumentError(f"Unknown timezone: {zone}")
        if calendar is None:
            calendar = SimpleTradingCalendar(opening, closing)
        if currency is not None:
            currency = to_currency(currency)
        exchange = cls(code, zone, calendar, currency)
        with _registry_lock:
            _registry[code] = exchange
            if code == "":
                cls.DEFAULT = exchange
        logger.debug(f"Registered exchange {code!r} ({zone})")
        return exchange

    @classmethod
    def exchanges(cls) -> List["Exchange"]:
        with _registry_lock:
            return list(_registry.values())

    def __reduce__(self):
        return (Exchange.get_instance, (self.code,))

    # ========================================================================
    # Local time
    # ========================================================================

    def get_local_date(self, time) -> date:
        """Calendar date of ``time`` at the exchange."""
        return to_utc(time).tz_convert(self.zone).date()

    def same_day(self, first, second) -> bool:
        """True when both instants fall on the same local date."""
        return self.get_local_date(first) == self.get_local_date(second)

    def get_instant(self, local_datetime: Union[datetime, str]) -> pd.Timestamp:
        """Convert a local (naive) date-time at the exchange into a UTC instant."""
        local = pd.Timestamp(local_datetime)
        if local.tzinfo is not None:
            raise InvalidArgumentError(f"expected a local date-time without timezone, got {local_datetime}")
        return to_utc(self.zone.localize(local.to_pydatetime()))

    # ========================================================================
    # Trading hours
    # ========================================================================

    def get_opening_time(self, day: date) -> pd.Timestamp:
        """
        Opening instant of ``day``.

        Raises
        ------
        NoTradingError
            When ``day`` is not a trading day
        """
        opening = self.calendar.get_opening_time(day)
        if opening is None:
            raise NoTradingError(day)
        return to_utc(self.zone.localize(datetime.combine(day, opening)))

    def get_closing_time(self, day: date) -> pd.Timestamp:
        """
        Closing instant of ``day``.

        A local closing time of midnight closes at the start of the next day.

        Raises
        ------
        NoTradingError
            When ``day`` is not a trading day
        """
        closing = self.calendar.get_closing_time(day)
        if closing is None:
            raise NoTradingError(day)
        if closing == datetime.min.time():
            return to_utc(self.zone.localize(datetime.combine(day + timedelta(days=1), closing)))
        return to_utc(self.zone.localize(datetime.combine(day, closing)))

    def get_trading_hours(self, day: date) -> Timeframe:
        """Trading hours of ``day``, closing time excluded."""
        return Timeframe(self.get_opening_time(day), self.get_closing_time(day))

    def is_trading(self, time) -> bool:
        """True when ``time`` is within the trading hours of its local date."""
        time = to_utc(time)
        day = self.get_local_date(time)
        return self.calendar.is_trading_day(day) and self.get_trading_hours(day).contains(time)

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Exchange('{self.code}', {self.zone})"


Exchange.add_instance("", DEFAULT_EXCHANGE_ZONE, currency=Currency.USD)

for _code, (_zone, _opening, _closing) in EXCHANGE_SPECS.items():
    Exchange.add_instance(_code, _zone, _opening, _closing, currency=EXCHANGE_CURRENCIES.get(_code))

# Generic 24x7 crypto exchange
Exchange.add_instance(
    "CRYPTO",
    DEFAULT_EXCHANGE_ZONE,
    calendar=SimpleTradingCalendar("00:00", "24:00", weekend=()),
)
del _code, _zone, _opening, _closing
