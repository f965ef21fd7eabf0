"""
Positions and portfolio valuation helpers.

A Position holds raw facts only (size and prices). The helpers below
compute derived values over a mapping of asset to position, returning a
Wallet because a portfolio can hold assets in several currencies.

"""

from dataclasses import dataclass, replace
from typing import Dict, Mapping, Optional

import pandas as pd

from .asset import Asset
from .constants import MIN_TIME
from .interfaces import PriceSource
from .size import Size
from .timeframe import to_utc
from .wallet import Wallet


@dataclass(frozen=True)
class Position:
    """
    Holding of a single asset.

    Attributes
    ----------
    size : Size
        Signed size, positive for long and negative for short
    avg_price : float
        Average entry price
    mkt_price : float
        Latest known market price (defaults to ``avg_price``)
    last_update : pd.Timestamp
        Time of the latest market price

    Examples
    --------
    >>> p = Position(Size(10), avg_price=100.0)
    >>> p.long, p.mkt_price
    (True, 100.0)
    """

    size: Size
    avg_price: float = 0.0
    mkt_price: Optional[float] = None
    last_update: pd.Timestamp = MIN_TIME

    def __post_init__(self):
        if not isinstance(self.size, Size):
            object.__setattr__(self, "size", Size(self.size))
        if self.mkt_price is None:
            object.__setattr__(self, "mkt_price", self.avg_price)
        object.__setattr__(self, "last_update", to_utc(self.last_update))

    @classmethod
    def empty(cls) -> "Position":
        return cls(Size.ZERO, 0.0, 0.0)

    @property
    def closed(self) -> bool:
        return self.size.is_zero

    @property
    def open(self) -> bool:
        return self.size.nonzero

    @property
    def long(self) -> bool:
        return self.size.is_positive

    @property
    def short(self) -> bool:
        return self.size.is_negative

    def with_market_price(self, price: float, time) -> "Position":
        """Copy of this position marked at ``price``."""
        return replace(self, mkt_price=price, last_update=to_utc(time))


# =============================================================================
# Portfolio helpers
# =============================================================================

def market_value(positions: Mapping[Asset, Position]) -> Wallet:
    """Total market value of all positions."""
    result = Wallet()
    for asset, position in positions.items():
        result.deposit(asset.value(position.size, position.mkt_price))
    return result


def unrealized_pnl(positions: Mapping[Asset, Position]) -> Wallet:
    """Profit or loss of all positions versus their average price."""
    result = Wallet()
    for asset, position in positions.items():
        result.deposit(asset.value(position.size, position.mkt_price - position.avg_price))
    return result


def exposure(positions: Mapping[Asset, Position]) -> Wallet:
    """Gross exposure: market value with short positions counted as positive."""
    result = Wallet()
    for asset, position in positions.items():
        result.deposit(asset.value(abs(position.size), position.mkt_price))
    return result


def long_positions(positions: Mapping[Asset, Position]) -> Dict[Asset, Position]:
    return {asset: p for asset, p in positions.items() if p.long}


def short_positions(positions: Mapping[Asset, Position]) -> Dict[Asset, Position]:
    return {asset: p for asset, p in positions.items() if p.short}


def mark_to_market(
    positions: Mapping[Asset, Position],
    price_source: PriceSource,
    time,
) -> Dict[Asset, Position]:
    """
    Update the market price of every position.

    Parameters
    ----------
    positions : mapping of Asset to Position
        Current positions
    price_source : PriceSource
        Provides the price of each asset at ``time``
    time : timestamp-like
        Valuation time

    Returns
    -------
    dict
        New positions; the input mapping is left untouched
    """
    time = to_utc(time)
    return {
        asset: position.with_market_price(price_source.get_price(asset, time), time)
        for asset, position in positions.items()
    }
