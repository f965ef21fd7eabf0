"""
Trades and trade collection helpers.

A Trade is the immutable record of an executed order, created by the
execution logic and never changed afterwards.

"""

from dataclasses import dataclass
from typing import Iterable, List

import pandas as pd

from .amount import Amount
from .asset import Asset
from .size import Size
from .timeframe import Timeframe, to_utc
from .wallet import Wallet


@dataclass(frozen=True)
class Trade:
    """
    Executed trade.

    Attributes
    ----------
    asset : Asset
        What was traded
    time : pd.Timestamp
        Execution time
    size : Size
        Signed executed size
    price : float
        Execution price
    pnl_value : float
        Realized profit or loss, in the asset currency
    fee_value : float
        Fees paid, in the asset currency
    order_id : str
        Id of the order that was executed
    """

    asset: Asset
    time: pd.Timestamp
    size: Size
    price: float
    pnl_value: float
    fee_value: float = 0.0
    order_id: str = ""

    def __post_init__(self):
        object.__setattr__(self, "time", to_utc(self.time))
        if not isinstance(self.size, Size):
            object.__setattr__(self, "size", Size(self.size))

    @property
    def total_cost(self) -> Amount:
        """Value of the trade plus fees."""
        return self.asset.value(self.size, self.price) + self.fee_value

    @property
    def fee(self) -> Amount:
        return Amount(self.asset.currency, self.fee_value)

    @property
    def pnl(self) -> Amount:
        return Amount(self.asset.currency, self.pnl_value)

    @property
    def pnl_percentage(self) -> float:
        """Realized P&L relative to the absolute total cost, 0.0 when there is no cost."""
        cost = abs(self.total_cost.value)
        if cost == 0:
            return 0.0
        return self.pnl_value / cost


def realized_pnl(trades: Iterable[Trade]) -> Wallet:
    return Wallet.from_amounts(trade.pnl for trade in trades)


def total_fee(trades: Iterable[Trade]) -> Wallet:
    return Wallet.from_amounts(trade.fee for trade in trades)


def timeline(trades: Iterable[Trade]) -> List[pd.Timestamp]:
    """Distinct trade times in ascending order."""
    return sorted({trade.time for trade in trades})


def trades_timeframe(trades: Iterable[Trade]) -> Timeframe:
    """Timeframe from the first to (including) the last trade, EMPTY without trades."""
    times = timeline(trades)
    if not times:
        return Timeframe.EMPTY
    return Timeframe(times[0], times[-1], inclusive=True)
