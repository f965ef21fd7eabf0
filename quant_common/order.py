"""
Orders and time-in-force policies.

An Order is created by a strategy without an id; the broker assigns the id
when it accepts the order. Only orders with an id can be cancelled or
modified. A cancellation is itself an order of size zero that carries the
id of the order to cancel.

"""

from dataclasses import dataclass, field
from typing import Optional

import pandas as pd

from .asset import Asset
from .errors import InvalidArgumentError
from .size import Size, SizeLike
from .timeframe import to_utc


# =============================================================================
# Time in force
# =============================================================================

@dataclass(frozen=True)
class TimeInForce:
    """How long an order remains active."""

    def __str__(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class GTC(TimeInForce):
    """Good till cancelled, but at most ``max_days`` days."""
    max_days: int = 90

    def __post_init__(self):
        if self.max_days <= 0:
            raise InvalidArgumentError(f"max_days must be positive, got {self.max_days}")


@dataclass(frozen=True)
class GTD(TimeInForce):
    """Good till the given date."""
    date: pd.Timestamp

    def __post_init__(self):
        object.__setattr__(self, "date", to_utc(self.date))

    def __str__(self) -> str:
        return f"GTD({self.date})"


@dataclass(frozen=True)
class IOC(TimeInForce):
    """Immediate or cancel: fill what is possible, cancel the rest."""
    pass


@dataclass(frozen=True)
class DAY(TimeInForce):
    """Valid until the end of the trading day."""
    pass


@dataclass(frozen=True)
class FOK(TimeInForce):
    """Fill or kill: fill completely and immediately, or cancel."""
    pass


# =============================================================================
# Order
# =============================================================================

@dataclass
class Order:
    """
    Limit order for an asset.

    Attributes
    ----------
    asset : Asset
        What to trade
    size : Size
        Signed size, positive to buy and negative to sell
    limit : float
        Limit price
    tif : TimeInForce
        Time in force (default GTC)
    tag : str
        Free-form label set by the strategy
    id : str
        Broker-assigned id, empty until the order is accepted
    fill : Size
        Size filled so far

    Examples
    --------
    >>> order = Order(Stock("AAPL"), Size(10), 150.0)
    >>> order.id = "42"
    >>> order.cancel().is_cancellation
    True
    """

    asset: Asset
    size: Size
    limit: float
    tif: TimeInForce = field(default_factory=GTC)
    tag: str = ""
    id: str = ""
    fill: Size = Size.ZERO

    def __post_init__(self):
        if not isinstance(self.size, Size):
            self.size = Size(self.size)
        if not isinstance(self.fill, Size):
            self.fill = Size(self.fill)

    @property
    def is_buy(self) -> bool:
        return self.size.is_positive

    @property
    def is_sell(self) -> bool:
        return self.size.is_negative

    @property
    def remaining(self) -> Size:
        """Size still to be filled."""
        return self.size - self.fill

    @property
    def is_cancellation(self) -> bool:
        return self.size.is_zero and self.id != ""

    def _require_id(self, action: str) -> None:
        if not self.id:
            raise InvalidArgumentError(f"cannot {action} an order without an id")

    def cancel(self) -> "Order":
        """Cancellation order for this order."""
        self._require_id("cancel")
        return Order(self.asset, Size.ZERO, self.limit, self.tif, self.tag, id=self.id)

    def modify(self, size: Optional[SizeLike] = None, limit: Optional[float] = None) -> "Order":
        """Replacement order with the same id and an updated size and/or limit."""
        self._require_id("modify")
        return Order(
            self.asset,
            self.size if size is None else Size(size),
            self.limit if limit is None else limit,
            self.tif,
            self.tag,
            id=self.id,
        )

    def __str__(self) -> str:
        return f"id={self.id} asset={self.asset.symbol} size={self.size} limit={self.limit} tif={self.tif} tag={self.tag}"
