"""
Interfaces to external collaborators.

Minimal protocols the value types depend on. Feeds, brokers and
simulators implement these with their own concrete types.

"""

from typing import Protocol, runtime_checkable

import pandas as pd

from .asset import Asset


@runtime_checkable
class PriceSource(Protocol):
    """
    For components that can price an asset at a point in time.

    Used by: position.mark_to_market
    """

    def get_price(self, asset: Asset, time: pd.Timestamp) -> float:
        ...
