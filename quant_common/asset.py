"""
Tradable assets.

Every asset variant is a frozen dataclass carrying exactly the fields it
needs, registered under a type tag. The tag is the first field of the
serialized form, which makes deserialization a registry lookup:

    "<Tag>\\x1f<field>\\x1f<field>..."

Design principles:
- Assets are pure identity, prices and positions live elsewhere
- Serialization round-trips exactly, deserialized assets are cached
- New variants only need the ``register_asset_type`` decorator

"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, ClassVar, Dict, Iterable, List, Sequence, Tuple, Union

from .amount import Amount
from .constants import ASSET_SEP
from .currency import Currency, to_currency, to_currency_pair
from .errors import InvalidArgumentError, UnknownAssetTypeError
from .exchange import Exchange
from .size import Size

logger = logging.getLogger(__name__)

_registry_lock = threading.Lock()
_deserializers: Dict[str, Callable[[Sequence[str]], "Asset"]] = {}
_cache: Dict[str, "Asset"] = {}


def register_asset_type(tag: str):
    """
    Class decorator that registers an asset variant under ``tag``.

    The class must implement ``from_fields``.
    """
    if not tag or ASSET_SEP in tag:
        raise InvalidArgumentError(f"invalid asset type tag: {tag!r}")

    def decorator(cls):
        cls.TYPE_TAG = tag
        with _registry_lock:
            _deserializers[tag] = cls.from_fields
        logger.debug(f"Registered asset type {tag} ({cls.__name__})")
        return cls

    return decorator


class Asset(ABC):
    """
    Base of all asset variants.

    Subclasses are frozen dataclasses with at least ``symbol`` and
    ``currency`` fields. Assets order by symbol.
    """

    TYPE_TAG: ClassVar[str] = ""

    symbol: str
    currency: Currency

    def __post_init__(self):
        if not isinstance(self.symbol, str) or not self.symbol.strip():
            raise InvalidArgumentError(f"asset symbol cannot be blank, got {self.symbol!r}")
        if ASSET_SEP in self.symbol:
            raise InvalidArgumentError(f"asset symbol cannot contain the field separator: {self.symbol!r}")
        object.__setattr__(self, "currency", to_currency(self.currency))

    @property
    def multiplier(self) -> float:
        """Value of one unit of size at a price of 1.0, in the asset currency."""
        return 1.0

    def value(self, size: Size, price: float) -> Amount:
        """
        Value of ``size`` units at ``price``.

        A zero size is worth zero even when the price is unknown (NaN).

        Examples
        --------
        >>> Stock("AAPL").value(Size(10), 150.0)
        Amount(currency=Currency('USD'), value=1500.0)
        """
        if size.is_zero:
            return Amount(self.currency, 0.0)
        return Amount(self.currency, size.to_float() * self.multiplier * price)

    @abstractmethod
    def fields(self) -> Tuple[str, ...]:
        """Serialized fields, without the type tag."""
        pass

    @classmethod
    @abstractmethod
    def from_fields(cls, fields: Sequence[str]) -> "Asset":
        pass

    def serialize(self) -> str:
        return ASSET_SEP.join((self.TYPE_TAG,) + self.fields())

    @staticmethod
    def deserialize(value: str) -> "Asset":
        """
        Recreate an asset from its serialized form.

        Raises
        ------
        UnknownAssetTypeError
            When the type tag is not registered
        """
        asset = _cache.get(value)
        if asset is not None:
            return asset

        tag, _, rest = value.partition(ASSET_SEP)
        deserializer = _deserializers.get(tag)
        if deserializer is None:
            raise UnknownAssetTypeError(f"unknown asset type {tag!r}")
        asset = deserializer(rest.split(ASSET_SEP) if rest else [])
        with _registry_lock:
            asset = _cache.setdefault(value, asset)
        return asset

    def __lt__(self, other: "Asset") -> bool:
        if not isinstance(other, Asset):
            return NotImplemented
        return self.symbol < other.symbol

    def __str__(self) -> str:
        return f"{self.TYPE_TAG} {self.symbol} {self.currency}"


def _expect(fields: Sequence[str], count: int, tag: str) -> Sequence[str]:
    if len(fields) != count:
        raise InvalidArgumentError(f"{tag} expects {count} fields, got {len(fields)}")
    return fields


# =============================================================================
# Asset variants
# =============================================================================

@register_asset_type("Stock")
@dataclass(frozen=True)
class Stock(Asset):
    """
    Equity listed on an exchange.

    Attributes
    ----------
    symbol : str
        Ticker, e.g. "AAPL"
    currency : Currency
        Trading currency (default USD)
    exchange_code : str
        Listing exchange code, "" for the default exchange
    """
    symbol: str
    currency: Currency = Currency.USD
    exchange_code: str = ""

    @property
    def exchange(self) -> Exchange:
        return Exchange.get_instance(self.exchange_code)

    def fields(self) -> Tuple[str, ...]:
        return (self.symbol, self.currency.code, self.exchange_code)

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "Stock":
        symbol, currency, exchange_code = _expect(fields, 3, "Stock")
        return cls(symbol, Currency.get_instance(currency), exchange_code)


@register_asset_type("Option")
@dataclass(frozen=True)
class Option(Asset):
    """
    Option contract.

    Attributes
    ----------
    symbol : str
        Contract symbol, e.g. OCC "AAPL  240119C00150000"
    currency : Currency
        Trading currency (default USD)
    multiplier : float
        Contract size (default 100.0)
    """
    symbol: str
    currency: Currency = Currency.USD
    multiplier: float = 100.0

    def __post_init__(self):
        super().__post_init__()
        if not self.multiplier > 0:
            raise InvalidArgumentError(f"multiplier must be positive, got {self.multiplier}")

    def fields(self) -> Tuple[str, ...]:
        return (self.symbol, self.currency.code, repr(float(self.multiplier)))

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "Option":
        symbol, currency, multiplier = _expect(fields, 3, "Option")
        return cls(symbol, Currency.get_instance(currency), float(multiplier))


@register_asset_type("Future")
@dataclass(frozen=True)
class Future(Asset):
    """
    Futures contract.

    Attributes
    ----------
    symbol : str
        Contract symbol, e.g. "CLZ24"
    currency : Currency
        Trading currency (default USD)
    multiplier : float
        Contract multiplier (dollars per point)
    exchange_code : str
        Listing exchange code
    """
    symbol: str
    currency: Currency = Currency.USD
    multiplier: float = 1.0
    exchange_code: str = ""

    def __post_init__(self):
        super().__post_init__()
        if not self.multiplier > 0:
            raise InvalidArgumentError(f"multiplier must be positive, got {self.multiplier}")

    @property
    def exchange(self) -> Exchange:
        return Exchange.get_instance(self.exchange_code)

    def fields(self) -> Tuple[str, ...]:
        return (self.symbol, self.currency.code, repr(float(self.multiplier)), self.exchange_code)

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "Future":
        symbol, currency, multiplier, exchange_code = _expect(fields, 4, "Future")
        return cls(symbol, Currency.get_instance(currency), float(multiplier), exchange_code)


@register_asset_type("Forex")
@dataclass(frozen=True)
class Forex(Asset):
    """Currency pair, priced in the quote currency."""
    symbol: str
    currency: Currency

    @classmethod
    def from_symbol(cls, symbol: str) -> "Forex":
        """Create from a pair symbol such as "EUR/USD" or "EURUSD"."""
        pair = to_currency_pair(symbol)
        if pair is None:
            raise InvalidArgumentError(f"not a currency pair: {symbol!r}")
        return cls(symbol, pair[1])

    def fields(self) -> Tuple[str, ...]:
        return (self.symbol, self.currency.code)

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "Forex":
        symbol, currency = _expect(fields, 2, "Forex")
        return cls(symbol, Currency.get_instance(currency))


@register_asset_type("Crypto")
@dataclass(frozen=True)
class Crypto(Asset):
    """Cryptocurrency pair, priced in the quote currency."""
    symbol: str
    currency: Currency

    @classmethod
    def from_symbol(cls, symbol: str) -> "Crypto":
        """Create from a pair symbol such as "BTC-USDT" or "ETH/BTC"."""
        pair = to_currency_pair(symbol)
        if pair is None:
            raise InvalidArgumentError(f"not a currency pair: {symbol!r}")
        return cls(symbol, pair[1])

    def fields(self) -> Tuple[str, ...]:
        return (self.symbol, self.currency.code)

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "Crypto":
        symbol, currency = _expect(fields, 2, "Crypto")
        return cls(symbol, Currency.get_instance(currency))


# =============================================================================
# Collection helpers
# =============================================================================

def get_by_symbol(assets: Iterable[Asset], symbol: str) -> Asset:
    """
    First asset with ``symbol``.

    Raises KeyError if there is none.
    """
    for asset in assets:
        if asset.symbol == symbol:
            return asset
    raise KeyError(f"no asset with symbol {symbol!r}")


def find_by_symbols(assets: Iterable[Asset], *symbols: str) -> List[Asset]:
    wanted = set(symbols)
    return [asset for asset in assets if asset.symbol in wanted]


def find_by_currencies(assets: Iterable[Asset], *currencies: Union[Currency, str]) -> List[Asset]:
    wanted = {to_currency(c) for c in currencies}
    return [asset for asset in assets if asset.currency in wanted]
