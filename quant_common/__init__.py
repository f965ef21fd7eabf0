"""
Common value types for trading and backtesting.

Package Structure:
- size: Fixed-point quantities (Size)
- currency / amount / wallet: Currencies, single-currency amounts, multi-currency wallets
- exchange_rates: Converters between currencies
- timeframe: Time intervals and time-span helpers
- trading_calendar / exchange: Trading days, trading hours and the exchange registry
- asset: Asset variants and their serialization registry
- position / order / trade: Records composed from the above
- config / logging_config: Settings, runtime configuration and structured logging
"""

__version__ = '0.1.0'
