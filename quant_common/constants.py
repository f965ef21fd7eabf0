"""
Central constants for the value-type layer.

This module provides single source of truth for the numeric scale of sizes,
the tolerance used for monetary balances, the asset serialization separator,
the legal time range, and the currency display metadata.

"""

import pandas as pd

# Fixed-point sizes
SIZE_SCALE = 8                       # Decimal digits kept by Size
SIZE_FRACTION = 10 ** SIZE_SCALE     # 1.0 == 100_000_000 units
SIZE_MAX_UNITS = 2 ** 63 - 1         # Signed 64-bit range of the unit count
SIZE_MIN_UNITS = -(2 ** 63)

# Balances smaller than this are considered zero
EPS = 0.0000001

# ASCII Unit Separator, should not interfere with most strings
ASSET_SEP = "\x1f"

# Legal time range for timeframes and timestamps
MIN_TIME = pd.Timestamp("1900-01-01T00:00:00", tz="UTC")
MAX_TIME = pd.Timestamp("2200-01-01T00:00:00", tz="UTC")

# 365 days, used when annualizing returns
ONE_YEAR = pd.Timedelta(days=365)

DEFAULT_RANDOM_SEED = 42
DEFAULT_FRACTION_DIGITS = 2

# ISO-4217 minor units (number of fraction digits) for currencies whose
# value differs from DEFAULT_FRACTION_DIGITS, plus the common ones for clarity.
CURRENCY_FRACTION_DIGITS = {
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "AUD": 2,
    "CAD": 2,
    "CHF": 2,
    "CNY": 2,
    "HKD": 2,
    "NZD": 2,
    "RUB": 2,
    "INR": 2,
    "SEK": 2,
    "NOK": 2,
    "DKK": 2,
    "SGD": 2,
    "MXN": 2,
    "ZAR": 2,
    "BRL": 2,
    # Zero-decimal currencies
    "JPY": 0,
    "KRW": 0,
    "CLP": 0,
    "ISK": 0,
    "VND": 0,
    "PYG": 0,
    "UGX": 0,
    "XAF": 0,
    "XOF": 0,
    "HUF": 2,
    # Three-decimal currencies
    "BHD": 3,
    "JOD": 3,
    "KWD": 3,
    "OMR": 3,
    "TND": 3,
    "IQD": 3,
    "LYD": 3,
    # Four-decimal currencies
    "CLF": 4,
    "UYW": 4,
}

# Cryptocurrencies seeded with explicit display digits
CRYPTO_FRACTION_DIGITS = {
    "BTC": 8,
    "ETH": 8,
    "USDT": 2,
}

# Exchanges seeded at import: code -> (timezone, opening, closing)
EXCHANGE_SPECS = {
    # Major North American exchanges
    "US": ("America/New_York", "09:30", "16:00"),
    "NYSE": ("America/New_York", "09:30", "16:00"),
    "NASDAQ": ("America/New_York", "09:30", "16:00"),
    "BATS": ("America/New_York", "09:30", "16:00"),
    "CBOE": ("America/New_York", "09:30", "16:00"),
    "ARCA": ("America/New_York", "09:30", "16:00"),
    "AMEX": ("America/New_York", "09:30", "16:00"),
    "TSX": ("America/Toronto", "09:30", "16:00"),
    # Major European exchanges
    "AEB": ("Europe/Amsterdam", "09:00", "17:30"),
    "LSE": ("Europe/London", "08:00", "16:30"),
    "FSX": ("Europe/Berlin", "09:00", "17:30"),
    "SIX": ("Europe/Zurich", "09:00", "17:20"),
    "PAR": ("Europe/Paris", "09:00", "17:30"),
    # Major Asian exchanges
    "JPX": ("Asia/Tokyo", "09:00", "15:00"),
    "SSE": ("Asia/Shanghai", "09:30", "15:00"),
    "SEHK": ("Asia/Hong_Kong", "09:30", "16:00"),
    # Major Australian exchanges
    "SSX": ("Australia/Sydney", "10:00", "16:00"),
}

# Exchange currencies, when known
EXCHANGE_CURRENCIES = {
    "US": "USD",
    "NYSE": "USD",
    "NASDAQ": "USD",
    "BATS": "USD",
    "CBOE": "USD",
    "ARCA": "USD",
    "AMEX": "USD",
    "TSX": "CAD",
    "AEB": "EUR",
    "LSE": "GBP",
    "FSX": "EUR",
    "SIX": "CHF",
    "PAR": "EUR",
    "JPX": "JPY",
    "SSE": "CNY",
    "SEHK": "HKD",
    "SSX": "AUD",
}

DEFAULT_EXCHANGE_ZONE = "America/New_York"
