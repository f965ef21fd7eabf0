"""
Shared fixtures for the quant_common tests.
"""

import pytest

from quant_common.config import Config
from quant_common.currency import Currency


@pytest.fixture(autouse=True)
def reset_config():
    """Every test starts from the default runtime configuration."""
    Config.reset()
    digits = {currency: currency.default_fraction_digits for currency in Currency.currencies()}
    yield
    Config.reset()
    for currency, value in digits.items():
        currency.default_fraction_digits = value
