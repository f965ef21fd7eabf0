"""
Configuration for the value-type layer.

Two parts:

- ``QuantSettings``: validated settings schema (Pydantic), typically loaded
  from a YAML file with ``load_settings``.
- ``Config``: the process-wide runtime holder used by the value types, i.e.
  the exchange-rate converter, the shared random generator and the default
  timezone. ``Config.apply`` installs a ``QuantSettings``.

"""

from pathlib import Path
from typing import Dict, Literal, Optional, Union

import numpy as np
import pytz
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DEFAULT_RANDOM_SEED
from .currency import Currency
from .exchange_rates import ExchangeRates, FixedExchangeRates, NoExchangeRates
from .logging_config import configure_structlog, get_logger

logger = get_logger(__name__)


class QuantSettings(BaseModel):
    """Settings for currencies, time zones and randomness."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    base_currency: str = Field("USD", description="Base currency for reporting and fixed rates")
    default_zone: str = Field("UTC", description="Default timezone for local dates (e.g., 'America/New_York')")
    random_seed: int = Field(DEFAULT_RANDOM_SEED, description="Seed of the shared random generator")
    extra_display_digits: int = Field(0, ge=0, description="Extra display digits for every currency")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO")
    log_file: Optional[str] = Field(None, description="Log file, stdout when omitted")
    fixed_rates: Dict[str, float] = Field(
        default_factory=dict,
        description="Value of one unit of each currency in the base currency",
    )

    @field_validator("base_currency")
    @classmethod
    def validate_base_currency(cls, v):
        """Ensure the currency code is not blank."""
        if not v or not v.strip():
            raise ValueError("base_currency cannot be blank")
        return v.strip()

    @field_validator("default_zone")
    @classmethod
    def validate_zone(cls, v):
        """Ensure the timezone is known to pytz."""
        if v not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @field_validator("fixed_rates")
    @classmethod
    def validate_rates(cls, v):
        """Ensure all rates are positive."""
        for code, rate in v.items():
            if rate <= 0:
                raise ValueError(f"Rate for {code} must be positive, got {rate}")
        return v


def load_settings(path: Union[str, Path]) -> QuantSettings:
    """
    Load settings from a YAML file.

    Args:
        path: YAML file, either flat or nested under a ``quant_common`` key

    Returns:
        Validated settings

    Raises:
        ValidationError: If the settings are invalid
    """
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    if "quant_common" in raw:
        raw = raw["quant_common"]
    return QuantSettings(**raw)


class Config:
    """
    Process-wide runtime configuration.

    Attributes
    ----------
    exchange_rates : ExchangeRates
        Converter used by ``Amount.convert`` and ``Wallet.convert``
    random : numpy.random.Generator
        Shared random generator, seeded for reproducibility
    default_zone : pytz timezone
        Zone used when no exchange or zone is given
    """

    exchange_rates: ExchangeRates = NoExchangeRates()
    random: np.random.Generator = np.random.default_rng(DEFAULT_RANDOM_SEED)
    default_zone = pytz.utc

    @classmethod
    def apply(cls, settings: QuantSettings, configure_logging: bool = False) -> None:
        """Install settings, replacing the current runtime configuration."""
        cls.random = np.random.default_rng(settings.random_seed)
        cls.default_zone = pytz.timezone(settings.default_zone)
        if settings.fixed_rates:
            cls.exchange_rates = FixedExchangeRates(settings.base_currency, settings.fixed_rates)
        if settings.extra_display_digits:
            Currency.increase_digits(settings.extra_display_digits)
        if configure_logging:
            configure_structlog(settings.log_level, settings.log_file)
        logger.info(
            "config_applied",
            base_currency=settings.base_currency,
            default_zone=settings.default_zone,
            random_seed=settings.random_seed,
            fixed_rates=len(settings.fixed_rates),
        )

    @classmethod
    def reset(cls) -> None:
        """Restore the defaults: no exchange rates, seed 42, UTC."""
        cls.exchange_rates = NoExchangeRates()
        cls.random = np.random.default_rng(DEFAULT_RANDOM_SEED)
        cls.default_zone = pytz.utc
