"""Static exchange-rate table used for net-worth rollups.

Rates are quoted as the value of one unit of the currency in TND. Cross
rates against any other base are derived from the same table.
"""
import logging
from decimal import Decimal
from typing import NamedTuple, Optional

logger = logging.getLogger(__name__)


class RateInfo(NamedTuple):
    rate: Decimal
    is_unofficial: bool


RATES_TO_TND = {
    "TND": RateInfo(Decimal("1"), False),
    "USD": RateInfo(Decimal("3.12"), False),
    "EUR": RateInfo(Decimal("3.35"), False),
    "DZD": RateInfo(Decimal("1") / Decimal("75"), True),  # parallel market rate
    "GBP": RateInfo(Decimal("3.95"), False),
    "JPY": RateInfo(Decimal("0.02"), False),
    "CAD": RateInfo(Decimal("2.28"), False),
    "AUD": RateInfo(Decimal("2.05"), False),
    "CHF": RateInfo(Decimal("3.45"), False),
}


def get_exchange_rate(currency: str, base_currency: str) -> Optional[RateInfo]:
    """Rate converting one unit of ``currency`` into ``base_currency``."""
    source = RATES_TO_TND.get(currency)
    base = RATES_TO_TND.get(base_currency)
    if source is None or base is None:
        return None
    return RateInfo(source.rate / base.rate, source.is_unofficial or base.is_unofficial)


def convert(amount: Decimal, currency: str, base_currency: str) -> Decimal:
    if currency == base_currency:
        return amount
    info = get_exchange_rate(currency, base_currency)
    if info is None:
        logger.warning("Exchange rate %s->%s not found. Defaulting to 1.", currency, base_currency)
        return amount
    return amount * info.rate
