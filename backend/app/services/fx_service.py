"""
Foreign exchange service for currency conversion.

Rates come from a fixed table (settings.FX_RATES) quoting each currency in
the reference currency: 1 unit of currency = rate reference units.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional
import logging
from app.core.config import settings
from app.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def get_company_currency() -> str:
    """Organization currency every expense is also expressed in."""
    return (settings.COMPANY_CURRENCY or "INR").upper()


def get_rate_to_reference(
    currency: str,
    rates: Optional[Dict[str, Decimal]] = None,
    reference_currency: Optional[str] = None
) -> Decimal:
    """
    Rate of one unit of ``currency`` in the reference currency.

    The reference currency itself is always 1 even when absent from the table.
    Raises ValidationError for currencies the table does not know.
    """
    rates = settings.FX_RATES if rates is None else rates
    reference = (reference_currency or settings.FX_REFERENCE_CURRENCY).upper()
    currency_upper = currency.upper()

    if currency_upper == reference:
        return Decimal("1")

    rate = rates.get(currency_upper)
    if rate is None:
        logger.warning(f"No FX rate configured for {currency_upper}. Known: {sorted(rates)}")
        raise ValidationError(f"Unsupported currency: {currency_upper}")

    rate = Decimal(str(rate))
    if rate <= 0:
        raise ValidationError(f"Invalid exchange rate for {currency_upper}: {rate}")
    return rate


def convert_to_company(
    amount: Decimal,
    currency: str,
    company_currency: Optional[str] = None,
    rates: Optional[Dict[str, Decimal]] = None,
    reference_currency: Optional[str] = None
) -> Decimal:
    """
    Convert amount from currency to the company currency.

    Identity when both currencies match; otherwise converts through the
    reference currency and rounds half-up to 2 decimal places.
    """
    company = (company_currency or get_company_currency()).upper()
    amount = Decimal(str(amount))

    if currency.upper() == company:
        return amount

    from_rate = get_rate_to_reference(currency, rates, reference_currency)
    to_rate = get_rate_to_reference(company, rates, reference_currency)
    converted = amount * from_rate / to_rate
    return converted.quantize(CENTS, rounding=ROUND_HALF_UP)
