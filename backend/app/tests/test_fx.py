"""
Tests for currency conversion.
"""
from decimal import Decimal
import pytest
from app.core.exceptions import ValidationError
from app.services.fx_service import convert_to_company, get_rate_to_reference

RATES = {"USD": Decimal("85"), "EUR": Decimal("90"), "INR": Decimal("1")}


def test_same_currency_is_identity():
    amount = Decimal("123.456")
    assert convert_to_company(amount, "INR", "INR", RATES) == amount
    assert convert_to_company(amount, "usd", "USD", RATES) == amount


def test_eur_to_inr():
    assert convert_to_company(Decimal("450"), "EUR", "INR", {"EUR": Decimal("90")}, "INR") == Decimal("40500.00")


def test_conversion_through_reference_currency():
    # 90 EUR-in-INR / 85 USD-in-INR
    assert convert_to_company(Decimal("85"), "EUR", "USD", RATES, "INR") == Decimal("90.00")
    assert convert_to_company(Decimal("100"), "INR", "USD", RATES, "INR") == Decimal("1.18")


def test_rounds_half_up():
    # 1.005 * 85 = 85.425
    assert convert_to_company(Decimal("1.005"), "USD", "INR", RATES, "INR") == Decimal("85.43")


def test_conversion_is_deterministic():
    first = convert_to_company(Decimal("19.99"), "EUR", "USD", RATES, "INR")
    second = convert_to_company(Decimal("19.99"), "EUR", "USD", RATES, "INR")
    assert first == second
    assert first.as_tuple().exponent == -2


def test_unsupported_currency():
    with pytest.raises(ValidationError):
        convert_to_company(Decimal("10"), "XYZ", "INR", RATES, "INR")


def test_reference_currency_needs_no_table_entry():
    assert get_rate_to_reference("INR", {}, "INR") == Decimal("1")


def test_non_positive_rate_rejected():
    with pytest.raises(ValidationError):
        get_rate_to_reference("USD", {"USD": Decimal("0")}, "INR")
