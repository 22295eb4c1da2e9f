"""Tests for the Money value object and its currency-agnostic zero."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from models import Currency, CurrencyMismatchError, DivideByZeroError, Money


def eur(amount):
    return Money(amount=Decimal(amount), currency=Currency.EUR)


# ---------------------------------------------------------------------------
# Construction / equality
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_from_amount_is_usd(self):
        m = Money.from_amount(125)
        assert m.amount == Decimal("125")
        assert m.currency is Currency.USD

    def test_from_amount_float_keeps_decimal_text(self):
        assert Money.from_amount(0.1).amount == Decimal("0.1")

    def test_zero_is_sentinel(self):
        assert Money.zero().is_zero()
        assert Money.zero().amount == 0

    def test_usd_zero_is_not_sentinel(self):
        assert not Money.from_amount(0).is_zero()

    def test_structural_equality(self):
        assert Money.from_amount(10) == Money(amount=Decimal("10.00"), currency=Currency.USD)
        assert Money.from_amount(10) != eur(10)

    def test_hash_matches_equality(self):
        assert len({Money.from_amount(10), Money.from_amount(Decimal("10.0")), eur(10)}) == 2

    def test_frozen(self):
        m = Money.from_amount(10)
        with pytest.raises(ValidationError):
            m.amount = Decimal(11)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

class TestComparison:
    def test_same_currency(self):
        a, b = Money.from_amount(1), Money.from_amount(2)
        assert a < b
        assert a <= b
        assert b > a
        assert b >= a
        assert a <= Money.from_amount(1)
        assert a >= Money.from_amount(1)

    @pytest.mark.parametrize("op", [
        lambda a, b: a < b,
        lambda a, b: a <= b,
        lambda a, b: a > b,
        lambda a, b: a >= b,
    ])
    def test_different_currencies_raise(self, op):
        with pytest.raises(CurrencyMismatchError):
            op(Money.from_amount(1), eur(1))

    def test_zero_compares_with_any_currency(self):
        assert eur(5) > Money.zero()
        assert eur(-5) < Money.zero()
        assert Money.zero() < eur(5)
        assert Money.zero() >= eur(-5)
        assert Money.zero() <= Money.from_amount(0)

    def test_usd_zero_against_eur_raises(self):
        with pytest.raises(CurrencyMismatchError):
            Money.from_amount(0) < eur(5)

    def test_non_money_comparison_is_type_error(self):
        with pytest.raises(TypeError):
            Money.from_amount(1) < 5

    def test_max_picks_largest(self):
        values = [Money.from_amount(v) for v in (3, -10, 7, 7)]
        assert max(values) == Money.from_amount(7)


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

class TestAddSubtract:
    def test_add(self):
        assert Money.from_amount(1) + Money.from_amount(2) == Money.from_amount(3)

    def test_subtract(self):
        assert Money.from_amount(5) - Money.from_amount(7) == Money.from_amount(-2)

    def test_add_zero_is_identity(self):
        a = eur(42)
        assert a + Money.zero() == a
        assert Money.zero() + a == a

    def test_subtract_zero_is_identity(self):
        a = eur(42)
        assert a - Money.zero() == a

    def test_zero_minus_value_negates(self):
        assert Money.zero() - eur(42) == eur(-42)

    def test_different_currencies_raise(self):
        with pytest.raises(CurrencyMismatchError):
            Money.from_amount(1) + eur(1)
        with pytest.raises(CurrencyMismatchError):
            Money.from_amount(1) - eur(1)

    def test_mismatch_is_value_error(self):
        with pytest.raises(ValueError):
            Money.from_amount(1) + eur(1)


class TestMultiplyDivide:
    def test_multiply_by_decimal(self):
        assert (Money.from_amount(100) * Decimal("0.15")).amount == Decimal("15.00")

    def test_multiply_by_float_is_exact(self):
        assert (Money.from_amount(100) * 0.15).amount == Decimal("15.00")

    def test_right_multiply(self):
        assert Decimal(2) * Money.from_amount(21) == Money.from_amount(42)

    def test_multiply_keeps_currency(self):
        assert (eur(10) * 3).currency is Currency.EUR

    def test_multiply_by_zero_returns_sentinel(self):
        assert (Money.from_amount(100) * 0).is_zero()

    def test_zero_times_anything_is_zero(self):
        assert (Money.zero() * Decimal("0.1233")).is_zero()

    def test_divide(self):
        assert Money.from_amount(100) / 4 == Money.from_amount(25)

    def test_divide_by_zero_raises(self):
        with pytest.raises(DivideByZeroError):
            Money.from_amount(100) / 0
        with pytest.raises(DivideByZeroError):
            eur(100) / Decimal("0")

    def test_divide_by_zero_is_zero_division_error(self):
        with pytest.raises(ZeroDivisionError):
            Money.zero() / 0

    def test_zero_divided_is_zero(self):
        assert (Money.zero() / 3).is_zero()
