from decimal import Decimal

import pytest

from transport_pricing.services.pricing.rounding import round_amount, to_decimal


@pytest.mark.parametrize(
    "amount, places, expected",
    [
        (2.675, 2, Decimal("2.68")),     # float 自带 round() 会得到 2.67
        (1.005, 2, Decimal("1.01")),
        (0.5, 0, Decimal("1")),
        (160.5, 0, Decimal("161")),
        (8360, 2, Decimal("8360.00")),
        (Decimal("12.34567"), 4, Decimal("12.3457")),
    ],
)
def test_round_amount_half_up(amount, places, expected):
    result = round_amount(amount, places)
    assert result == expected
    assert result.as_tuple().exponent == -places


def test_round_amount_rejects_negative_places():
    with pytest.raises(ValueError):
        round_amount(1.23, -1)


def test_to_decimal_handles_bad_input():
    assert to_decimal(None) is None
    assert to_decimal(True) is None
    assert to_decimal("abc") is None
    assert to_decimal(0.1) == Decimal("0.1")


def test_round_amount_beyond_default_context_precision():
    amount = Decimal("123456789012345678901234567.5")
    result = round_amount(amount, 4)
    assert result == amount
    assert result.as_tuple().exponent == -4
