from decimal import Decimal

import pytest

from table_order.core.domain.model.money import MAX_AMOUNT, Money, fold_money


def test_amounts_round_half_up_to_paise():
    assert Money.of("12.345").amount == Decimal("12.35")
    assert Money.of(35.5).amount == Decimal("35.50")
    assert Money.of(7).currency == "INR"


def test_fold_and_multiply():
    total = fold_money([Money.of(100) * 2, Money.of("49.99")])

    assert total.amount == Decimal("249.99")
    assert fold_money([]).amount == Decimal("0.00")


@pytest.mark.parametrize("amount", ["1e30", "NaN", "Infinity", MAX_AMOUNT + 1])
def test_out_of_range_amounts_are_rejected(amount):
    with pytest.raises(ValueError):
        Money.of(amount)


def test_product_past_the_limit_is_rejected():
    with pytest.raises(ValueError):
        Money.of(MAX_AMOUNT) * 2


def test_currencies_do_not_mix():
    with pytest.raises(ValueError):
        Money.of(1) + Money.of(1, currency="USD")
