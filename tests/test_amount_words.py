from decimal import Decimal

import pytest

from erp.services.amount_words import amount_in_words, int_to_words_indian


@pytest.mark.parametrize(
    "n, words",
    [
        (0, "Zero"),
        (7, "Seven"),
        (15, "Fifteen"),
        (40, "Forty"),
        (105, "One Hundred and Five"),
        (1000, "One Thousand"),
        (100000, "One Lakh"),
        (12345678, "One Crore Twenty Three Lakh Forty Five Thousand Six Hundred and Seventy Eight"),
        (10_000_000_000, "One Thousand Crore"),
    ],
)
def test_indian_grouping(n, words):
    assert int_to_words_indian(n) == words


def test_amount_with_paise():
    assert amount_in_words(Decimal("105.50")) == "Rupees One Hundred and Five and Paise Fifty Only"


def test_whole_rupees_and_rounding():
    assert amount_in_words(100000) == "Rupees One Lakh Only"
    assert amount_in_words("2.999") == "Rupees Three Only"


def test_empty_and_negative_amounts():
    assert amount_in_words(None) == "Rupees Zero Only"
    assert amount_in_words(-5) == "Minus Rupees Five Only"
