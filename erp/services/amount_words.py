# erp/services/amount_words.py
from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, List

_ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen"
]
_TENS = [
    "", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty",
    "Ninety"
]


def _dec(v: Any) -> Decimal:
    if v is None or v == "":
        return Decimal("0")
    if isinstance(v, Decimal):
        return v
    try:
        return Decimal(str(v))
    except InvalidOperation:
        return Decimal("0")


def _two_digits(n: int) -> str:
    if n < 20:
        return _ONES[n]
    t, o = divmod(n, 10)
    return _TENS[t] if o == 0 else f"{_TENS[t]} {_ONES[o]}"


def _three_digits(n: int) -> str:
    h, r = divmod(n, 100)
    parts: List[str] = []
    if h:
        parts.append(f"{_ONES[h]} Hundred")
        if r:
            parts.append("and")
    if r:
        parts.append(_two_digits(r))
    return " ".join(parts)


def int_to_words_indian(n: int) -> str:
    """
    Indian grouping: 1,23,45,678 -> One Crore Twenty Three Lakh Forty Five Thousand ...
    Crores above 999 recurse, so 1000 crore reads "One Thousand Crore".
    """
    if n == 0:
        return "Zero"
    if n < 0:
        return f"Minus {int_to_words_indian(-n)}"

    parts: List[str] = []
    crore, n = divmod(n, 10000000)
    if crore:
        parts.append(f"{int_to_words_indian(crore)} Crore")

    lakh, n = divmod(n, 100000)
    if lakh:
        parts.append(f"{_two_digits(lakh)} Lakh")

    thousand, n = divmod(n, 1000)
    if thousand:
        parts.append(f"{_two_digits(thousand)} Thousand")

    if n:
        parts.append(_three_digits(n))

    return " ".join(parts)


def amount_in_words(amount: Any) -> str:
    """Rupees/paise wording printed on orders, e.g. 'Rupees One Hundred and Five and Paise Fifty Only'."""
    d = _dec(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "Minus " if d < 0 else ""
    d = abs(d)

    rupees = int(d)
    paise = int((d - Decimal(rupees)) * 100)

    r_words = int_to_words_indian(rupees)
    if paise > 0:
        return f"{sign}Rupees {r_words} and Paise {int_to_words_indian(paise)} Only"
    return f"{sign}Rupees {r_words} Only"
