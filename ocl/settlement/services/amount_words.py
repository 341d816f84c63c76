"""
Rupee amounts in words, Indian numbering scale (thousand, lakh, crore).
"""

_ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen"
]
_TENS = [
    "", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty",
    "Ninety"
]


def _two_digits(n: int) -> str:
    if n < 20:
        return _ONES[n]
    tens, ones = divmod(n, 10)
    return _TENS[tens] if ones == 0 else f"{_TENS[tens]} {_ONES[ones]}"


def _three_digits(n: int) -> str:
    hundreds, rest = divmod(n, 100)
    parts = []
    if hundreds:
        parts.append(f"{_ONES[hundreds]} Hundred")
    if rest:
        parts.append(_two_digits(rest))
    return " ".join(parts)


def int_to_words_indian(n: int) -> str:
    """Words for a non-negative integer, e.g. 123000 -> 'One Lakh Twenty Three Thousand'."""
    if n < 0:
        raise ValueError("Amount must not be negative")
    if n == 0:
        return "Zero"

    parts = []
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


def amount_in_words(n: int) -> str:
    """
    Invoice wording of a whole-rupee amount.

    ``0`` reads ``"Zero"``; anything else reads ``"<words> Rupees Only"``.
    """
    n = int(n)
    if n == 0:
        return "Zero"
    return f"{int_to_words_indian(n)} Rupees Only"
