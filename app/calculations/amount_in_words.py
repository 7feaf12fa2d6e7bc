# app/calculations/amount_in_words.py
"""
Rupee amounts in words, Indian numbering system.

The lowest group has three digits; every group above it has two and carries a
scale word (Thousand, Lakh, Crore). 1,23,45,678.50 reads
"One Crore Twenty Three Lakh Forty Five Thousand Six Hundred Seventy Eight
Rupees and Fifty Paise Only".
"""
import re
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP

from app.core.exceptions import InvalidAmount
from app.utils.decimal_utils import to_decimal

ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]
SCALES = ["", "Thousand", "Lakh"]

CRORE = 10_000_000


def convert_hundreds(num: int) -> str:
    """Words for 0..999 ("" for zero)."""
    words = []
    if num >= 100:
        words.append(ONES[num // 100] + " Hundred")
        num %= 100
    if num >= 20:
        words.append(TENS[num // 10])
        num %= 10
    if num > 0:
        words.append(ONES[num])
    return " ".join(words)


def _below_crore(num: int) -> str:
    groups = []
    scale = 0
    while num > 0:
        if scale == 0:
            group, num = num % 1000, num // 1000
        else:
            group, num = num % 100, num // 100
        if group:
            words = convert_hundreds(group)
            if SCALES[scale]:
                words += " " + SCALES[scale]
            groups.insert(0, words)
        scale += 1
    return " ".join(groups)


def convert_indian(num: int) -> str:
    """Words for a non-negative integer; "Zero" for 0."""
    if num == 0:
        return "Zero"
    crores, rest = divmod(num, CRORE)
    parts = []
    if crores:
        # 100 crore and beyond: the crore multiplier is itself read in Indian words
        parts.append(convert_indian(crores) + " Crore")
    if rest:
        parts.append(_below_crore(rest))
    return " ".join(parts)


def split_rupees_paise(amount: Decimal):
    rupees = int(amount.to_integral_value(rounding=ROUND_DOWN))
    paise = int(((amount - rupees) * 100).to_integral_value(rounding=ROUND_HALF_UP))
    if paise == 100:
        rupees, paise = rupees + 1, 0
    return rupees, paise


def amount_in_words(amount) -> str:
    value = to_decimal(amount, "Amount", error_cls=InvalidAmount)
    if value < 0:
        raise InvalidAmount("Amount must be non-negative")

    rupees, paise = split_rupees_paise(value)
    if rupees == 0 and paise == 0:
        return "Zero Rupees Only"

    result = convert_indian(rupees) + (" Rupee" if rupees == 1 else " Rupees")
    if paise > 0:
        result += " and " + convert_hundreds(paise) + " Paise"
    result += " Only"

    result = re.sub(r"\s+", " ", result).strip()
    return result[0].upper() + result[1:]
