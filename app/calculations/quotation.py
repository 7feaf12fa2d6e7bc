# app/calculations/quotation.py
"""
Quotation totals, numbering and status rules.

Nothing here touches the database; the quotation service feeds in line items
and stored status values and persists what comes back.
"""
import enum
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, List, Sequence

from app.calculations.amount_in_words import amount_in_words
from app.calculations.gst import GstSplit, resolve
from app.core.exceptions import (
    InvalidLineItem, InvalidRate, QuotationNotDraft, InvalidStatusTransition
)
from app.utils.decimal_utils import to_decimal, round_money

DEFAULT_VALIDITY_DAYS = 30
NUMBER_PREFIX = "QT"


class QuotationStatus(str, enum.Enum):
    DRAFT = "Draft"
    SENT = "Sent"
    APPROVED = "Approved"
    CONVERTED = "Converted"
    EXPIRED = "Expired"
    REJECTED = "Rejected"
    CANCELLED = "Cancelled"


OPEN_STATUSES = (QuotationStatus.SENT, QuotationStatus.APPROVED)
TERMINAL_STATUSES = (
    QuotationStatus.CONVERTED,
    QuotationStatus.EXPIRED,
    QuotationStatus.REJECTED,
    QuotationStatus.CANCELLED,
)

ALLOWED_TRANSITIONS = {
    QuotationStatus.DRAFT: set(OPEN_STATUSES),
    QuotationStatus.SENT: set(TERMINAL_STATUSES),
    QuotationStatus.APPROVED: set(TERMINAL_STATUSES),
}


def ensure_draft(status) -> None:
    if QuotationStatus(status) != QuotationStatus.DRAFT:
        raise QuotationNotDraft(
            f"Only Draft quotations can be modified (current status: {QuotationStatus(status).value})"
        )


def ensure_transition(current, target) -> QuotationStatus:
    current = QuotationStatus(current)
    target = QuotationStatus(target)
    if target in OPEN_STATUSES and current != QuotationStatus.DRAFT:
        raise QuotationNotDraft(
            f"Only Draft quotations can be marked {target.value} (current status: {current.value})"
        )
    if target not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidStatusTransition(
            f"Cannot move quotation from {current.value} to {target.value}"
        )
    return target


@dataclass(frozen=True)
class LineItem:
    part_no: str
    quantity: int
    unit_final_rate: Decimal
    amount: Decimal


def line_amount(quantity, unit_final_rate) -> Decimal:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidLineItem("Quantity must be a whole number of at least 1")
    rate = to_decimal(unit_final_rate, "FinalRate", error_cls=InvalidLineItem)
    if rate < 0:
        raise InvalidLineItem("FinalRate must be non-negative")
    return round_money(rate * quantity)


def build_line(part_no: str, quantity: int, unit_final_rate) -> LineItem:
    amount = line_amount(quantity, unit_final_rate)
    return LineItem(
        part_no=part_no,
        quantity=quantity,
        unit_final_rate=to_decimal(unit_final_rate),
        amount=amount,
    )


@dataclass(frozen=True)
class QuotationTotals:
    sub_total: Decimal
    gst_percentage: Decimal
    gst: GstSplit
    gst_amount: Decimal
    grand_total: Decimal
    amount_in_words: str

    @property
    def gst_type(self) -> str:
        return self.gst.gst_type


def quotation_totals(
    amounts: Iterable,
    gst_percentage,
    company_state_code: int,
    counterparty_state_code: int,
) -> QuotationTotals:
    """
    Aggregate already-rounded line amounts.

    ``amounts`` are the stored per-line amounts; summing them without further
    rounding keeps sub_total equal to what the lines show.
    """
    sub_total = sum((to_decimal(a, "Amount", error_cls=InvalidLineItem) for a in amounts), Decimal("0.00"))
    pct = to_decimal(gst_percentage, "GSTPercentage", error_cls=InvalidRate)
    split = resolve(company_state_code, counterparty_state_code, pct)
    gst_amount = round_money(sub_total * pct / 100)
    grand_total = sub_total + gst_amount

    return QuotationTotals(
        sub_total=round_money(sub_total),
        gst_percentage=pct,
        gst=split,
        gst_amount=gst_amount,
        grand_total=round_money(grand_total),
        amount_in_words=amount_in_words(grand_total),
    )


def format_quotation_number(year: int, sequence: int) -> str:
    return f"{NUMBER_PREFIX}/{year}/{sequence:04d}"


def valid_till(quotation_date: datetime, days: int = DEFAULT_VALIDITY_DAYS) -> datetime:
    return quotation_date + timedelta(days=days)


def first_line_gst_percentage(tax_percentages: Sequence) -> Decimal:
    """
    The whole quotation is taxed at the first line's GST rate, even when later
    lines fall under different HSN codes.
    """
    if not tax_percentages:
        return Decimal("0")
    return to_decimal(tax_percentages[0], "GSTPercentage", error_cls=InvalidRate)


def recompute_amounts(lines: Iterable) -> List[Decimal]:
    """Amount for each stored line, recomputed from quantity × rate."""
    return [line_amount(line.quantity, line.unit_final_rate) for line in lines]
