# app/calculations/gst.py
"""GST jurisdiction: intra-state supplies split CGST+SGST, inter-state supplies pay IGST."""
from dataclasses import dataclass
from decimal import Decimal

from app.core.exceptions import InvalidStateCode, InvalidRate
from app.utils.decimal_utils import to_decimal, round_money

GST_TYPE_IGST = "IGST"
GST_TYPE_CGST_SGST = "CGST+SGST"

MIN_STATE_CODE = 1
MAX_STATE_CODE = 37
ZERO = Decimal("0")


@dataclass(frozen=True)
class GstSplit:
    gst_type: str
    cgst: Decimal
    sgst: Decimal
    igst: Decimal


def _state_code(value, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidStateCode(f"{field} must be an integer between 1 and 37")
    if not MIN_STATE_CODE <= value <= MAX_STATE_CODE:
        raise InvalidStateCode(f"{field} must be an integer between 1 and 37")
    return value


def resolve_gst_type(company_state_code: int, counterparty_state_code: int) -> str:
    company = _state_code(company_state_code, "Company state code")
    counterparty = _state_code(counterparty_state_code, "Customer state code")
    return GST_TYPE_IGST if company != counterparty else GST_TYPE_CGST_SGST


def split_gst(gst_type: str, total_percentage) -> GstSplit:
    total = to_decimal(total_percentage, "GSTPercentage", error_cls=InvalidRate)
    if total < 0 or total > 100:
        raise InvalidRate("GSTPercentage must be between 0 and 100")

    if gst_type == GST_TYPE_IGST:
        return GstSplit(gst_type=gst_type, cgst=ZERO, sgst=ZERO, igst=total)
    if gst_type == GST_TYPE_CGST_SGST:
        half = total / 2
        return GstSplit(gst_type=gst_type, cgst=half, sgst=half, igst=ZERO)
    raise InvalidRate(f"Unknown GST type '{gst_type}'")


def resolve(company_state_code: int, counterparty_state_code: int, total_percentage) -> GstSplit:
    gst_type = resolve_gst_type(company_state_code, counterparty_state_code)
    return split_gst(gst_type, total_percentage)


def gst_component_amounts(split: GstSplit, sub_total: Decimal) -> dict:
    """Money value of each GST component, for display on the quotation."""
    return {
        "cgst_amount": round_money(sub_total * split.cgst / 100),
        "sgst_amount": round_money(sub_total * split.sgst / 100),
        "igst_amount": round_money(sub_total * split.igst / 100),
    }
