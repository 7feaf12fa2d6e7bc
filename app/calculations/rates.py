# app/calculations/rates.py
from decimal import Decimal
from typing import Iterable, Dict, List, Optional

from app.core.exceptions import InvalidRate, RateNotFound
from app.utils.decimal_utils import to_decimal

HUNDRED = Decimal("100")


def _percentage(value, field: str) -> Decimal:
    pct = to_decimal(value, field, error_cls=InvalidRate)
    if pct < 0 or pct > HUNDRED:
        raise InvalidRate(f"{field} must be between 0 and 100")
    return pct


def effective_rate(rate_per_kg, scrap_percentage=0, transport_loss_percentage=0) -> Decimal:
    """Raw material rate loaded for expected scrap and transport loss."""
    rate = to_decimal(rate_per_kg, "RatePerKG", error_cls=InvalidRate)
    if rate < 0:
        raise InvalidRate("RatePerKG must be non-negative")
    scrap = _percentage(scrap_percentage, "ScrapPercentage")
    loss = _percentage(transport_loss_percentage, "TransportLossPercentage")
    return rate * (1 + (scrap + loss) / HUNDRED)


def select_current_rate(rates: Iterable, material_name: str):
    """
    Pick the active rate record with the latest effective_date for a material.

    ``rates`` may hold records for any material; only those whose
    ``material_name`` matches and whose ``is_active`` flag is set count.
    """
    candidates = [
        r for r in rates
        if r.is_active and r.material_name.lower() == material_name.lower()
    ]
    if not candidates:
        raise RateNotFound(
            f"Raw material rate not found for {material_name}. Please provide RMRate."
        )
    return max(candidates, key=lambda r: r.effective_date)


def current_rates(rates: Iterable) -> List:
    """Latest active rate per material name, ordered by material name."""
    latest: Dict[str, object] = {}
    for r in rates:
        if not r.is_active:
            continue
        best: Optional[object] = latest.get(r.material_name)
        if best is None or r.effective_date > best.effective_date:
            latest[r.material_name] = r
    return [latest[name] for name in sorted(latest)]
