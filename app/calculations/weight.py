# app/calculations/weight.py
"""
Part weight from rectangular stock dimensions.

    volume_mm3 = thickness × width × length
    weight_kg  = volume_mm3 × density / 1,000,000

Dimensions are in millimetres and density in g/cm³; both outputs are rounded
half-away-from-zero to 3 decimal places.
"""
from dataclasses import dataclass
from decimal import Decimal

from app.core.exceptions import InvalidDimension
from app.utils.decimal_utils import to_decimal, round_weight

DEFAULT_DENSITY = Decimal("8.96")  # copper
MM3_G_PER_KG = Decimal("1000000")


@dataclass(frozen=True)
class WeightResult:
    thickness: Decimal
    width: Decimal
    length: Decimal
    density: Decimal
    volume_mm3: Decimal
    weight_kg: Decimal

    @property
    def volume_formula(self) -> str:
        return f"{self.thickness} × {self.width} × {self.length} = {self.volume_mm3:.2f} mm³"

    @property
    def weight_formula(self) -> str:
        return f"({self.volume_mm3:.2f} × {self.density}) / 1,000,000 = {self.weight_kg:.3f} Kg"


def _positive(value, field: str) -> Decimal:
    number = to_decimal(value, field, error_cls=InvalidDimension)
    if number <= 0:
        raise InvalidDimension(f"{field} must be greater than zero")
    return number


def calculate_weight(thickness, width, length, density=None) -> WeightResult:
    t = _positive(thickness, "Thickness")
    w = _positive(width, "Width")
    l = _positive(length, "Length")
    d = _positive(DEFAULT_DENSITY if density is None else density, "Density")

    volume = t * w * l
    weight = volume * d / MM3_G_PER_KG

    return WeightResult(
        thickness=t,
        width=w,
        length=l,
        density=d,
        volume_mm3=round_weight(volume),
        weight_kg=round_weight(weight),
    )
