# app/calculations/costing.py
"""
Layered part costing.

    RM Cost       = Weight × Effective RM Rate
    Sub Cost      = RM Cost + Process + Finishing + Packing
    Overhead Cost = Sub Cost × Overhead %
    Margin Cost   = Sub Cost × Margin %
    Final Rate    = Sub Cost + Overhead Cost + Margin Cost

Every derived field is rounded to 2 places before the next step uses it, so
persisted intermediate values always add up to the persisted final rate.
Margin is taken on Sub Cost, not on Sub Cost + Overhead.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Dict

from app.core.exceptions import InvalidCostingInput
from app.utils.decimal_utils import to_decimal, round_money

HUNDRED = Decimal("100")
ZERO = Decimal("0")

DEFAULT_OVERHEAD_PERCENTAGE = Decimal("10")
DEFAULT_MARGIN_PERCENTAGE = Decimal("15")

RATE_TYPE_PER_NOS = "Per Nos"
RATE_TYPE_PER_KG = "Per Kg"
RATE_TYPE_PER_HOUR = "Per Hour"
RATE_TYPE_FIXED = "Fixed"
RATE_TYPES = (RATE_TYPE_PER_NOS, RATE_TYPE_PER_KG, RATE_TYPE_PER_HOUR, RATE_TYPE_FIXED)


def _non_negative(value, name: str) -> Decimal:
    number = to_decimal(value, name, error_cls=InvalidCostingInput)
    if number < 0:
        raise InvalidCostingInput(f"{name} must be non-negative")
    return number


def _percentage(value, name: str) -> Decimal:
    number = _non_negative(value, name)
    if number > HUNDRED:
        raise InvalidCostingInput(f"{name} must be between 0 and 100")
    return number


@dataclass(frozen=True)
class CostingInput:
    weight_kg: Decimal
    rm_rate: Decimal
    process_cost: Decimal = ZERO
    finishing_cost: Decimal = ZERO
    packing_cost: Decimal = ZERO
    overhead_percentage: Decimal = DEFAULT_OVERHEAD_PERCENTAGE
    margin_percentage: Decimal = DEFAULT_MARGIN_PERCENTAGE

    @classmethod
    def build(
        cls,
        weight_kg,
        rm_rate,
        process_cost=None,
        finishing_cost=None,
        packing_cost=None,
        overhead_percentage=None,
        margin_percentage=None,
    ) -> "CostingInput":
        """Validate raw numbers and fill in defaults for anything left as None."""
        return cls(
            weight_kg=_non_negative(weight_kg, "RMWeight"),
            rm_rate=_non_negative(rm_rate, "RMRate"),
            process_cost=_non_negative(process_cost or 0, "ProcessCost"),
            finishing_cost=_non_negative(finishing_cost or 0, "FinishingCost"),
            packing_cost=_non_negative(packing_cost or 0, "PackingCost"),
            overhead_percentage=_percentage(
                DEFAULT_OVERHEAD_PERCENTAGE if overhead_percentage is None else overhead_percentage,
                "OverheadPercentage",
            ),
            margin_percentage=_percentage(
                DEFAULT_MARGIN_PERCENTAGE if margin_percentage is None else margin_percentage,
                "MarginPercentage",
            ),
        )


@dataclass(frozen=True)
class CostingResult:
    rm_cost: Decimal
    sub_cost: Decimal
    overhead_cost: Decimal
    margin_cost: Decimal
    final_rate: Decimal
    inputs: CostingInput = field(repr=False, default=None)

    def as_dict(self) -> Dict[str, Decimal]:
        return {
            "rm_cost": self.rm_cost,
            "sub_cost": self.sub_cost,
            "overhead_cost": self.overhead_cost,
            "margin_cost": self.margin_cost,
            "final_rate": self.final_rate,
        }


def calculate_costing(data: CostingInput) -> CostingResult:
    rm_cost = round_money(data.weight_kg * data.rm_rate)
    sub_cost = round_money(rm_cost + data.process_cost + data.finishing_cost + data.packing_cost)
    overhead_cost = round_money(sub_cost * data.overhead_percentage / HUNDRED)
    margin_cost = round_money(sub_cost * data.margin_percentage / HUNDRED)
    final_rate = round_money(sub_cost + overhead_cost + margin_cost)

    return CostingResult(
        rm_cost=rm_cost,
        sub_cost=sub_cost,
        overhead_cost=overhead_cost,
        margin_cost=margin_cost,
        final_rate=final_rate,
        inputs=data,
    )


def process_cost_for(rate_type: str, rate, weight_kg) -> Decimal:
    rate = _non_negative(rate, "Process rate")
    if rate_type in (RATE_TYPE_PER_NOS, RATE_TYPE_PER_HOUR):
        # one piece / one hour per part
        return rate * 1
    if rate_type == RATE_TYPE_PER_KG:
        return rate * _non_negative(weight_kg, "RMWeight")
    if rate_type == RATE_TYPE_FIXED:
        return rate
    raise InvalidCostingInput(f"Unknown process rate type '{rate_type}'")


def process_cost_from_processes(processes: Iterable, weight_kg) -> Decimal:
    """Sum the cost of every active process definition for one part."""
    total = ZERO
    for process in processes:
        if not process.is_active:
            continue
        total += process_cost_for(process.rate_type, process.rate, weight_kg)
    return total


def formula_breakdown(result: CostingResult) -> Dict[str, str]:
    data = result.inputs
    return {
        "rawMaterialCost": f"{data.weight_kg} Kg × ₹{data.rm_rate:.2f} = ₹{result.rm_cost}",
        "subCost": (
            f"₹{result.rm_cost} + ₹{data.process_cost:.2f} + ₹{data.finishing_cost:.2f}"
            f" + ₹{data.packing_cost:.2f} = ₹{result.sub_cost}"
        ),
        "overheadCost": f"₹{result.sub_cost} × {data.overhead_percentage}% = ₹{result.overhead_cost}",
        "marginCost": f"₹{result.sub_cost} × {data.margin_percentage}% = ₹{result.margin_cost}",
        "finalRate": (
            f"₹{result.sub_cost} + ₹{result.overhead_cost} + ₹{result.margin_cost}"
            f" = ₹{result.final_rate}"
        ),
    }
