"""
test_calculation_engines.py: Unit tests for the pure calculation engines.

Tests cover:
  - Weight from dimensions and density (3-place rounding, validation)
  - Effective raw material rate with scrap and transport loss
  - Current-rate selection from a rate history
  - Layered costing (progressive rounding, margin on sub cost, defaults)
  - Process cost auto-sourcing by rate type
  - GST jurisdiction and split
  - Indian amount in words

No database or web fixtures are used.
"""

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.calculations.amount_in_words import amount_in_words, convert_indian
from app.calculations.costing import (
    CostingInput, calculate_costing, formula_breakdown, process_cost_for, process_cost_from_processes
)
from app.calculations.gst import (
    GST_TYPE_CGST_SGST, GST_TYPE_IGST, resolve, resolve_gst_type, split_gst, gst_component_amounts
)
from app.calculations.rates import effective_rate, select_current_rate, current_rates
from app.calculations.weight import calculate_weight
from app.core.exceptions import (
    InvalidAmount, InvalidCostingInput, InvalidDimension, InvalidRate, InvalidStateCode, RateNotFound
)


def _rate(name, day, effective="100", active=True):
    return SimpleNamespace(
        material_name=name,
        effective_date=datetime(2026, 1, day),
        effective_rate=Decimal(effective),
        is_active=active,
    )


# ===========================================================================
# Class 1: Weight
# ===========================================================================

class TestWeight:

    def test_copper_busbar(self):
        result = calculate_weight(5, 50, 100, 8.96)
        assert result.volume_mm3 == Decimal("25000.000")
        assert result.weight_kg == Decimal("0.224")

    def test_default_density_is_copper(self):
        assert calculate_weight(5, 50, 100).weight_kg == Decimal("0.224")

    def test_weight_rounds_half_up(self):
        # 625 mm³ × 0.8 / 1e6 = 0.0005 kg
        assert calculate_weight(1, 1, 625, "0.8").weight_kg == Decimal("0.001")
        assert calculate_weight(1, 1, 625, "0.4").weight_kg == Decimal("0.000")

    def test_float_inputs_are_exact(self):
        result = calculate_weight(2.5, 40, 100, 7.85)
        assert result.thickness == Decimal("2.5")
        assert result.weight_kg == Decimal("0.079")

    @pytest.mark.parametrize("dims", [(0, 50, 100), (5, -1, 100), (5, 50, 0)])
    def test_non_positive_dimension_rejected(self, dims):
        with pytest.raises(InvalidDimension):
            calculate_weight(*dims)

    def test_non_positive_density_rejected(self):
        with pytest.raises(InvalidDimension):
            calculate_weight(5, 50, 100, 0)

    def test_formula_text(self):
        result = calculate_weight(5, 50, 100, 8.96)
        assert result.weight_formula.endswith("= 0.224 Kg")


# ===========================================================================
# Class 2: Raw material rates
# ===========================================================================

class TestEffectiveRate:

    def test_scrap_and_loss_loading(self):
        assert effective_rate(100, 3, 2) == Decimal("105.00")

    def test_no_loading(self):
        assert effective_rate("150.75") == Decimal("150.75")

    @pytest.mark.parametrize("args", [(-1, 0, 0), (100, 101, 0), (100, 0, -0.5)])
    def test_out_of_range_rejected(self, args):
        with pytest.raises(InvalidRate):
            effective_rate(*args)

    def test_latest_active_rate_wins(self):
        rates = [_rate("Copper", 1, "140"), _rate("Copper", 5, "150"), _rate("Copper", 9, "160", active=False)]
        assert select_current_rate(rates, "copper").effective_rate == Decimal("150")

    def test_missing_material_raises(self):
        with pytest.raises(RateNotFound, match="Brass"):
            select_current_rate([_rate("Copper", 1)], "Brass")

    def test_current_rates_one_per_material(self):
        rates = [_rate("Copper", 1), _rate("Copper", 3), _rate("Aluminium", 2)]
        latest = current_rates(rates)
        assert [r.material_name for r in latest] == ["Aluminium", "Copper"]
        assert latest[1].effective_date.day == 3


# ===========================================================================
# Class 3: Costing
# ===========================================================================

class TestCosting:

    def test_layered_costing(self):
        result = calculate_costing(CostingInput.build(2.5, 150.75, 50, 25, 15, 10, 15))
        assert result.rm_cost == Decimal("376.88")
        assert result.sub_cost == Decimal("466.88")
        assert result.overhead_cost == Decimal("46.69")
        assert result.margin_cost == Decimal("70.03")
        assert result.final_rate == Decimal("583.60")

    def test_final_rate_is_sum_of_stored_parts(self):
        result = calculate_costing(CostingInput.build("0.337", "611.11", "7.77", "1.01", "0.5", "12.5", "17.5"))
        assert result.final_rate == result.sub_cost + result.overhead_cost + result.margin_cost

    def test_defaults(self):
        data = CostingInput.build(0.224, 150.75)
        assert data.overhead_percentage == Decimal("10")
        assert data.margin_percentage == Decimal("15")
        result = calculate_costing(data)
        assert (result.rm_cost, result.overhead_cost, result.margin_cost, result.final_rate) == (
            Decimal("33.77"), Decimal("3.38"), Decimal("5.07"), Decimal("42.22")
        )

    def test_zero_percentages(self):
        result = calculate_costing(CostingInput.build(1, 10, overhead_percentage=0, margin_percentage=0))
        assert result.final_rate == result.sub_cost == Decimal("10.00")

    @pytest.mark.parametrize("kwargs", [
        {"weight_kg": -1, "rm_rate": 10},
        {"weight_kg": 1, "rm_rate": -10},
        {"weight_kg": 1, "rm_rate": 10, "packing_cost": -1},
        {"weight_kg": 1, "rm_rate": 10, "overhead_percentage": 101},
        {"weight_kg": 1, "rm_rate": 10, "margin_percentage": -5},
        {"weight_kg": "abc", "rm_rate": 10},
    ])
    def test_invalid_inputs_rejected(self, kwargs):
        with pytest.raises(InvalidCostingInput):
            CostingInput.build(**kwargs)

    def test_formula_breakdown(self):
        formulas = formula_breakdown(calculate_costing(CostingInput.build("0.224", "150.75")))
        assert formulas["rawMaterialCost"] == "0.224 Kg × ₹150.75 = ₹33.77"
        assert formulas["finalRate"] == "₹33.77 + ₹3.38 + ₹5.07 = ₹42.22"


class TestProcessCost:

    def test_rate_types(self):
        assert process_cost_for("Per Nos", 12, "0.5") == Decimal("12")
        assert process_cost_for("Per Hour", 300, "0.5") == Decimal("300")
        assert process_cost_for("Per Kg", 40, "0.5") == Decimal("20.0")
        assert process_cost_for("Fixed", "7.5", "0.5") == Decimal("7.5")

    def test_unknown_rate_type(self):
        with pytest.raises(InvalidCostingInput):
            process_cost_for("Per Metre", 1, 1)

    def test_inactive_processes_ignored(self):
        processes = [
            SimpleNamespace(rate_type="Per Kg", rate=Decimal("40"), is_active=True),
            SimpleNamespace(rate_type="Fixed", rate=Decimal("5"), is_active=True),
            SimpleNamespace(rate_type="Fixed", rate=Decimal("999"), is_active=False),
        ]
        assert process_cost_from_processes(processes, Decimal("0.224")) == Decimal("13.960")

    def test_no_processes(self):
        assert process_cost_from_processes([], 1) == 0


# ===========================================================================
# Class 4: GST
# ===========================================================================

class TestGst:

    def test_intra_state_split(self):
        split = resolve(27, 27, 18)
        assert split.gst_type == GST_TYPE_CGST_SGST
        assert (split.cgst, split.sgst, split.igst) == (Decimal("9"), Decimal("9"), Decimal("0"))

    def test_inter_state_igst(self):
        split = resolve(27, 24, 18)
        assert split.gst_type == GST_TYPE_IGST
        assert (split.cgst, split.sgst, split.igst) == (Decimal("0"), Decimal("0"), Decimal("18"))

    def test_odd_percentage_halves_are_not_rounded(self):
        split = split_gst(GST_TYPE_CGST_SGST, "0.25")
        assert split.cgst == Decimal("0.125")

    @pytest.mark.parametrize("codes", [(0, 27), (27, 38), ("27", 27), (True, 1)])
    def test_invalid_state_code(self, codes):
        with pytest.raises(InvalidStateCode):
            resolve_gst_type(*codes)

    def test_invalid_percentage(self):
        with pytest.raises(InvalidRate):
            resolve(27, 27, 120)

    def test_component_amounts(self):
        amounts = gst_component_amounts(resolve(27, 27, 18), Decimal("4222.00"))
        assert amounts == {
            "cgst_amount": Decimal("379.98"),
            "sgst_amount": Decimal("379.98"),
            "igst_amount": Decimal("0.00"),
        }


# ===========================================================================
# Class 5: Amount in words
# ===========================================================================

class TestAmountInWords:

    @pytest.mark.parametrize("amount, words", [
        (0, "Zero Rupees Only"),
        (1, "One Rupee Only"),
        (105, "One Hundred Five Rupees Only"),
        ("18255.78", "Eighteen Thousand Two Hundred Fifty Five Rupees and Seventy Eight Paise Only"),
        ("0.5", "Zero Rupees and Fifty Paise Only"),
        (100000, "One Lakh Rupees Only"),
        ("12345678.50", "One Crore Twenty Three Lakh Forty Five Thousand Six Hundred Seventy Eight Rupees and Fifty Paise Only"),
        ("4981.96", "Four Thousand Nine Hundred Eighty One Rupees and Ninety Six Paise Only"),
    ])
    def test_render(self, amount, words):
        assert amount_in_words(amount) == words

    def test_hundred_crore(self):
        assert convert_indian(1_000_000_000) == "One Hundred Crore"

    def test_paise_round_up_carries_into_rupees(self):
        assert amount_in_words("1.999") == "Two Rupees Only"

    def test_negative_rejected(self):
        with pytest.raises(InvalidAmount):
            amount_in_words(-1)
