"""
test_costing_services.py: Service tests for dimension weights, raw material
rates and auto-sourced costings against an in-memory database.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.core.exceptions import (
    CostingNotFound, DimensionExists, DimensionMissing, InvalidDimension, ItemInactive, ItemNotFound,
    RateNotFound, RecordNotFound
)
from app.models import Costing, Process, UserActivity
from app.schemas.costing_schemas import CostingCreate, CostingUpdate
from app.schemas.dimension_schemas import DimensionWeightCreate, DimensionWeightUpdate
from app.schemas.raw_material_schemas import RawMaterialRateCreate
from app.services import costing_service, dimension_service, raw_material_service


# ===========================================================================
# Dimension weights
# ===========================================================================

class TestDimensionService:

    def test_create_uses_material_density(self, run_db, seed):
        async def scenario(db):
            await seed(db, with_dimension=False)
            return await dimension_service.create_dimension_weight(
                db, DimensionWeightCreate(part_no=" pn001 ", thickness=5, width=50, length=100), actor="planner"
            )

        response = run_db(scenario)
        assert response["data"].part_no == "PN001"
        assert response["data"].density == Decimal("8.96")
        assert response["data"].weight_kg == Decimal("0.224")

    def test_one_dimension_per_part(self, run_db, seed):
        async def scenario(db):
            await seed(db)
            await dimension_service.create_dimension_weight(
                db, DimensionWeightCreate(part_no="PN001", thickness=1, width=1, length=1)
            )

        with pytest.raises(DimensionExists):
            run_db(scenario)

    def test_unknown_part(self, run_db, seed):
        async def scenario(db):
            await seed(db, with_dimension=False)
            await dimension_service.create_dimension_weight(
                db, DimensionWeightCreate(part_no="PN404", thickness=1, width=1, length=1)
            )

        with pytest.raises(ItemNotFound):
            run_db(scenario)

    def test_inactive_part(self, run_db, seed):
        async def scenario(db):
            masters = await seed(db, with_dimension=False)
            masters["pn001"].is_active = False
            await db.commit()
            await dimension_service.create_dimension_weight(
                db, DimensionWeightCreate(part_no="PN001", thickness=1, width=1, length=1)
            )

        with pytest.raises(ItemInactive):
            run_db(scenario)

    def test_update_recomputes_weight(self, run_db, seed):
        async def scenario(db):
            await seed(db, with_dimension=False)
            created = await dimension_service.create_dimension_weight(
                db, DimensionWeightCreate(part_no="PN001", thickness=5, width=50, length=100)
            )
            return await dimension_service.update_dimension_weight(
                db, created["data"].id, DimensionWeightUpdate(length=200)
            )

        data = run_db(scenario)["data"]
        assert data.length == Decimal("200")
        assert data.weight_kg == Decimal("0.448")

    def test_update_rejects_zero_dimension(self, run_db, seed):
        async def scenario(db):
            await seed(db, with_dimension=False)
            created = await dimension_service.create_dimension_weight(
                db, DimensionWeightCreate(part_no="PN001", thickness=5, width=50, length=100)
            )
            await dimension_service.update_dimension_weight(
                db, created["data"].id, DimensionWeightUpdate(thickness=0)
            )

        with pytest.raises(InvalidDimension, match="Thickness"):
            run_db(scenario)

    def test_delete_unknown_dimension(self, run_db):
        async def scenario(db):
            await dimension_service.delete_dimension_weight(db, 404)

        with pytest.raises(RecordNotFound):
            run_db(scenario)


# ===========================================================================
# Raw material rates
# ===========================================================================

class TestRawMaterialService:

    def test_create_derives_effective_rate(self, run_db):
        async def scenario(db):
            return await raw_material_service.create_rate(
                db, RawMaterialRateCreate(
                    material_name="Brass", grade="CZ121", rate_per_kg=100,
                    scrap_percentage=3, transport_loss_percentage=2,
                )
            )

        assert run_db(scenario)["data"].effective_rate == Decimal("105.00")

    def test_current_rate_is_latest(self, run_db, seed):
        async def scenario(db):
            await seed(db)
            await raw_material_service.create_rate(
                db, RawMaterialRateCreate(
                    material_name="Copper", grade="ETP", rate_per_kg=160,
                    effective_date=datetime(2026, 6, 1, tzinfo=timezone.utc),
                )
            )
            rate = await raw_material_service.get_current_rate(db, "Copper")
            listing = await raw_material_service.list_current_rates(db)
            return rate.effective_rate, listing["data"]

        effective, current = run_db(scenario)
        assert effective == Decimal("160")
        assert [r.material_name for r in current] == ["Copper"]

    def test_current_rate_ignores_name_case(self, run_db, seed):
        async def scenario(db):
            await seed(db, rate_per_kg=None)
            await raw_material_service.create_rate(
                db, RawMaterialRateCreate(material_name="COPPER", grade="ETP", rate_per_kg=155)
            )
            return await raw_material_service.get_current_rate(db, "Copper")

        assert run_db(scenario).effective_rate == Decimal("155")


# ===========================================================================
# Costing
# ===========================================================================

class TestCostingService:

    def test_auto_sourced_costing(self, run_db, seed):
        async def scenario(db):
            await seed(db)
            response = await costing_service.create_costing(db, CostingCreate(part_no="pn001"), actor="estimator")
            logged = await db.scalar(select(func.count(UserActivity.id)))
            return response, logged

        response, logged = run_db(scenario)
        data = response["data"]
        assert data.rm_weight == Decimal("0.224")
        assert data.rm_cost == Decimal("33.77")
        assert data.sub_cost == Decimal("33.77")
        assert data.overhead_cost == Decimal("3.38")
        assert data.margin_cost == Decimal("5.07")
        assert data.final_rate == Decimal("42.22")
        assert response["metadata"].rate_source.startswith("RM Rate Master")
        assert response["metadata"].process_source == "Process Master"
        assert response["formulas"]["finalRate"].endswith("₹42.22")
        assert logged == 1

    def test_processes_are_summed(self, run_db, seed):
        async def scenario(db):
            await seed(db)
            db.add_all([
                Process(process_name="Blanking", rate_type="Per Nos", rate=Decimal("2.50")),
                Process(process_name="Tin plating", rate_type="Per Kg", rate=Decimal("50")),
                Process(process_name="Deburring", rate_type="Fixed", rate=Decimal("9"), is_active=False),
            ])
            await db.commit()
            return await costing_service.create_costing(db, CostingCreate(part_no="PN001"))

        # 2.50 + 50 × 0.224
        assert run_db(scenario)["data"].process_cost == Decimal("13.70")

    def test_manual_overrides(self, run_db, seed):
        async def scenario(db):
            await seed(db, rate_per_kg=None)
            return await costing_service.create_costing(
                db, CostingCreate(part_no="PN001", rm_rate=Decimal("2.5"), process_cost=Decimal("50"))
            )

        response = run_db(scenario)
        assert response["data"].rm_rate == Decimal("2.5")
        assert response["metadata"].rate_source == "Manual Entry"
        assert response["metadata"].process_source == "Manual Entry"

    def test_missing_dimension(self, run_db, seed):
        async def scenario(db):
            await seed(db, with_dimension=False)
            await costing_service.create_costing(db, CostingCreate(part_no="PN001"))

        with pytest.raises(DimensionMissing):
            run_db(scenario)

    def test_missing_rate(self, run_db, seed):
        async def scenario(db):
            await seed(db, rate_per_kg=None)
            await costing_service.create_costing(db, CostingCreate(part_no="PN001"))

        with pytest.raises(RateNotFound, match="Please provide RMRate"):
            run_db(scenario)

    def test_new_costing_replaces_active_one(self, run_db, seed):
        async def scenario(db):
            await seed(db)
            first = await costing_service.create_costing(db, CostingCreate(part_no="PN001"))
            second = await costing_service.create_costing(
                db, CostingCreate(part_no="PN001", margin_percentage=Decimal("20"))
            )
            active = await costing_service.get_active_costing(db, "PN001")
            rows = await db.execute(select(Costing.id, Costing.is_active).order_by(Costing.id))
            return first["data"].id, second["data"].id, active.id, [tuple(r) for r in rows.all()]

        first_id, second_id, active_id, rows = run_db(scenario)
        assert active_id == second_id
        assert rows == [(first_id, False), (second_id, True)]

    def test_update_recomputes_every_field(self, run_db, seed):
        async def scenario(db):
            await seed(db)
            created = await costing_service.create_costing(db, CostingCreate(part_no="PN001"))
            return await costing_service.update_costing(
                db, created["data"].id,
                CostingUpdate(rm_weight=Decimal("2.5"), process_cost=50, finishing_cost=25, packing_cost=15),
            )

        data = run_db(scenario)["data"]
        assert (data.rm_cost, data.sub_cost, data.overhead_cost, data.margin_cost, data.final_rate) == (
            Decimal("376.88"), Decimal("466.88"), Decimal("46.69"), Decimal("70.03"), Decimal("583.60")
        )
        assert data.process_source == "Manual Entry"

    def test_reactivated_costing_replaces_active_one(self, run_db, seed):
        async def scenario(db):
            await seed(db)
            first = await costing_service.create_costing(db, CostingCreate(part_no="PN001"))
            second = await costing_service.create_costing(
                db, CostingCreate(part_no="PN001", margin_percentage=Decimal("20"))
            )
            first_id, second_id = first["data"].id, second["data"].id
            await costing_service.update_costing(db, first_id, CostingUpdate(is_active=True))
            active = await costing_service.get_active_costing(db, "PN001")
            rows = await db.execute(select(Costing.id, Costing.is_active).order_by(Costing.id))
            return first_id, second_id, active.id, [tuple(r) for r in rows.all()]

        first_id, second_id, active_id, rows = run_db(scenario)
        assert active_id == first_id
        assert rows == [(first_id, True), (second_id, False)]

    def test_stored_inputs_reproduce_stored_rate(self, run_db, seed):
        async def scenario(db):
            await seed(db)
            created = await costing_service.create_costing(
                db, CostingCreate(part_no="PN001", finishing_cost=Decimal("0.004"), packing_cost=Decimal("0.004"))
            )
            before = created["data"]
            after = await costing_service.update_costing(db, before.id, CostingUpdate())
            return before, after["data"]

        before, after = run_db(scenario)
        assert before.finishing_cost == Decimal("0")
        assert before.packing_cost == Decimal("0")
        assert before.sub_cost == before.rm_cost + before.process_cost + before.finishing_cost + before.packing_cost
        assert before.final_rate == Decimal("42.22")
        assert after.final_rate == before.final_rate

    def test_delete_unknown_costing(self, run_db):
        async def scenario(db):
            await costing_service.delete_costing(db, 404)

        with pytest.raises(CostingNotFound):
            run_db(scenario)


# ===========================================================================
# Activity log
# ===========================================================================

class TestActivityLog:

    def test_actions_are_recorded_with_actor(self, run_db, seed):
        from app.services.activity_service import list_activities

        async def scenario(db):
            await seed(db)
            await costing_service.create_costing(db, CostingCreate(part_no="PN001"), actor="estimator")
            await raw_material_service.create_rate(
                db, RawMaterialRateCreate(material_name="Brass", grade="CZ121", rate_per_kg=400)
            )
            return await list_activities(db, username="estim")

        log = run_db(scenario)
        assert log["total"] == 1
        assert log["data"][0].username == "estimator"
        assert "PN001" in log["data"][0].message
