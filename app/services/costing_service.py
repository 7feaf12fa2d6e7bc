# app/services/costing_service.py
import logging
from dataclasses import replace
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.calculations.costing import (
    CostingInput, calculate_costing, formula_breakdown, process_cost_from_processes
)
from app.core.config import DEFAULT_OVERHEAD_PERCENTAGE, DEFAULT_MARGIN_PERCENTAGE
from app.core.exceptions import AppError, CostingNotFound
from app.models import Costing, Process
from app.schemas.costing_schemas import (
    CostingCalculateRequest, CostingCreate, CostingUpdate, CostingOut,
    CostingBreakdown, CostingCalculationOut, CostingMetadata
)
from app.services.dimension_service import get_dimension_for_part
from app.services.master_service import get_item_by_part_no
from app.services.raw_material_service import get_current_rate
from app.utils.activity_helpers import log_user_activity
from app.utils.decimal_utils import round_money, round_rate, round_weight

logger = logging.getLogger(__name__)

SOURCE_MANUAL = "Manual Entry"


def _defaults(value, default):
    return default if value is None else value


def _at_column_scale(costing_input: CostingInput) -> CostingInput:
    """Round inputs to the scale of the columns that store them, so a saved row recomputes to itself."""
    return replace(
        costing_input,
        weight_kg=round_weight(costing_input.weight_kg),
        rm_rate=round_rate(costing_input.rm_rate),
        process_cost=round_money(costing_input.process_cost),
        finishing_cost=round_money(costing_input.finishing_cost),
        packing_cost=round_money(costing_input.packing_cost),
        overhead_percentage=round_money(costing_input.overhead_percentage),
        margin_percentage=round_money(costing_input.margin_percentage),
    )


async def _deactivate_other_costings(db: AsyncSession, part_no: str, keep_id: Optional[int] = None):
    query = update(Costing).where(Costing.part_no == part_no, Costing.is_active == True)
    if keep_id is not None:
        query = query.where(Costing.id != keep_id)
    await db.execute(query.values(is_active=False))


# --------------------------
# CALCULATE (no save)
# --------------------------
def calculate(data: CostingCalculateRequest) -> dict:
    costing_input = CostingInput.build(
        weight_kg=data.rm_weight,
        rm_rate=data.rm_rate,
        process_cost=data.process_cost,
        finishing_cost=data.finishing_cost,
        packing_cost=data.packing_cost,
        overhead_percentage=_defaults(data.overhead_percentage, DEFAULT_OVERHEAD_PERCENTAGE),
        margin_percentage=_defaults(data.margin_percentage, DEFAULT_MARGIN_PERCENTAGE),
    )
    result = calculate_costing(costing_input)
    return {
        "message": "Costing calculated successfully",
        "data": CostingCalculationOut(
            inputs={
                "rm_weight": costing_input.weight_kg,
                "rm_rate": costing_input.rm_rate,
                "process_cost": costing_input.process_cost,
                "finishing_cost": costing_input.finishing_cost,
                "packing_cost": costing_input.packing_cost,
                "overhead_percentage": costing_input.overhead_percentage,
                "margin_percentage": costing_input.margin_percentage,
            },
            calculations=CostingBreakdown(**result.as_dict()),
            formulas=formula_breakdown(result),
        ),
    }


# --------------------------
# LOOKUP
# --------------------------
async def get_active_costing(db: AsyncSession, part_no: str) -> Costing:
    result = await db.execute(
        select(Costing)
        .where(Costing.part_no == part_no, Costing.is_active == True)
        .order_by(Costing.created_at.desc(), Costing.id.desc())
    )
    costing = result.unique().scalars().first()
    if not costing:
        raise CostingNotFound(f"Active costing not found for part {part_no}")
    return costing


async def _get_costing(db: AsyncSession, costing_id: int) -> Costing:
    costing = await db.get(Costing, costing_id)
    if not costing:
        raise CostingNotFound(f"Costing {costing_id} not found")
    return costing


# --------------------------
# CREATE (auto-sourced inputs)
# --------------------------
async def create_costing(db: AsyncSession, data: CostingCreate, actor: Optional[str] = None) -> dict:
    try:
        item = await get_item_by_part_no(db, data.part_no)
        dimension = await get_dimension_for_part(db, item.part_no)

        if data.rm_rate is not None:
            rm_rate = data.rm_rate
            rate_source = SOURCE_MANUAL
        else:
            rate = await get_current_rate(db, item.material.material_name)
            rm_rate = rate.effective_rate
            rate_source = f"RM Rate Master ({rate.material_name} {rate.grade})"

        if data.process_cost is not None:
            process_cost = data.process_cost
            process_source = SOURCE_MANUAL
        else:
            processes = await db.execute(select(Process).where(Process.is_active == True))
            process_cost = process_cost_from_processes(processes.scalars().all(), dimension.weight_kg)
            process_source = "Process Master"

        costing_input = _at_column_scale(CostingInput.build(
            weight_kg=dimension.weight_kg,
            rm_rate=rm_rate,
            process_cost=process_cost,
            finishing_cost=data.finishing_cost,
            packing_cost=data.packing_cost,
            overhead_percentage=_defaults(data.overhead_percentage, DEFAULT_OVERHEAD_PERCENTAGE),
            margin_percentage=_defaults(data.margin_percentage, DEFAULT_MARGIN_PERCENTAGE),
        ))
        result = calculate_costing(costing_input)

        # one active costing per part
        await _deactivate_other_costings(db, item.part_no)

        costing = Costing(
            item_id=item.id,
            part_no=item.part_no,
            rate_source=rate_source,
            process_source=process_source,
            created_by=actor,
            updated_by=actor,
        )
        costing.apply_result(result)
        db.add(costing)
        await db.flush()

        await log_user_activity(
            db, username=actor,
            message=f"Created costing for part '{item.part_no}': final rate ₹{result.final_rate}"
        )
        await db.commit()
        await db.refresh(costing)
        logger.info("Costing for %s: final rate %s", item.part_no, result.final_rate)

        return {
            "message": "Costing created successfully",
            "data": CostingOut.model_validate(costing),
            "metadata": CostingMetadata(
                weight_source=f"Dimension/Weight Master ({dimension.weight_kg} Kg)",
                rate_source=rate_source,
                process_source=process_source,
                dimension_details={
                    "thickness": dimension.thickness,
                    "width": dimension.width,
                    "length": dimension.length,
                    "density": dimension.density,
                },
            ),
            "formulas": formula_breakdown(result),
        }

    except AppError as e:
        await db.rollback()
        logger.warning("Costing for %s rejected: %s", data.part_no, e.detail)
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error creating costing: {e}")


# --------------------------
# UPDATE (full recompute)
# --------------------------
async def update_costing(db: AsyncSession, costing_id: int, data: CostingUpdate, actor: Optional[str] = None) -> dict:
    try:
        costing = await _get_costing(db, costing_id)
        changes = data.model_dump(exclude_unset=True)

        def pick(field):
            value = changes.get(field)
            return getattr(costing, field) if value is None else value

        if "rm_rate" in changes and changes["rm_rate"] is not None:
            costing.rate_source = SOURCE_MANUAL
        if "process_cost" in changes and changes["process_cost"] is not None:
            costing.process_source = SOURCE_MANUAL

        result = calculate_costing(_at_column_scale(CostingInput.build(
            weight_kg=pick("rm_weight"),
            rm_rate=pick("rm_rate"),
            process_cost=pick("process_cost"),
            finishing_cost=pick("finishing_cost"),
            packing_cost=pick("packing_cost"),
            overhead_percentage=pick("overhead_percentage"),
            margin_percentage=pick("margin_percentage"),
        )))
        costing.apply_result(result)
        if changes.get("is_active") is not None:
            if changes["is_active"]:
                await _deactivate_other_costings(db, costing.part_no, keep_id=costing.id)
            costing.is_active = changes["is_active"]
        costing.updated_by = actor

        await log_user_activity(
            db, username=actor,
            message=f"Updated costing (ID: {costing.id}) for part '{costing.part_no}': final rate ₹{result.final_rate}"
        )
        await db.commit()
        await db.refresh(costing)
        return {
            "message": "Costing updated successfully",
            "data": CostingOut.model_validate(costing),
            "formulas": formula_breakdown(result),
        }

    except AppError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating costing: {e}")


# --------------------------
# READ
# --------------------------
async def get_costing(db: AsyncSession, costing_id: int) -> dict:
    costing = await _get_costing(db, costing_id)
    return {"message": "Costing fetched successfully", "data": CostingOut.model_validate(costing)}


async def list_costings(db: AsyncSession, part_no: Optional[str] = None, is_active: Optional[bool] = None) -> dict:
    query = select(Costing)
    if part_no:
        query = query.where(Costing.part_no == part_no.strip().upper())
    if is_active is not None:
        query = query.where(Costing.is_active == is_active)
    result = await db.execute(query.order_by(Costing.created_at.desc(), Costing.id.desc()))
    return {
        "message": "Costings fetched successfully",
        "data": [CostingOut.model_validate(c) for c in result.unique().scalars().all()],
    }


# --------------------------
# DELETE (hard)
# --------------------------
async def delete_costing(db: AsyncSession, costing_id: int, actor: Optional[str] = None) -> dict:
    try:
        costing = await _get_costing(db, costing_id)
        await db.delete(costing)
        await log_user_activity(db, username=actor, message=f"Deleted costing (ID: {costing_id}) for part '{costing.part_no}'")
        await db.commit()
        return {"message": "Costing deleted successfully"}

    except AppError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error deleting costing: {e}")
