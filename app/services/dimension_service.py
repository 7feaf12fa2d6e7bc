# app/services/dimension_service.py
import logging
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.calculations.weight import calculate_weight
from app.core.config import DEFAULT_DENSITY
from app.core.exceptions import AppError, DimensionExists, DimensionMissing, RecordNotFound
from app.models import DimensionWeight
from app.schemas.dimension_schemas import (
    DimensionWeightCreate, DimensionWeightUpdate, DimensionWeightOut, WeightCalculateRequest,
    WeightCalculationOut
)
from app.services.master_service import get_item_by_part_no
from app.utils.activity_helpers import log_user_activity

logger = logging.getLogger(__name__)


def _calculation_out(result) -> WeightCalculationOut:
    return WeightCalculationOut(
        thickness=result.thickness,
        width=result.width,
        length=result.length,
        density=result.density,
        volume_mm3=result.volume_mm3,
        weight_kg=result.weight_kg,
        formula_details={
            "volume_calculation": result.volume_formula,
            "weight_calculation": result.weight_formula,
        },
    )


# --------------------------
# CALCULATE (no save)
# --------------------------
def calculate(data: WeightCalculateRequest) -> dict:
    result = calculate_weight(data.thickness, data.width, data.length, data.density)
    return {"message": "Weight calculated successfully", "data": _calculation_out(result)}


# --------------------------
# LOOKUP
# --------------------------
async def get_dimension_for_part(db: AsyncSession, part_no: str) -> DimensionWeight:
    result = await db.execute(
        select(DimensionWeight).where(DimensionWeight.part_no == part_no.strip().upper())
    )
    dimension = result.scalars().first()
    if not dimension:
        raise DimensionMissing(
            f"Dimension/Weight not found for part {part_no}. Please create dimension first."
        )
    return dimension


# --------------------------
# CREATE
# --------------------------
async def create_dimension_weight(db: AsyncSession, data: DimensionWeightCreate, actor: Optional[str] = None) -> dict:
    try:
        item = await get_item_by_part_no(db, data.part_no)

        existing = await db.execute(
            select(DimensionWeight).where(DimensionWeight.part_no == item.part_no)
        )
        if existing.scalars().first():
            raise DimensionExists(f"Dimension weight already exists for part {item.part_no}")

        density = data.density
        if density is None:
            density = item.material.density if item.material and item.material.density else DEFAULT_DENSITY

        result = calculate_weight(data.thickness, data.width, data.length, density)

        dimension = DimensionWeight(part_no=item.part_no, created_by=actor, updated_by=actor)
        dimension.apply_weight(result)
        db.add(dimension)
        await db.flush()

        await log_user_activity(
            db, username=actor,
            message=f"Created dimension weight for part '{item.part_no}': {result.weight_kg} Kg"
        )
        await db.commit()
        await db.refresh(dimension)
        logger.info("Dimension weight for %s = %s kg", item.part_no, result.weight_kg)

        return {
            "message": "Dimension weight created successfully",
            "data": DimensionWeightOut.model_validate(dimension),
        }

    except AppError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error creating dimension weight: {e}")


# --------------------------
# UPDATE (recomputes weight)
# --------------------------
async def update_dimension_weight(
    db: AsyncSession, dimension_id: int, data: DimensionWeightUpdate, actor: Optional[str] = None
) -> dict:
    try:
        dimension = await db.get(DimensionWeight, dimension_id)
        if not dimension:
            raise RecordNotFound("Dimension weight not found")

        changes = data.model_dump(exclude_unset=True)

        def pick(field):
            value = changes.get(field)
            return getattr(dimension, field) if value is None else value

        result = calculate_weight(pick("thickness"), pick("width"), pick("length"), pick("density"))
        dimension.apply_weight(result)
        dimension.updated_by = actor

        await log_user_activity(
            db, username=actor,
            message=f"Updated dimension weight for part '{dimension.part_no}': {result.weight_kg} Kg"
        )
        await db.commit()
        await db.refresh(dimension)
        return {
            "message": "Dimension weight updated successfully",
            "data": DimensionWeightOut.model_validate(dimension),
        }

    except AppError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating dimension weight: {e}")


# --------------------------
# READ
# --------------------------
async def get_dimension_weight(db: AsyncSession, dimension_id: int) -> dict:
    dimension = await db.get(DimensionWeight, dimension_id)
    if not dimension:
        raise RecordNotFound("Dimension weight not found")
    return {"message": "Dimension weight fetched successfully", "data": DimensionWeightOut.model_validate(dimension)}


async def list_dimension_weights(
    db: AsyncSession,
    part_no: Optional[str] = None,
    min_weight: Optional[Decimal] = None,
    max_weight: Optional[Decimal] = None,
) -> dict:
    query = select(DimensionWeight)
    if part_no:
        query = query.where(DimensionWeight.part_no == part_no.strip().upper())
    if min_weight is not None:
        query = query.where(DimensionWeight.weight_kg >= min_weight)
    if max_weight is not None:
        query = query.where(DimensionWeight.weight_kg <= max_weight)
    result = await db.execute(query.order_by(DimensionWeight.created_at.desc(), DimensionWeight.id.desc()))
    return {
        "message": "Dimension weights fetched successfully",
        "data": [DimensionWeightOut.model_validate(d) for d in result.scalars().all()],
    }


# --------------------------
# DELETE (hard)
# --------------------------
async def delete_dimension_weight(db: AsyncSession, dimension_id: int, actor: Optional[str] = None) -> dict:
    try:
        dimension = await db.get(DimensionWeight, dimension_id)
        if not dimension:
            raise RecordNotFound("Dimension weight not found")

        await db.delete(dimension)
        await log_user_activity(db, username=actor, message=f"Deleted dimension weight for part '{dimension.part_no}'")
        await db.commit()
        return {"message": "Dimension weight deleted successfully"}

    except AppError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error deleting dimension weight: {e}")
