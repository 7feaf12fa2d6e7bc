# app/services/raw_material_service.py
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.calculations.rates import effective_rate, select_current_rate, current_rates
from app.core.exceptions import AppError, RecordNotFound
from app.models import RawMaterialRate
from app.schemas.raw_material_schemas import (
    RawMaterialRateCreate, RawMaterialRateUpdate, RawMaterialRateOut
)
from app.utils.activity_helpers import log_user_activity

logger = logging.getLogger(__name__)


async def get_current_rate(db: AsyncSession, material_name: str) -> RawMaterialRate:
    """Latest active rate for a material; raises RateNotFound when there is none."""
    result = await db.execute(
        select(RawMaterialRate).where(
            func.lower(RawMaterialRate.material_name) == material_name.lower(),
            RawMaterialRate.is_active == True,
        ).execution_options(populate_existing=True)
    )
    return select_current_rate(result.scalars().all(), material_name)


# --------------------------
# CREATE
# --------------------------
async def create_rate(db: AsyncSession, data: RawMaterialRateCreate, actor: Optional[str] = None) -> dict:
    try:
        rate = RawMaterialRate(
            material_name=data.material_name,
            grade=data.grade,
            rate_per_kg=data.rate_per_kg,
            scrap_percentage=data.scrap_percentage,
            transport_loss_percentage=data.transport_loss_percentage,
            effective_rate=effective_rate(
                data.rate_per_kg, data.scrap_percentage, data.transport_loss_percentage
            ),
            effective_date=data.effective_date or datetime.now(timezone.utc),
        )
        db.add(rate)
        await db.flush()

        await log_user_activity(
            db, username=actor,
            message=(
                f"Added {rate.material_name} ({rate.grade}) rate ₹{rate.rate_per_kg}/kg, "
                f"effective ₹{rate.effective_rate:.2f}/kg"
            )
        )
        await db.commit()
        await db.refresh(rate)
        logger.info("Raw material rate %s/%s = %s", rate.material_name, rate.grade, rate.effective_rate)
        return {"message": "Raw material rate created successfully", "data": RawMaterialRateOut.model_validate(rate)}

    except AppError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error creating raw material rate: {e}")


# --------------------------
# UPDATE (recomputes effective rate)
# --------------------------
async def update_rate(db: AsyncSession, rate_id: int, data: RawMaterialRateUpdate, actor: Optional[str] = None) -> dict:
    try:
        rate = await db.get(RawMaterialRate, rate_id)
        if not rate:
            raise RecordNotFound("Raw material rate not found")

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(rate, field, value)
        rate.effective_rate = effective_rate(
            rate.rate_per_kg, rate.scrap_percentage, rate.transport_loss_percentage
        )

        await log_user_activity(db, username=actor, message=f"Updated raw material rate (ID: {rate.id})")
        await db.commit()
        await db.refresh(rate)
        return {"message": "Raw material rate updated successfully", "data": RawMaterialRateOut.model_validate(rate)}

    except AppError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating raw material rate: {e}")


# --------------------------
# READ
# --------------------------
async def list_rates(db: AsyncSession, material_name: Optional[str] = None) -> dict:
    query = select(RawMaterialRate)
    if material_name:
        query = query.where(RawMaterialRate.material_name == material_name)
    result = await db.execute(
        query.order_by(RawMaterialRate.material_name, RawMaterialRate.effective_date.desc())
    )
    return {
        "message": "Raw material rates fetched successfully",
        "data": [RawMaterialRateOut.model_validate(r) for r in result.scalars().all()],
    }


async def list_current_rates(db: AsyncSession) -> dict:
    result = await db.execute(
        select(RawMaterialRate)
        .where(RawMaterialRate.is_active == True)
        .execution_options(populate_existing=True)
    )
    return {
        "message": "Current raw material rates fetched successfully",
        "data": [RawMaterialRateOut.model_validate(r) for r in current_rates(result.scalars().all())],
    }
