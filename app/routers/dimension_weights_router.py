# app/routers/dimension_weights_router.py
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.dimension_schemas import (
    WeightCalculateRequest, DimensionWeightCreate, DimensionWeightUpdate,
    WeightCalculationResponse, DimensionWeightResponse, DimensionWeightListResponse
)
from app.schemas.response_schemas import MessageResponse
from app.services.dimension_service import (
    calculate, create_dimension_weight, update_dimension_weight,
    get_dimension_weight, list_dimension_weights, delete_dimension_weight
)
from app.utils.get_user import get_actor

router = APIRouter(prefix="/dimension-weights", tags=["Dimension & Weight"])


# --------------------------
# CALCULATE (no save)
# --------------------------
@router.post("/calculate", response_model=WeightCalculationResponse)
async def calculate_weight_route(data: WeightCalculateRequest):
    return calculate(data)


# --------------------------
# CREATE
# --------------------------
@router.post("", response_model=DimensionWeightResponse, status_code=status.HTTP_201_CREATED)
async def create_dimension_weight_route(
    data: DimensionWeightCreate,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await create_dimension_weight(db, data, actor)


# --------------------------
# LIST
# --------------------------
@router.get("", response_model=DimensionWeightListResponse)
async def list_dimension_weights_route(
    part_no: Optional[str] = Query(None),
    min_weight: Optional[Decimal] = Query(None, ge=0),
    max_weight: Optional[Decimal] = Query(None, ge=0),
    db: AsyncSession = Depends(get_db),
):
    return await list_dimension_weights(db, part_no=part_no, min_weight=min_weight, max_weight=max_weight)


# --------------------------
# GET / UPDATE / DELETE
# --------------------------
@router.get("/{dimension_id}", response_model=DimensionWeightResponse)
async def get_dimension_weight_route(dimension_id: int, db: AsyncSession = Depends(get_db)):
    return await get_dimension_weight(db, dimension_id)


@router.put("/{dimension_id}", response_model=DimensionWeightResponse)
async def update_dimension_weight_route(
    dimension_id: int,
    data: DimensionWeightUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await update_dimension_weight(db, dimension_id, data, actor)


@router.delete("/{dimension_id}", response_model=MessageResponse)
async def delete_dimension_weight_route(
    dimension_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await delete_dimension_weight(db, dimension_id, actor)
