# app/routers/costings_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.costing_schemas import (
    CostingCalculateRequest, CostingCreate, CostingUpdate,
    CostingCalculationResponse, CostingResponse, CostingListResponse
)
from app.schemas.response_schemas import MessageResponse
from app.services.costing_service import (
    calculate, create_costing, update_costing, get_costing, list_costings, delete_costing
)
from app.utils.get_user import get_actor

router = APIRouter(prefix="/costings", tags=["Costing"])


# --------------------------
# CALCULATE (no save)
# --------------------------
@router.post("/calculate", response_model=CostingCalculationResponse)
async def calculate_costing_route(data: CostingCalculateRequest):
    return calculate(data)


# --------------------------
# CREATE (auto-sourced)
# --------------------------
@router.post("", response_model=CostingResponse, status_code=status.HTTP_201_CREATED)
async def create_costing_route(
    data: CostingCreate,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await create_costing(db, data, actor)


# --------------------------
# LIST
# --------------------------
@router.get("", response_model=CostingListResponse)
async def list_costings_route(
    part_no: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await list_costings(db, part_no=part_no, is_active=is_active)


# --------------------------
# GET / UPDATE / DELETE
# --------------------------
@router.get("/{costing_id}", response_model=CostingResponse)
async def get_costing_route(costing_id: int, db: AsyncSession = Depends(get_db)):
    return await get_costing(db, costing_id)


@router.put("/{costing_id}", response_model=CostingResponse)
async def update_costing_route(
    costing_id: int,
    data: CostingUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await update_costing(db, costing_id, data, actor)


@router.delete("/{costing_id}", response_model=MessageResponse)
async def delete_costing_route(
    costing_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await delete_costing(db, costing_id, actor)
