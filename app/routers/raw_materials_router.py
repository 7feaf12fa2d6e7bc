# app/routers/raw_materials_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.raw_material_schemas import (
    RawMaterialRateCreate, RawMaterialRateUpdate, RawMaterialRateResponse, RawMaterialRateListResponse
)
from app.services.raw_material_service import create_rate, update_rate, list_rates, list_current_rates
from app.utils.get_user import get_actor

router = APIRouter(prefix="/raw-materials", tags=["Raw Material Rates"])


@router.post("", response_model=RawMaterialRateResponse, status_code=status.HTTP_201_CREATED)
async def create_rate_route(
    data: RawMaterialRateCreate,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await create_rate(db, data, actor)


@router.get("", response_model=RawMaterialRateListResponse)
async def list_rates_route(
    material_name: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await list_rates(db, material_name=material_name)


@router.get("/current-rates", response_model=RawMaterialRateListResponse)
async def current_rates_route(db: AsyncSession = Depends(get_db)):
    return await list_current_rates(db)


@router.put("/{rate_id}", response_model=RawMaterialRateResponse)
async def update_rate_route(
    rate_id: int,
    data: RawMaterialRateUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await update_rate(db, rate_id, data, actor)
