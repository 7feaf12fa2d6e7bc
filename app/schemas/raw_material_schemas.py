# app/schemas/raw_material_schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Optional, List

from pydantic import BaseModel, Field


class RawMaterialRateCreate(BaseModel):
    material_name: str
    grade: str
    rate_per_kg: Decimal = Field(ge=0)
    scrap_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    transport_loss_percentage: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    effective_date: Optional[datetime] = None


class RawMaterialRateUpdate(BaseModel):
    grade: Optional[str] = None
    rate_per_kg: Optional[Decimal] = Field(default=None, ge=0)
    scrap_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    transport_loss_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    effective_date: Optional[datetime] = None
    is_active: Optional[bool] = None


class RawMaterialRateOut(BaseModel):
    id: int
    material_name: str
    grade: str
    rate_per_kg: Decimal
    scrap_percentage: Decimal
    transport_loss_percentage: Decimal
    effective_rate: Decimal
    effective_date: datetime
    is_active: bool

    class Config:
        from_attributes = True


class RawMaterialRateResponse(BaseModel):
    message: str
    data: Optional[RawMaterialRateOut] = None


class RawMaterialRateListResponse(BaseModel):
    message: str
    data: List[RawMaterialRateOut] = []
