# app/schemas/dimension_schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Optional, List

from pydantic import BaseModel, Field, field_validator

from app.schemas.master_schemas import normalize_part_no


class WeightCalculateRequest(BaseModel):
    thickness: Decimal
    width: Decimal
    length: Decimal
    density: Optional[Decimal] = None


class DimensionWeightCreate(BaseModel):
    part_no: str
    thickness: Decimal
    width: Decimal
    length: Decimal
    density: Optional[Decimal] = None  # falls back to the item's material density

    @field_validator("part_no")
    def upper_part_no(cls, value):
        return normalize_part_no(value)


class DimensionWeightUpdate(BaseModel):
    thickness: Optional[Decimal] = None
    width: Optional[Decimal] = None
    length: Optional[Decimal] = None
    density: Optional[Decimal] = None


class WeightCalculationOut(BaseModel):
    thickness: Decimal
    width: Decimal
    length: Decimal
    density: Decimal
    volume_mm3: Decimal
    weight_kg: Decimal
    formula_details: dict = Field(default_factory=dict)


class DimensionWeightOut(BaseModel):
    id: int
    part_no: str
    thickness: Decimal
    width: Decimal
    length: Decimal
    density: Decimal
    volume_mm3: Decimal
    weight_kg: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WeightCalculationResponse(BaseModel):
    message: str
    data: WeightCalculationOut


class DimensionWeightResponse(BaseModel):
    message: str
    data: Optional[DimensionWeightOut] = None


class DimensionWeightListResponse(BaseModel):
    message: str
    data: List[DimensionWeightOut] = []
