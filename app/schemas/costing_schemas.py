# app/schemas/costing_schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Dict

from pydantic import BaseModel, Field, field_validator

from app.schemas.master_schemas import normalize_part_no


# --------------------------
# Request Schemas
# --------------------------
class CostingCalculateRequest(BaseModel):
    part_no: Optional[str] = None
    rm_weight: Decimal
    rm_rate: Decimal
    process_cost: Decimal = Decimal("0")
    finishing_cost: Decimal = Decimal("0")
    packing_cost: Decimal = Decimal("0")
    overhead_percentage: Optional[Decimal] = None
    margin_percentage: Optional[Decimal] = None


class CostingCreate(BaseModel):
    part_no: str
    rm_rate: Optional[Decimal] = None          # manual override of the current RM rate
    process_cost: Optional[Decimal] = None     # summed from the process master when omitted
    finishing_cost: Decimal = Decimal("0")
    packing_cost: Decimal = Decimal("0")
    overhead_percentage: Optional[Decimal] = None
    margin_percentage: Optional[Decimal] = None

    @field_validator("part_no")
    def upper_part_no(cls, value):
        return normalize_part_no(value)


class CostingUpdate(BaseModel):
    rm_weight: Optional[Decimal] = None
    rm_rate: Optional[Decimal] = None
    process_cost: Optional[Decimal] = None
    finishing_cost: Optional[Decimal] = None
    packing_cost: Optional[Decimal] = None
    overhead_percentage: Optional[Decimal] = None
    margin_percentage: Optional[Decimal] = None
    is_active: Optional[bool] = None


# --------------------------
# Response Schemas
# --------------------------
class CostingBreakdown(BaseModel):
    rm_cost: Decimal
    sub_cost: Decimal
    overhead_cost: Decimal
    margin_cost: Decimal
    final_rate: Decimal


class CostingCalculationOut(BaseModel):
    inputs: Dict[str, Decimal]
    calculations: CostingBreakdown
    formulas: Dict[str, str] = Field(default_factory=dict)


class CostingOut(BaseModel):
    id: int
    item_id: int
    part_no: str
    rm_weight: Decimal
    rm_rate: Decimal
    process_cost: Decimal
    finishing_cost: Decimal
    packing_cost: Decimal
    overhead_percentage: Decimal
    margin_percentage: Decimal
    rm_cost: Decimal
    sub_cost: Decimal
    overhead_cost: Decimal
    margin_cost: Decimal
    final_rate: Decimal
    rate_source: Optional[str] = None
    process_source: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CostingMetadata(BaseModel):
    weight_source: str
    rate_source: str
    process_source: str
    dimension_details: Dict[str, Decimal] = Field(default_factory=dict)


class CostingResponse(BaseModel):
    message: str
    data: Optional[CostingOut] = None
    metadata: Optional[CostingMetadata] = None
    formulas: Optional[Dict[str, str]] = None


class CostingCalculationResponse(BaseModel):
    message: str
    data: CostingCalculationOut


class CostingListResponse(BaseModel):
    message: str
    data: List[CostingOut] = []
