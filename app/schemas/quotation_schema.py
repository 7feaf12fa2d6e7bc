# app/schemas/quotation_schema.py
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Dict, Literal
from datetime import datetime
from decimal import Decimal

from app.calculations.quotation import QuotationStatus
from app.schemas.master_schemas import normalize_part_no


# --------------------------
# Quotation Item Schemas
# --------------------------
class QuotationItemCreate(BaseModel):
    part_no: str
    quantity: int = Field(ge=1)

    @field_validator("part_no")
    def upper_part_no(cls, value):
        return normalize_part_no(value)


class QuotationItemOut(BaseModel):
    id: int
    line_no: int
    part_no: str
    part_name: str
    description: Optional[str]
    hsn_code: str
    unit: str
    quantity: int
    unit_final_rate: Decimal
    amount: Decimal

    class Config:
        from_attributes = True


class QuotationItemUpdate(BaseModel):
    id: Optional[int] = None           # existing line; omit to add a new one
    part_no: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=1)
    is_deleted: Optional[bool] = None

    @field_validator("part_no")
    def upper_part_no(cls, value):
        return normalize_part_no(value) if value else value


# --------------------------
# Quotation Schemas
# --------------------------
class QuotationCreate(BaseModel):
    customer_id: int                     # Mandatory
    items: List[QuotationItemCreate]     # Mandatory
    customer_remarks: Optional[str] = None
    internal_remarks: Optional[str] = None


class QuotationUpdate(BaseModel):
    customer_remarks: Optional[str] = None
    internal_remarks: Optional[str] = None
    items: Optional[List[QuotationItemUpdate]] = None


class QuotationStatusUpdate(BaseModel):
    status: Literal["Converted", "Expired", "Rejected", "Cancelled"]


class QuotationOut(BaseModel):
    id: int
    quotation_no: str
    quotation_date: datetime
    valid_till: datetime
    company_id: int
    company_name: str
    company_gstin: str
    company_state: str
    company_state_code: int
    customer_id: int
    customer_name: str
    customer_gstin: Optional[str]
    customer_state: str
    customer_state_code: int
    gst_type: str
    gst_percentage: Decimal
    cgst_percentage: Decimal
    sgst_percentage: Decimal
    igst_percentage: Decimal
    sub_total: Decimal
    gst_amount: Decimal
    grand_total: Decimal
    amount_in_words: str
    terms_conditions: Optional[List[Dict]] = None
    customer_remarks: Optional[str]
    internal_remarks: Optional[str]
    status: QuotationStatus
    sent_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    status_changed_at: Optional[datetime] = None
    pdf_path: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    items: List[QuotationItemOut] = []

    class Config:
        from_attributes = True


# --------------------------
# Response Schemas
# --------------------------
class QuotationResponse(BaseModel):
    message: Optional[str] = None
    data: Optional[QuotationOut] = None


class QuotationListResponse(BaseModel):
    message: str
    data: List[QuotationOut] = []


class MonthlyQuotationStat(BaseModel):
    month: int
    count: int
    total_amount: Decimal


class QuotationStats(BaseModel):
    total: int
    by_status: Dict[str, int]
    monthly: List[MonthlyQuotationStat] = []


class QuotationStatsResponse(BaseModel):
    message: str
    data: QuotationStats
