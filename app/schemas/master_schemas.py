# app/schemas/master_schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Optional, Literal

from pydantic import BaseModel, Field, field_validator

from app.calculations.costing import RATE_TYPES

UnitType = Literal["Nos", "Kg", "Meter", "Set", "Piece"]


def normalize_part_no(value: str) -> str:
    return value.strip().upper()


# --------------------------
# Material Schemas
# --------------------------
class MaterialCreate(BaseModel):
    material_code: str
    material_name: str
    description: Optional[str] = None
    density: Decimal = Field(default=Decimal("8.96"), gt=0)
    grade: Optional[str] = None

    @field_validator("material_code")
    def upper_code(cls, value):
        return value.strip().upper()


class MaterialUpdate(BaseModel):
    material_name: Optional[str] = None
    description: Optional[str] = None
    density: Optional[Decimal] = Field(default=None, gt=0)
    grade: Optional[str] = None
    is_active: Optional[bool] = None


class MaterialOut(BaseModel):
    id: int
    material_code: str
    material_name: str
    description: Optional[str]
    density: Decimal
    grade: Optional[str]
    is_active: bool

    class Config:
        from_attributes = True


# --------------------------
# Item Schemas
# --------------------------
class ItemCreate(BaseModel):
    part_no: str
    part_name: str
    description: Optional[str] = None
    drawing_no: Optional[str] = None
    revision_no: Optional[str] = "A"
    unit: UnitType = "Nos"
    hsn_code: str
    material_id: int

    @field_validator("part_no")
    def upper_part_no(cls, value):
        return normalize_part_no(value)


class ItemUpdate(BaseModel):
    part_name: Optional[str] = None
    description: Optional[str] = None
    drawing_no: Optional[str] = None
    revision_no: Optional[str] = None
    unit: Optional[UnitType] = None
    hsn_code: Optional[str] = None
    material_id: Optional[int] = None
    is_active: Optional[bool] = None


class ItemOut(BaseModel):
    id: int
    part_no: str
    part_name: str
    description: Optional[str]
    drawing_no: Optional[str]
    revision_no: Optional[str]
    unit: str
    hsn_code: str
    material_id: int
    is_active: bool

    class Config:
        from_attributes = True


# --------------------------
# Process Schemas
# --------------------------
class ProcessCreate(BaseModel):
    process_name: str
    rate_type: str
    rate: Decimal = Field(ge=0)
    vendor_or_inhouse: Literal["Vendor", "Inhouse"] = "Inhouse"
    description: Optional[str] = None

    @field_validator("rate_type")
    def known_rate_type(cls, value):
        if value not in RATE_TYPES:
            raise ValueError(f"rate_type must be one of {', '.join(RATE_TYPES)}")
        return value


class ProcessUpdate(BaseModel):
    rate: Optional[Decimal] = Field(default=None, ge=0)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class ProcessOut(BaseModel):
    id: int
    process_name: str
    rate_type: str
    rate: Decimal
    vendor_or_inhouse: str
    description: Optional[str]
    is_active: bool

    class Config:
        from_attributes = True


# --------------------------
# Tax Schemas
# --------------------------
class TaxCreate(BaseModel):
    hsn_code: str
    gst_percentage: Decimal = Field(ge=0, le=100)
    description: Optional[str] = None


class TaxUpdate(BaseModel):
    gst_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class TaxOut(BaseModel):
    id: int
    hsn_code: str
    gst_percentage: Decimal
    description: Optional[str]
    is_active: bool

    class Config:
        from_attributes = True


# --------------------------
# Company / Customer Schemas
# --------------------------
class CompanyCreate(BaseModel):
    company_name: str
    address: str
    gstin: str = Field(pattern=r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$")
    pan: Optional[str] = None
    state: str
    state_code: int = Field(ge=1, le=37)
    phone: Optional[str] = None
    email: Optional[str] = None
    bank_name: Optional[str] = None
    account_no: Optional[str] = None
    ifsc: Optional[str] = None


class CompanyUpdate(BaseModel):
    address: Optional[str] = None
    state: Optional[str] = None
    state_code: Optional[int] = Field(default=None, ge=1, le=37)
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: Optional[bool] = None


class CompanyOut(BaseModel):
    id: int
    company_name: str
    address: str
    gstin: str
    state: str
    state_code: int
    is_active: bool

    class Config:
        from_attributes = True


class CustomerCreate(BaseModel):
    customer_code: Optional[str] = None
    customer_name: str
    billing_address: Optional[str] = None
    shipping_address: Optional[str] = None
    gstin: Optional[str] = None
    state: str
    state_code: int = Field(ge=1, le=37)
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class CustomerUpdate(BaseModel):
    customer_name: Optional[str] = None
    billing_address: Optional[str] = None
    shipping_address: Optional[str] = None
    gstin: Optional[str] = None
    state: Optional[str] = None
    state_code: Optional[int] = Field(default=None, ge=1, le=37)
    is_active: Optional[bool] = None


class CustomerOut(BaseModel):
    id: int
    customer_code: Optional[str]
    customer_name: str
    gstin: Optional[str]
    state: str
    state_code: int
    is_active: bool

    class Config:
        from_attributes = True


# --------------------------
# Terms & Conditions
# --------------------------
class TermsConditionCreate(BaseModel):
    term_type: Optional[str] = None
    title: str
    description: str
    sequence: int = 0


class TermsConditionUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    sequence: Optional[int] = None
    is_active: Optional[bool] = None


class TermsConditionOut(BaseModel):
    id: int
    term_type: Optional[str]
    title: str
    description: str
    sequence: int
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


