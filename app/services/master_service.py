# app/services/master_service.py
"""
Create / read / update for the master records the costing and quotation
engines consume: materials, items, processes, taxes, companies, customers and
terms & conditions.
"""
import logging
from typing import Optional

from fastapi import HTTPException
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.exceptions import (
    AppError, RecordNotFound, ItemNotFound, ItemInactive, TaxNotFound,
    CompanyNotFound, CustomerNotFound
)
from app.models import (
    Material, Item, Process, Tax, Company, Customer, TermsCondition
)
from app.schemas.master_schemas import (
    MaterialOut, ItemOut, ProcessOut, TaxOut, CompanyOut, CustomerOut, TermsConditionOut
)
from app.utils.activity_helpers import log_user_activity

logger = logging.getLogger(__name__)

MASTERS = {
    "material": (Material, MaterialOut),
    "item": (Item, ItemOut),
    "process": (Process, ProcessOut),
    "tax": (Tax, TaxOut),
    "company": (Company, CompanyOut),
    "customer": (Customer, CustomerOut),
    "terms": (TermsCondition, TermsConditionOut),
}


def _label(kind: str) -> str:
    return "Terms & condition" if kind == "terms" else kind.capitalize()


# ---------------------------------------------------
# Generic CRUD
# ---------------------------------------------------
async def create_master(db: AsyncSession, kind: str, data: BaseModel, actor: Optional[str] = None) -> dict:
    model, out_schema = MASTERS[kind]
    try:
        if kind == "item":
            material = await db.get(Material, data.material_id)
            if not material:
                raise RecordNotFound(f"Material {data.material_id} not found")

        record = model(**data.model_dump())
        db.add(record)
        await db.flush()

        await log_user_activity(db, username=actor, message=f"Created {_label(kind).lower()} (ID: {record.id})")
        await db.commit()
        await db.refresh(record)
        logger.info("Created %s id=%s", kind, record.id)
        return {"message": f"{_label(kind)} created successfully", "data": out_schema.model_validate(record)}

    except AppError:
        await db.rollback()
        raise
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=400, detail=f"{_label(kind)} already exists")
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error creating {kind}: {e}")


async def list_masters(db: AsyncSession, kind: str, active_only: bool = False) -> dict:
    model, out_schema = MASTERS[kind]
    query = select(model)
    if active_only:
        query = query.where(model.is_active == True)
    if kind == "terms":
        query = query.order_by(TermsCondition.sequence)
    else:
        query = query.order_by(model.id)
    result = await db.execute(query)
    records = result.unique().scalars().all()
    return {
        "message": f"{_label(kind)} records fetched successfully",
        "data": [out_schema.model_validate(r) for r in records],
    }


async def get_master(db: AsyncSession, kind: str, record_id: int) -> dict:
    model, out_schema = MASTERS[kind]
    record = await db.get(model, record_id)
    if not record:
        raise RecordNotFound(f"{_label(kind)} {record_id} not found")
    return {"message": f"{_label(kind)} fetched successfully", "data": out_schema.model_validate(record)}


async def update_master(db: AsyncSession, kind: str, record_id: int, data: BaseModel, actor: Optional[str] = None) -> dict:
    model, out_schema = MASTERS[kind]
    try:
        record = await db.get(model, record_id)
        if not record:
            raise RecordNotFound(f"{_label(kind)} {record_id} not found")

        changes = []
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None and getattr(record, field) != value:
                changes.append(f"{field}: {getattr(record, field)} → {value}")
                setattr(record, field, value)

        if changes:
            await log_user_activity(
                db, username=actor,
                message=f"Updated {_label(kind).lower()} (ID: {record.id}): " + ", ".join(changes)
            )
        await db.commit()
        await db.refresh(record)
        return {"message": f"{_label(kind)} updated successfully", "data": out_schema.model_validate(record)}

    except AppError:
        await db.rollback()
        raise
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=400, detail=f"{_label(kind)} update conflicts with an existing record")
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating {kind}: {e}")


# ---------------------------------------------------
# Lookups used by the costing and quotation services
# ---------------------------------------------------
async def get_item_by_part_no(db: AsyncSession, part_no: str, require_active: bool = True) -> Item:
    result = await db.execute(select(Item).where(Item.part_no == part_no.strip().upper()))
    item = result.unique().scalars().first()
    if not item:
        raise ItemNotFound(f"Item {part_no} not found")
    if require_active and not item.is_active:
        raise ItemInactive(f"Item {part_no} is inactive")
    return item


async def get_tax_for_hsn(db: AsyncSession, hsn_code: str) -> Tax:
    result = await db.execute(
        select(Tax).where(Tax.hsn_code == hsn_code, Tax.is_active == True)
    )
    tax = result.scalars().first()
    if not tax:
        raise TaxNotFound(f"Tax not found for HSN code {hsn_code}")
    return tax


async def get_active_company(db: AsyncSession) -> Company:
    result = await db.execute(
        select(Company).where(Company.is_active == True).order_by(Company.id)
    )
    company = result.scalars().first()
    if not company:
        raise CompanyNotFound()
    return company


async def get_active_customer(db: AsyncSession, customer_id: int) -> Customer:
    customer = await db.get(Customer, customer_id)
    if not customer or not customer.is_active:
        raise CustomerNotFound(f"Customer {customer_id} not found or inactive")
    return customer


async def get_active_terms(db: AsyncSession) -> list:
    result = await db.execute(
        select(TermsCondition)
        .where(TermsCondition.is_active == True)
        .order_by(TermsCondition.sequence, TermsCondition.id)
    )
    return result.scalars().all()
