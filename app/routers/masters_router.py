# app/routers/masters_router.py
from typing import List, Optional, Type

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.master_schemas import (
    MaterialCreate, MaterialUpdate, MaterialOut,
    ItemCreate, ItemUpdate, ItemOut,
    ProcessCreate, ProcessUpdate, ProcessOut,
    TaxCreate, TaxUpdate, TaxOut,
    CompanyCreate, CompanyUpdate, CompanyOut,
    CustomerCreate, CustomerUpdate, CustomerOut,
    TermsConditionCreate, TermsConditionUpdate, TermsConditionOut,
)
from app.schemas.response_schemas import ResponseMessage
from app.services.master_service import create_master, list_masters, get_master, update_master
from app.utils.get_user import get_actor


def build_master_router(
    kind: str,
    prefix: str,
    tag: str,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    out_schema: Type[BaseModel],
) -> APIRouter:
    """Create / list / get / update routes for one master table."""
    router = APIRouter(prefix=prefix, tags=[tag])

    # --------------------------
    # CREATE
    # --------------------------
    @router.post("", response_model=ResponseMessage[out_schema], status_code=status.HTTP_201_CREATED)
    async def create_route(
        data: create_schema,
        db: AsyncSession = Depends(get_db),
        actor: Optional[str] = Depends(get_actor),
    ):
        return await create_master(db, kind, data, actor)

    # --------------------------
    # LIST
    # --------------------------
    @router.get("", response_model=ResponseMessage[List[out_schema]])
    async def list_route(
        active_only: bool = Query(False),
        db: AsyncSession = Depends(get_db),
    ):
        return await list_masters(db, kind, active_only=active_only)

    # --------------------------
    # GET BY ID
    # --------------------------
    @router.get("/{record_id}", response_model=ResponseMessage[out_schema])
    async def get_route(record_id: int, db: AsyncSession = Depends(get_db)):
        return await get_master(db, kind, record_id)

    # --------------------------
    # UPDATE
    # --------------------------
    @router.put("/{record_id}", response_model=ResponseMessage[out_schema])
    async def update_route(
        record_id: int,
        data: update_schema,
        db: AsyncSession = Depends(get_db),
        actor: Optional[str] = Depends(get_actor),
    ):
        return await update_master(db, kind, record_id, data, actor)

    return router


router = APIRouter()

router.include_router(build_master_router("material", "/materials", "Materials", MaterialCreate, MaterialUpdate, MaterialOut))
router.include_router(build_master_router("item", "/items", "Items", ItemCreate, ItemUpdate, ItemOut))
router.include_router(build_master_router("process", "/processes", "Processes", ProcessCreate, ProcessUpdate, ProcessOut))
router.include_router(build_master_router("tax", "/taxes", "Taxes", TaxCreate, TaxUpdate, TaxOut))
router.include_router(build_master_router("company", "/companies", "Companies", CompanyCreate, CompanyUpdate, CompanyOut))
router.include_router(build_master_router("customer", "/customers", "Customers", CustomerCreate, CustomerUpdate, CustomerOut))
router.include_router(
    build_master_router("terms", "/terms", "Terms & Conditions", TermsConditionCreate, TermsConditionUpdate, TermsConditionOut)
)
