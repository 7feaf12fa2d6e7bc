# app/routers/quotations_router.py
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.calculations.quotation import QuotationStatus
from app.core.db import get_db
from app.schemas.quotation_schema import (
    QuotationResponse,
    QuotationListResponse,
    QuotationCreate,
    QuotationUpdate,
    QuotationStatusUpdate,
    QuotationStatsResponse,
)
from app.schemas.response_schemas import MessageResponse, ResponseMessage
from app.services.quotation_service import (
    create_quotation,
    get_quotation,
    list_quotations,
    update_quotation,
    recalculate_quotation,
    delete_quotation,
    approve_quotation,
    send_quotation,
    change_quotation_status,
    expire_quotations,
    quotation_stats,
    generate_quotation_pdf,
)
from app.utils.get_user import get_actor

router = APIRouter(prefix="/quotations", tags=["Quotations"])


# --------------------------
# CREATE QUOTATION
# --------------------------
@router.post("", response_model=QuotationResponse, status_code=status.HTTP_201_CREATED)
async def create_quotation_route(
    data: QuotationCreate,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await create_quotation(db, data, actor)


# --------------------------
# LIST QUOTATIONS (Filtered)
# --------------------------
@router.get("", response_model=QuotationListResponse)
async def list_quotations_route(
    status: Optional[QuotationStatus] = Query(None),
    customer_id: Optional[int] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await list_quotations(
        db, status=status, customer_id=customer_id, start_date=start_date, end_date=end_date
    )


# --------------------------
# STATS
# --------------------------
@router.get("/stats", response_model=QuotationStatsResponse)
async def quotation_stats_route(
    year: Optional[int] = Query(None, ge=2000),
    db: AsyncSession = Depends(get_db),
):
    return await quotation_stats(db, year=year)


# --------------------------
# EXPIRE LAPSED QUOTATIONS
# --------------------------
@router.post("/expire", response_model=ResponseMessage[List[str]])
async def expire_quotations_route(
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await expire_quotations(db, actor=actor)


# --------------------------
# GET SINGLE QUOTATION BY ID
# --------------------------
@router.get("/{quotation_id}", response_model=QuotationResponse)
async def get_quotation_route(quotation_id: int, db: AsyncSession = Depends(get_db)):
    return await get_quotation(db, quotation_id)


# --------------------------
# UPDATE / RECALCULATE (Draft only)
# --------------------------
@router.put("/{quotation_id}", response_model=QuotationResponse)
async def update_quotation_route(
    quotation_id: int,
    data: QuotationUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await update_quotation(db, quotation_id, data, actor)


@router.post("/{quotation_id}/recalculate", response_model=QuotationResponse)
async def recalculate_quotation_route(
    quotation_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await recalculate_quotation(db, quotation_id, actor)


# --------------------------
# STATUS CHANGES
# --------------------------
@router.patch("/{quotation_id}/approve", response_model=QuotationResponse)
async def approve_quotation_route(
    quotation_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await approve_quotation(db, quotation_id, actor)


@router.patch("/{quotation_id}/send", response_model=QuotationResponse)
async def send_quotation_route(
    quotation_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await send_quotation(db, quotation_id, actor)


@router.patch("/{quotation_id}/status", response_model=QuotationResponse)
async def change_quotation_status_route(
    quotation_id: int,
    data: QuotationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await change_quotation_status(db, quotation_id, data.status, actor)


# --------------------------
# DELETE QUOTATION (Draft only)
# --------------------------
@router.delete("/{quotation_id}", response_model=MessageResponse)
async def delete_quotation_route(
    quotation_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    return await delete_quotation(db, quotation_id, actor)


# --------------------------
# GENERATE QUOTATION PDF
# --------------------------
@router.get("/{quotation_id}/pdf", response_class=FileResponse)
async def download_quotation_pdf(
    quotation_id: int,
    db: AsyncSession = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    file_path = await generate_quotation_pdf(db, quotation_id, actor)
    return FileResponse(
        file_path,
        media_type="application/pdf",
        filename=f"quotation_{quotation_id}.pdf"
    )
