# app/services/quotation_service.py
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func, extract
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from app.calculations.quotation import (
    QuotationStatus, OPEN_STATUSES, ensure_draft, ensure_transition, line_amount, build_line,
    format_quotation_number, valid_till, first_line_gst_percentage, recompute_amounts
)
from app.core.config import QUOTATION_VALIDITY_DAYS
from app.core.exceptions import AppError, InvalidLineItem, QuotationNotFound, RecordNotFound
from app.models import Company, Quotation, QuotationItem, QuotationSequence
from app.schemas.quotation_schema import (
    QuotationCreate, QuotationUpdate, QuotationOut, QuotationStats, MonthlyQuotationStat
)
from app.services.costing_service import get_active_costing
from app.services.master_service import (
    get_item_by_part_no, get_tax_for_hsn, get_active_company, get_active_customer, get_active_terms
)
from app.services.quotation_pdf import render_quotation_pdf
from app.utils.activity_helpers import log_user_activity
from app.utils.decimal_utils import round_money

logger = logging.getLogger(__name__)


# --------------------------
# NUMBERING
# --------------------------
async def allocate_quotation_number(db: AsyncSession, year: int) -> str:
    """
    Next ``QT/<year>/<seq>`` number from the per-year counter row.

    A single upsert increments the row and returns the new value, so the row
    lock it takes orders concurrent creators. The increment belongs to the
    caller's transaction and is undone if the quotation is rolled back.
    """
    insert = pg_insert if db.bind.dialect.name == "postgresql" else sqlite_insert
    stmt = (
        insert(QuotationSequence)
        .values(year=year, last_value=1)
        .on_conflict_do_update(
            index_elements=[QuotationSequence.year],
            set_={"last_value": QuotationSequence.last_value + 1},
        )
        .returning(QuotationSequence.last_value)
    )
    result = await db.execute(stmt)
    return format_quotation_number(year, result.scalar_one())


# --------------------------
# HELPERS
# --------------------------
async def _load_quotation(db: AsyncSession, quotation_id: int) -> Quotation:
    result = await db.execute(
        select(Quotation)
        .options(selectinload(Quotation.items))
        .where(Quotation.id == quotation_id)
        .execution_options(populate_existing=True)
    )
    quotation = result.scalars().first()
    if not quotation:
        raise QuotationNotFound(f"Quotation {quotation_id} not found")
    return quotation


async def _build_line(db: AsyncSession, line_no: int, part_no: str, quantity: int):
    """Resolve one (part_no, quantity) pair into a priced line and its GST %."""
    item = await get_item_by_part_no(db, part_no)
    costing = await get_active_costing(db, item.part_no)
    tax = await get_tax_for_hsn(db, item.hsn_code)
    priced = build_line(item.part_no, quantity, costing.final_rate)

    line = QuotationItem(
        line_no=line_no,
        part_no=priced.part_no,
        part_name=item.part_name,
        description=item.description,
        hsn_code=item.hsn_code,
        unit=item.unit,
        quantity=priced.quantity,
        unit_final_rate=priced.unit_final_rate,
        amount=priced.amount,
    )
    return line, tax.gst_percentage


def _renumber(quotation: Quotation):
    for line_no, line in enumerate(quotation.items, start=1):
        line.line_no = line_no


def _response(message: str, quotation: Quotation) -> dict:
    return {"message": message, "data": QuotationOut.model_validate(quotation)}


# --------------------------
# CREATE QUOTATION
# --------------------------
async def create_quotation(db: AsyncSession, data: QuotationCreate, actor: Optional[str] = None) -> dict:
    try:
        if not data.items:
            raise InvalidLineItem("At least one item is required")

        company = await get_active_company(db)
        customer = await get_active_customer(db, data.customer_id)

        lines, gst_rates = [], []
        for line_no, item_data in enumerate(data.items, start=1):
            line, gst_rate = await _build_line(db, line_no, item_data.part_no, item_data.quantity)
            lines.append(line)
            gst_rates.append(gst_rate)

        terms = await get_active_terms(db)
        now = datetime.now(timezone.utc)

        quotation = Quotation(
            quotation_no=await allocate_quotation_number(db, now.year),
            quotation_date=now,
            valid_till=valid_till(now, QUOTATION_VALIDITY_DAYS),
            company_id=company.id,
            company_name=company.company_name,
            company_gstin=company.gstin,
            company_state=company.state,
            company_state_code=company.state_code,
            customer_id=customer.id,
            customer_name=customer.customer_name,
            customer_gstin=customer.gstin,
            customer_state=customer.state,
            customer_state_code=customer.state_code,
            gst_percentage=first_line_gst_percentage(gst_rates),
            terms_conditions=[{"title": t.title, "description": t.description} for t in terms],
            customer_remarks=data.customer_remarks,
            internal_remarks=data.internal_remarks,
            status=QuotationStatus.DRAFT,
            created_by=actor,
            updated_by=actor,
            items=lines,
        )
        quotation.calculate_totals()
        db.add(quotation)
        await db.flush()

        await log_user_activity(
            db, username=actor,
            message=(
                f"Created Quotation '{quotation.quotation_no}' for Customer '{customer.customer_name}' "
                f"with {len(lines)} items. Sub Total: ₹{quotation.sub_total:.2f}, "
                f"{quotation.gst_type}: ₹{quotation.gst_amount:.2f}, Grand Total: ₹{quotation.grand_total:.2f}."
            )
        )
        await db.commit()
        logger.info("Created quotation %s grand total %s", quotation.quotation_no, quotation.grand_total)

        return _response("Quotation created successfully", await _load_quotation(db, quotation.id))

    except AppError as e:
        await db.rollback()
        logger.warning("Quotation for customer %s rejected: %s", data.customer_id, e.detail)
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error creating quotation: {e}")


# --------------------------
# UPDATE QUOTATION (Draft only)
# --------------------------
async def update_quotation(db: AsyncSession, quotation_id: int, data: QuotationUpdate, actor: Optional[str] = None) -> dict:
    try:
        quotation = await _load_quotation(db, quotation_id)
        ensure_draft(quotation.status)

        if data.customer_remarks is not None:
            quotation.customer_remarks = data.customer_remarks
        if data.internal_remarks is not None:
            quotation.internal_remarks = data.internal_remarks

        if data.items:
            existing = {line.id: line for line in quotation.items}
            for item_data in data.items:
                if item_data.id:
                    line = existing.get(item_data.id)
                    if not line:
                        raise RecordNotFound(f"Quotation item with ID {item_data.id} not found")
                    if item_data.is_deleted:
                        quotation.items.remove(line)
                    elif item_data.quantity:
                        line.quantity = item_data.quantity
                        line.amount = line_amount(line.quantity, line.unit_final_rate)
                else:
                    if not item_data.part_no or not item_data.quantity:
                        raise InvalidLineItem("New quotation lines need part_no and quantity")
                    line, _ = await _build_line(
                        db, len(quotation.items) + 1, item_data.part_no, item_data.quantity
                    )
                    quotation.items.append(line)

            if not quotation.items:
                raise InvalidLineItem("A quotation must keep at least one item")
            _renumber(quotation)

            first_tax = await get_tax_for_hsn(db, quotation.items[0].hsn_code)
            quotation.gst_percentage = first_tax.gst_percentage

        quotation.calculate_totals()
        quotation.updated_by = actor

        await log_user_activity(
            db, username=actor,
            message=(
                f"Updated Quotation '{quotation.quotation_no}'. Items Count: {len(quotation.items)}, "
                f"Grand Total: ₹{quotation.grand_total:.2f}."
            )
        )
        await db.commit()
        return _response("Quotation updated successfully", await _load_quotation(db, quotation.id))

    except AppError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating quotation: {e}")


# --------------------------
# RECALCULATE (Draft only)
# --------------------------
async def recalculate_quotation(db: AsyncSession, quotation_id: int, actor: Optional[str] = None) -> dict:
    try:
        quotation = await _load_quotation(db, quotation_id)
        ensure_draft(quotation.status)

        for line, amount in zip(quotation.items, recompute_amounts(quotation.items)):
            line.amount = amount
        quotation.calculate_totals()
        quotation.updated_by = actor

        await db.commit()
        return _response("Quotation recalculated successfully", await _load_quotation(db, quotation.id))

    except AppError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error recalculating quotation: {e}")


# --------------------------
# STATUS CHANGES
# --------------------------
async def _change_status(db: AsyncSession, quotation_id: int, target: QuotationStatus, actor: Optional[str]) -> Quotation:
    try:
        quotation = await _load_quotation(db, quotation_id)
        previous = QuotationStatus(quotation.status)
        ensure_transition(previous, target)

        now = datetime.now(timezone.utc)
        quotation.status = target
        quotation.status_changed_at = now
        if target == QuotationStatus.APPROVED:
            quotation.approved_at = now
        elif target == QuotationStatus.SENT:
            quotation.sent_at = now
        quotation.updated_by = actor

        await log_user_activity(
            db, username=actor,
            message=(
                f"Quotation '{quotation.quotation_no}' moved from {previous.value} to {target.value}. "
                f"Grand Total: ₹{quotation.grand_total:.2f}."
            )
        )
        await db.commit()
        logger.info("Quotation %s: %s -> %s", quotation.quotation_no, previous.value, target.value)
        return await _load_quotation(db, quotation.id)

    except AppError as e:
        await db.rollback()
        logger.warning("Quotation %s status change to %s rejected: %s", quotation_id, target.value, e.detail)
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error updating quotation status: {e}")


async def approve_quotation(db: AsyncSession, quotation_id: int, actor: Optional[str] = None) -> dict:
    quotation = await _change_status(db, quotation_id, QuotationStatus.APPROVED, actor)
    return _response("Quotation approved successfully", quotation)


async def send_quotation(db: AsyncSession, quotation_id: int, actor: Optional[str] = None) -> dict:
    quotation = await _change_status(db, quotation_id, QuotationStatus.SENT, actor)
    return _response("Quotation marked as sent", quotation)


async def change_quotation_status(db: AsyncSession, quotation_id: int, status: str, actor: Optional[str] = None) -> dict:
    quotation = await _change_status(db, quotation_id, QuotationStatus(status), actor)
    return _response(f"Quotation status updated to {quotation.status.value}", quotation)


async def expire_quotations(db: AsyncSession, now: Optional[datetime] = None, actor: Optional[str] = None) -> dict:
    """Mark every Approved/Sent quotation whose validity has lapsed as Expired."""
    now = now or datetime.now(timezone.utc)
    try:
        result = await db.execute(
            select(Quotation).where(
                Quotation.status.in_(OPEN_STATUSES),
                Quotation.valid_till < now,
            )
        )
        expired = result.scalars().all()
        for quotation in expired:
            quotation.status = ensure_transition(quotation.status, QuotationStatus.EXPIRED)
            quotation.status_changed_at = now
            quotation.updated_by = actor

        if expired:
            await log_user_activity(
                db, username=actor,
                message="Expired quotations: " + ", ".join(q.quotation_no for q in expired)
            )
        await db.commit()
        logger.info("Expired %d quotation(s)", len(expired))
        return {
            "message": f"{len(expired)} quotation(s) expired",
            "data": [q.quotation_no for q in expired],
        }

    except AppError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error expiring quotations: {e}")


# --------------------------
# DELETE QUOTATION (Draft only)
# --------------------------
async def delete_quotation(db: AsyncSession, quotation_id: int, actor: Optional[str] = None) -> dict:
    try:
        quotation = await _load_quotation(db, quotation_id)
        ensure_draft(quotation.status)

        await db.delete(quotation)
        await log_user_activity(db, username=actor, message=f"Deleted Draft Quotation '{quotation.quotation_no}'")
        await db.commit()
        return {"message": "Quotation deleted successfully"}

    except AppError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        raise HTTPException(status_code=500, detail=f"Error deleting quotation: {e}")


# --------------------------
# READ
# --------------------------
async def get_quotation(db: AsyncSession, quotation_id: int) -> dict:
    return _response("Quotation retrieved successfully", await _load_quotation(db, quotation_id))


async def list_quotations(
    db: AsyncSession,
    status: Optional[QuotationStatus] = None,
    customer_id: Optional[int] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> dict:
    conditions = []
    if status:
        conditions.append(Quotation.status == status)
    if customer_id:
        conditions.append(Quotation.customer_id == customer_id)
    if start_date:
        conditions.append(Quotation.quotation_date >= start_date)
    if end_date:
        conditions.append(Quotation.quotation_date <= end_date)

    result = await db.execute(
        select(Quotation)
        .where(*conditions)
        .order_by(Quotation.quotation_date.desc(), Quotation.id.desc())
    )
    return {
        "message": "Quotations retrieved successfully",
        "data": [QuotationOut.model_validate(q) for q in result.scalars().all()],
    }


async def quotation_stats(db: AsyncSession, year: Optional[int] = None) -> dict:
    year = year or datetime.now(timezone.utc).year

    by_status_rows = await db.execute(
        select(Quotation.status, func.count(Quotation.id)).group_by(Quotation.status)
    )
    by_status = {QuotationStatus(s).value: count for s, count in by_status_rows.all()}

    month = extract("month", Quotation.quotation_date)
    monthly_rows = await db.execute(
        select(month, func.count(Quotation.id), func.sum(Quotation.grand_total))
        .where(extract("year", Quotation.quotation_date) == year)
        .group_by(month)
        .order_by(month)
    )
    monthly = [
        MonthlyQuotationStat(
            month=int(m),
            count=count,
            total_amount=round_money(Decimal(str(total or 0))),
        )
        for m, count, total in monthly_rows.all()
    ]

    return {
        "message": "Quotation statistics fetched successfully",
        "data": QuotationStats(total=sum(by_status.values()), by_status=by_status, monthly=monthly),
    }


# --------------------------
# PDF EXPORT
# --------------------------
async def generate_quotation_pdf(db: AsyncSession, quotation_id: int, actor: Optional[str] = None) -> str:
    quotation = await _load_quotation(db, quotation_id)
    company = await db.get(Company, quotation.company_id)

    file_path = render_quotation_pdf(quotation, company)
    quotation.pdf_path = file_path
    await log_user_activity(db, username=actor, message=f"Generated PDF for Quotation '{quotation.quotation_no}'")
    await db.commit()
    return file_path
