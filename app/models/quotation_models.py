# app/models/quotation_models.py
from decimal import Decimal
from sqlalchemy import (
    Column, Integer, String, ForeignKey, DateTime, JSON, Numeric, Text,
    Enum, CheckConstraint, Index, func
)
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.calculations.quotation import QuotationStatus, quotation_totals


# ==================================================
# QUOTATION MODEL
# ==================================================
class Quotation(Base):
    __tablename__ = "quotations"

    id = Column(Integer, primary_key=True, index=True)
    quotation_no = Column(String, unique=True, nullable=False, index=True)
    quotation_date = Column(DateTime(timezone=True), nullable=False)
    valid_till = Column(DateTime(timezone=True), nullable=False)

    # Company snapshot
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    company_name = Column(String, nullable=False)
    company_gstin = Column(String, nullable=False)
    company_state = Column(String, nullable=False)
    company_state_code = Column(Integer, nullable=False)

    # Customer snapshot
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    customer_name = Column(String, nullable=False)
    customer_gstin = Column(String, nullable=True)
    customer_state = Column(String, nullable=False)
    customer_state_code = Column(Integer, nullable=False)

    # GST & totals (derived)
    gst_type = Column(String, nullable=False)
    gst_percentage = Column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    cgst_percentage = Column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    sgst_percentage = Column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    igst_percentage = Column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    sub_total = Column(Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    gst_amount = Column(Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    grand_total = Column(Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    amount_in_words = Column(String, nullable=False, default="Zero Rupees Only")

    terms_conditions = Column(JSON, nullable=True)
    customer_remarks = Column(Text, nullable=True)
    internal_remarks = Column(Text, nullable=True)

    status = Column(
        Enum(QuotationStatus, name="quotation_status", values_callable=lambda e: [m.value for m in e]),
        default=QuotationStatus.DRAFT,
        nullable=False,
    )
    sent_at = Column(DateTime(timezone=True), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    status_changed_at = Column(DateTime(timezone=True), nullable=True)
    pdf_path = Column(String, nullable=True)

    # Audit fields
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    customer = relationship("Customer", back_populates="quotations")
    items = relationship(
        "QuotationItem",
        back_populates="quotation",
        cascade="all, delete-orphan",
        order_by="QuotationItem.line_no",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_quotation_customer_status", "customer_id", "status"),
    )

    # ----------------------
    # Total calculation
    # ----------------------
    def calculate_totals(self):
        totals = quotation_totals(
            [item.amount for item in self.items],
            self.gst_percentage or Decimal("0"),
            self.company_state_code,
            self.customer_state_code,
        )
        self.gst_type = totals.gst_type
        self.gst_percentage = totals.gst_percentage
        self.cgst_percentage = totals.gst.cgst
        self.sgst_percentage = totals.gst.sgst
        self.igst_percentage = totals.gst.igst
        self.sub_total = totals.sub_total
        self.gst_amount = totals.gst_amount
        self.grand_total = totals.grand_total
        self.amount_in_words = totals.amount_in_words
        return totals

    def __repr__(self):
        return f"<Quotation(id={self.id}, number='{self.quotation_no}', status='{self.status}')>"


# ==================================================
# QUOTATION ITEM MODEL
# ==================================================
class QuotationItem(Base):
    __tablename__ = "quotation_items"

    id = Column(Integer, primary_key=True, index=True)
    quotation_id = Column(Integer, ForeignKey("quotations.id", ondelete="CASCADE"), nullable=False)
    line_no = Column(Integer, nullable=False)
    part_no = Column(String, nullable=False)
    part_name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    hsn_code = Column(String, nullable=False)
    unit = Column(String, nullable=False, default="Nos")
    quantity = Column(Integer, nullable=False)
    unit_final_rate = Column(Numeric(12, 2), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="check_quotation_item_quantity"),
    )

    quotation = relationship("Quotation", back_populates="items")


# ==================================================
# QUOTATION NUMBER SEQUENCE (one row per year)
# ==================================================
class QuotationSequence(Base):
    __tablename__ = "quotation_sequences"

    year = Column(Integer, primary_key=True, autoincrement=False)
    last_value = Column(Integer, nullable=False, default=0)
