# app/models/tax_models.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, Numeric, CheckConstraint, func
from app.core.db import Base


class Tax(Base):
    __tablename__ = "taxes"

    id = Column(Integer, primary_key=True, index=True)
    hsn_code = Column(String, unique=True, nullable=False, index=True)
    gst_percentage = Column(Numeric(5, 2), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("gst_percentage BETWEEN 0 AND 100", name="check_tax_gst_range"),
    )


class TermsCondition(Base):
    __tablename__ = "terms_conditions"

    id = Column(Integer, primary_key=True, index=True)
    term_type = Column(String, nullable=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    sequence = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
