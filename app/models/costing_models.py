# app/models/costing_models.py
from decimal import Decimal
from sqlalchemy import (
    Column, Integer, String, Boolean, ForeignKey, DateTime, Text,
    Numeric, CheckConstraint, Index, func
)
from sqlalchemy.orm import relationship
from app.core.db import Base


# --------------------------
# Raw material rate history
# --------------------------
class RawMaterialRate(Base):
    __tablename__ = "raw_material_rates"

    id = Column(Integer, primary_key=True, index=True)
    material_name = Column(String, nullable=False, index=True)
    grade = Column(String, nullable=False)
    rate_per_kg = Column(Numeric(12, 4), nullable=False)
    scrap_percentage = Column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    transport_loss_percentage = Column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    effective_rate = Column(Numeric(12, 4), nullable=False)
    effective_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(rate_per_kg >= 0, name="check_rm_rate_non_negative"),
        CheckConstraint("scrap_percentage BETWEEN 0 AND 100", name="check_rm_scrap_range"),
        CheckConstraint("transport_loss_percentage BETWEEN 0 AND 100", name="check_rm_loss_range"),
        Index("ix_rm_rate_material_active_date", "material_name", "is_active", "effective_date"),
    )


# --------------------------
# Process master
# --------------------------
class Process(Base):
    __tablename__ = "processes"

    id = Column(Integer, primary_key=True, index=True)
    process_name = Column(String, unique=True, nullable=False)
    rate_type = Column(String, nullable=False)  # Per Nos | Per Kg | Per Hour | Fixed
    rate = Column(Numeric(12, 2), nullable=False)
    vendor_or_inhouse = Column(String, nullable=False, default="Inhouse")
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(rate >= 0, name="check_process_rate_non_negative"),
    )


# --------------------------
# Costing
# --------------------------
class Costing(Base):
    __tablename__ = "costings"

    id = Column(Integer, primary_key=True, index=True)
    item_id = Column(Integer, ForeignKey("items.id"), nullable=False)
    part_no = Column(String, nullable=False, index=True)

    # Inputs
    rm_weight = Column(Numeric(12, 3), nullable=False)
    rm_rate = Column(Numeric(12, 4), nullable=False)
    process_cost = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    finishing_cost = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    packing_cost = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    overhead_percentage = Column(Numeric(5, 2), nullable=False, default=Decimal("10"))
    margin_percentage = Column(Numeric(5, 2), nullable=False, default=Decimal("15"))

    # Derived by the costing engine
    rm_cost = Column(Numeric(12, 2), nullable=False)
    sub_cost = Column(Numeric(12, 2), nullable=False)
    overhead_cost = Column(Numeric(12, 2), nullable=False)
    margin_cost = Column(Numeric(12, 2), nullable=False)
    final_rate = Column(Numeric(12, 2), nullable=False)

    # Where the inputs came from
    rate_source = Column(String, nullable=True)
    process_source = Column(String, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    item = relationship("Item", lazy="joined")

    __table_args__ = (
        Index("ix_costing_part_active", "part_no", "is_active"),
    )

    def apply_result(self, result):
        """Copy a CostingResult (and the inputs it was computed from) onto the row."""
        data = result.inputs
        self.rm_weight = data.weight_kg
        self.rm_rate = data.rm_rate
        self.process_cost = data.process_cost
        self.finishing_cost = data.finishing_cost
        self.packing_cost = data.packing_cost
        self.overhead_percentage = data.overhead_percentage
        self.margin_percentage = data.margin_percentage
        self.rm_cost = result.rm_cost
        self.sub_cost = result.sub_cost
        self.overhead_cost = result.overhead_cost
        self.margin_cost = result.margin_cost
        self.final_rate = result.final_rate
