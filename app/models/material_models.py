# app/models/material_models.py
from decimal import Decimal
from sqlalchemy import (
    Column, Integer, String, Boolean, ForeignKey, DateTime, Text,
    Numeric, CheckConstraint, func
)
from sqlalchemy.orm import relationship
from app.core.db import Base


# --------------------------
# Material
# --------------------------
class Material(Base):
    __tablename__ = "materials"

    id = Column(Integer, primary_key=True, index=True)
    material_code = Column(String, unique=True, nullable=False, index=True)
    material_name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    density = Column(Numeric(8, 3), nullable=False, default=Decimal("8.96"))  # g/cm³
    grade = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(density > 0, name="check_material_density_positive"),
    )

    items = relationship("Item", back_populates="material")


# --------------------------
# Item (part master)
# --------------------------
class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    part_no = Column(String, unique=True, nullable=False, index=True)
    part_name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    drawing_no = Column(String, nullable=True)
    revision_no = Column(String, nullable=True, default="A")
    unit = Column(String, nullable=False, default="Nos")
    hsn_code = Column(String, nullable=False, index=True)
    material_id = Column(Integer, ForeignKey("materials.id"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    material = relationship("Material", back_populates="items", lazy="joined")


# --------------------------
# Dimension / Weight (one per part)
# --------------------------
class DimensionWeight(Base):
    __tablename__ = "dimension_weights"

    id = Column(Integer, primary_key=True, index=True)
    part_no = Column(String, ForeignKey("items.part_no"), unique=True, nullable=False, index=True)
    thickness = Column(Numeric(12, 3), nullable=False)
    width = Column(Numeric(12, 3), nullable=False)
    length = Column(Numeric(12, 3), nullable=False)
    density = Column(Numeric(8, 3), nullable=False, default=Decimal("8.96"))

    # Derived by the weight engine; never written directly by callers
    volume_mm3 = Column(Numeric(18, 3), nullable=False)
    weight_kg = Column(Numeric(12, 3), nullable=False)

    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(thickness > 0, name="check_dimension_thickness_positive"),
        CheckConstraint(width > 0, name="check_dimension_width_positive"),
        CheckConstraint(length > 0, name="check_dimension_length_positive"),
        CheckConstraint(density > 0, name="check_dimension_density_positive"),
    )

    def apply_weight(self, result):
        """Copy a WeightResult onto the row."""
        self.thickness = result.thickness
        self.width = result.width
        self.length = result.length
        self.density = result.density
        self.volume_mm3 = result.volume_mm3
        self.weight_kg = result.weight_kg
