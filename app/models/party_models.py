# app/models/party_models.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, CheckConstraint, func
from sqlalchemy.orm import relationship
from app.core.db import Base


class Company(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    company_name = Column(String, unique=True, nullable=False)
    address = Column(Text, nullable=False)
    gstin = Column(String, unique=True, nullable=False)
    pan = Column(String, nullable=True)
    state = Column(String, nullable=False)
    state_code = Column(Integer, nullable=False)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    bank_name = Column(String, nullable=True)
    account_no = Column(String, nullable=True)
    ifsc = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("state_code BETWEEN 1 AND 37", name="check_company_state_code"),
    )


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    customer_code = Column(String, unique=True, nullable=True)
    customer_name = Column(String, nullable=False)
    billing_address = Column(Text, nullable=True)
    shipping_address = Column(Text, nullable=True)
    gstin = Column(String, nullable=True)
    state = Column(String, nullable=False)
    state_code = Column(Integer, nullable=False)
    contact_person = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("state_code BETWEEN 1 AND 37", name="check_customer_state_code"),
    )

    quotations = relationship("Quotation", back_populates="customer")
