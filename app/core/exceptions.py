# app/core/exceptions.py
"""
Typed failures raised by the calculation engines and the services.

Every error is a local, recoverable validation failure. The engines never
import FastAPI; ``main.py`` turns an ``AppError`` into a JSON response using
the ``status_code`` carried by the class.
"""


class AppError(Exception):
    status_code = 400
    default_detail = "Request could not be processed"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


# --------------------------
# Validation failures (400)
# --------------------------
class InvalidDimension(AppError):
    default_detail = "Dimensions must be greater than zero"


class InvalidRate(AppError):
    default_detail = "Invalid rate or percentage"


class InvalidCostingInput(AppError):
    default_detail = "Invalid costing input"


class InvalidStateCode(AppError):
    default_detail = "State code must be an integer between 1 and 37"


class InvalidAmount(AppError):
    default_detail = "Amount must be non-negative"


class InvalidLineItem(AppError):
    default_detail = "Invalid quotation line item"


class DimensionMissing(AppError):
    default_detail = "Dimension/Weight not found for this part. Please create dimension first."


class DimensionExists(AppError):
    default_detail = "Dimension weight already exists for this part"


class ItemInactive(AppError):
    default_detail = "Item is inactive"


class QuotationNotDraft(AppError):
    default_detail = "Only Draft quotations can be modified"


class InvalidStatusTransition(AppError):
    default_detail = "Status transition not allowed"


# --------------------------
# Lookup failures (404)
# --------------------------
class RecordNotFound(AppError):
    status_code = 404
    default_detail = "Record not found"


class RateNotFound(RecordNotFound):
    default_detail = "Raw material rate not found"


class ItemNotFound(RecordNotFound):
    default_detail = "Item not found"


class CostingNotFound(RecordNotFound):
    default_detail = "Costing not found"


class TaxNotFound(RecordNotFound):
    default_detail = "Tax not found"


class CompanyNotFound(RecordNotFound):
    default_detail = "Company not found. Please setup company first."


class CustomerNotFound(RecordNotFound):
    default_detail = "Customer not found"


class QuotationNotFound(RecordNotFound):
    default_detail = "Quotation not found"
