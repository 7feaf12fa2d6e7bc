# app/models/__init__.py
from app.models.activity_models import UserActivity
from app.models.material_models import Material, Item, DimensionWeight
from app.models.costing_models import RawMaterialRate, Process, Costing
from app.models.party_models import Company, Customer
from app.models.tax_models import Tax, TermsCondition
from app.models.quotation_models import Quotation, QuotationItem, QuotationSequence
