import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()

# -----------------------
# Database Config
# -----------------------
DB_TYPE = os.getenv("DB_TYPE", "sqlite").lower()

if DB_TYPE == "postgres":
    DATABASE_URL = os.getenv("DATABASE_URL")
    if not DATABASE_URL:
        raise ValueError("DATABASE_URL is required for Postgres setup")
elif DB_TYPE == "sqlite":
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./costing.db")
else:
    raise ValueError(f"Unsupported DB_TYPE: {DB_TYPE}")

# -----------------------
# Logging
# -----------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# -----------------------
# Costing defaults
# -----------------------
DEFAULT_DENSITY = Decimal(os.getenv("DEFAULT_DENSITY", "8.96"))  # copper, g/cm³
DEFAULT_OVERHEAD_PERCENTAGE = Decimal(os.getenv("DEFAULT_OVERHEAD_PERCENTAGE", "10"))
DEFAULT_MARGIN_PERCENTAGE = Decimal(os.getenv("DEFAULT_MARGIN_PERCENTAGE", "15"))

# -----------------------
# Quotation Config
# -----------------------
QUOTATION_VALIDITY_DAYS = int(os.getenv("QUOTATION_VALIDITY_DAYS", "30"))
QUOTATION_PDF_DIR = os.getenv("QUOTATION_PDF_DIR", "./generated/quotations")
