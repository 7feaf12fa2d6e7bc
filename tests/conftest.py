"""
conftest.py: Shared pytest fixtures for the costing & quotation test suite.

Pure engine tests need no fixtures. Service tests run against a fresh
in-memory SQLite database per test: ``run_db`` creates the schema, opens one
``AsyncSession`` and drives the test's coroutine with ``asyncio.run``.

Import-path bootstrapping:
    The repository root is inserted into sys.path so that ``app.*`` and
    ``main`` resolve regardless of where pytest is invoked.
"""

import asyncio
import os
import sys
from datetime import datetime, timezone
from decimal import Decimal

import pytest

_ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

os.environ.setdefault("DB_TYPE", "sqlite")


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def run_db():
    """
    Return ``run(scenario)`` which awaits ``scenario(session)`` against a new
    in-memory database and hands back its result.
    """
    from sqlalchemy import event
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
    from sqlalchemy.orm import sessionmaker
    from sqlalchemy.pool import StaticPool

    from app.core.db import init_models, enable_sqlite_foreign_keys

    def run(scenario):
        async def _main():
            engine = create_async_engine(
                "sqlite+aiosqlite://",
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
            event.listen(engine.sync_engine, "connect", enable_sqlite_foreign_keys)
            await init_models(engine)
            session_factory = sessionmaker(
                bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False
            )
            try:
                async with session_factory() as session:
                    return await scenario(session)
            finally:
                await engine.dispose()

        return asyncio.run(_main())

    return run


async def _seed(db, rate_per_kg=Decimal("150.75"), with_dimension=True):
    """
    Masters for the PN001 copper busbar:
      company in Maharashtra (27), one local and one Gujarat (24) customer,
      copper at 8.96 g/cm³, HSN 7409 at 18 %, rate 150.75/kg with no scrap/loss,
      dimensions 5 × 50 × 100 mm (0.224 kg).
    """
    from app.calculations.rates import effective_rate
    from app.calculations.weight import calculate_weight
    from app.models import (
        Company, Customer, Material, Item, DimensionWeight, RawMaterialRate, Tax, TermsCondition
    )

    company = Company(
        company_name="Shree Ganesh Components", address="MIDC Bhosari, Pune",
        gstin="27AAAAA0000A1Z5", state="Maharashtra", state_code=27,
    )
    local = Customer(customer_code="C001", customer_name="Acme Switchgear", state="Maharashtra", state_code=27)
    outstation = Customer(customer_code="C002", customer_name="Gujarat Electricals", state="Gujarat", state_code=24)
    copper = Material(material_code="CU-ETP", material_name="Copper", density=Decimal("8.96"))
    db.add_all([
        company, local, outstation, copper,
        Tax(hsn_code="7409", gst_percentage=Decimal("18")),
        Tax(hsn_code="8536", gst_percentage=Decimal("28")),
        TermsCondition(title="Delivery", description="Ex-works", sequence=2),
        TermsCondition(title="Payment", description="30 days", sequence=1),
    ])
    if rate_per_kg is not None:
        db.add(RawMaterialRate(
            material_name="Copper", grade="ETP", rate_per_kg=rate_per_kg,
            effective_rate=effective_rate(rate_per_kg),
            effective_date=datetime(2026, 1, 1, tzinfo=timezone.utc),
        ))
    await db.flush()

    pn001 = Item(part_no="PN001", part_name="Busbar 5x50x100", hsn_code="7409", material_id=copper.id)
    pn002 = Item(part_no="PN002", part_name="Terminal lug", hsn_code="8536", material_id=copper.id)
    db.add_all([pn001, pn002])
    await db.flush()

    if with_dimension:
        for part_no in ("PN001", "PN002"):
            dimension = DimensionWeight(part_no=part_no)
            dimension.apply_weight(calculate_weight(5, 50, 100, Decimal("8.96")))
            db.add(dimension)

    await db.commit()
    return {
        "company": company, "local": local, "outstation": outstation,
        "copper": copper, "pn001": pn001, "pn002": pn002,
    }


@pytest.fixture
def seed():
    """Async callable seeding the PN001 masters into a session."""
    return _seed
