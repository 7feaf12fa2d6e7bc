# app/scripts/seed_masters.py
"""Load a minimal set of masters (company, customer, copper part PN001) into the configured database."""
import asyncio
from decimal import Decimal

from app.calculations.rates import effective_rate
from app.calculations.weight import calculate_weight
from app.core.db import AsyncSessionLocal, init_models
from app.models import (
    Company, Customer, Material, Item, DimensionWeight, RawMaterialRate, Tax, TermsCondition
)


async def seed_masters():
    await init_models()
    async with AsyncSessionLocal() as session:
        copper = Material(material_code="CU-ETP", material_name="Copper", density=Decimal("8.96"), grade="ETP")
        session.add_all([
            Company(
                company_name="Shree Ganesh Components",
                address="Plot 12, MIDC Bhosari, Pune",
                gstin="27AAAAA0000A1Z5",
                state="Maharashtra",
                state_code=27,
            ),
            Customer(customer_code="C001", customer_name="Acme Switchgear", state="Maharashtra", state_code=27),
            Customer(customer_code="C002", customer_name="Gujarat Electricals", state="Gujarat", state_code=24),
            copper,
            Tax(hsn_code="7409", gst_percentage=Decimal("18"), description="Copper plates, sheets and strip"),
            RawMaterialRate(
                material_name="Copper",
                grade="ETP",
                rate_per_kg=Decimal("150.75"),
                effective_rate=effective_rate(Decimal("150.75")),
            ),
            TermsCondition(title="Payment", description="30 days from date of invoice", sequence=1),
            TermsCondition(title="Delivery", description="Ex-works, 2 weeks from PO", sequence=2),
        ])
        await session.flush()

        session.add(Item(part_no="PN001", part_name="Busbar 5x50x100", unit="Nos", hsn_code="7409", material_id=copper.id))
        await session.flush()

        dimension = DimensionWeight(part_no="PN001")
        dimension.apply_weight(calculate_weight(5, 50, 100, copper.density))
        session.add(dimension)

        await session.commit()
        print("Master data seeded!")


if __name__ == "__main__":
    asyncio.run(seed_masters())
