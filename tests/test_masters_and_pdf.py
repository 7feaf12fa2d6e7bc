"""
test_masters_and_pdf.py: Master record CRUD and quotation PDF rendering.
"""

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from app.core.exceptions import RecordNotFound, TaxNotFound, CompanyNotFound
from app.schemas.master_schemas import ItemCreate, ItemUpdate, MaterialCreate, TaxCreate
from app.services import master_service
from app.services.quotation_pdf import render_quotation_pdf


class TestMasterService:

    def test_item_part_no_is_normalised(self, run_db):
        async def scenario(db):
            material = await master_service.create_master(
                db, "material", MaterialCreate(material_code="cu-etp", material_name="Copper")
            )
            item = await master_service.create_master(
                db, "item",
                ItemCreate(part_no="  pn010 ", part_name="Strip", hsn_code="7409", material_id=material["data"].id),
            )
            return material["data"], item["data"]

        material, item = run_db(scenario)
        assert material.material_code == "CU-ETP"
        assert material.density == Decimal("8.96")
        assert item.part_no == "PN010"

    def test_item_needs_existing_material(self, run_db):
        async def scenario(db):
            await master_service.create_master(
                db, "item", ItemCreate(part_no="PN010", part_name="Strip", hsn_code="7409", material_id=99)
            )

        with pytest.raises(RecordNotFound):
            run_db(scenario)

    def test_duplicate_is_rejected(self, run_db):
        async def scenario(db):
            await master_service.create_master(db, "tax", TaxCreate(hsn_code="7409", gst_percentage=18))
            await master_service.create_master(db, "tax", TaxCreate(hsn_code="7409", gst_percentage=12))

        with pytest.raises(HTTPException) as exc:
            run_db(scenario)
        assert exc.value.status_code == 400

    def test_update_and_active_listing(self, run_db, seed):
        async def scenario(db):
            masters = await seed(db)
            await master_service.update_master(db, "item", masters["pn002"].id, ItemUpdate(is_active=False))
            return await master_service.list_masters(db, "item", active_only=True)

        assert [item.part_no for item in run_db(scenario)["data"]] == ["PN001"]

    def test_lookups_raise_typed_errors(self, run_db):
        async def scenario(db):
            errors = []
            for lookup in (master_service.get_tax_for_hsn(db, "0000"), master_service.get_active_company(db)):
                try:
                    await lookup
                except (TaxNotFound, CompanyNotFound) as e:
                    errors.append(type(e))
            return errors

        assert run_db(scenario) == [TaxNotFound, CompanyNotFound]


class TestQuotationPdf:

    def test_render(self, tmp_path):
        quotation = SimpleNamespace(
            quotation_no="QT/2026/0001",
            quotation_date=datetime(2026, 3, 1),
            valid_till=datetime(2026, 3, 31),
            company_name="Shree Ganesh Components",
            company_gstin="27AAAAA0000A1Z5",
            customer_name="Acme Switchgear",
            customer_state="Maharashtra",
            customer_state_code=27,
            customer_gstin=None,
            items=[SimpleNamespace(
                line_no=1, part_no="PN001", part_name="Busbar", hsn_code="7409", quantity=100,
                unit="Nos", unit_final_rate=Decimal("42.22"), amount=Decimal("4222.00"),
            )],
            gst_type="CGST+SGST",
            cgst_percentage=Decimal("9"),
            sgst_percentage=Decimal("9"),
            igst_percentage=Decimal("0"),
            sub_total=Decimal("4222.00"),
            grand_total=Decimal("4981.96"),
            amount_in_words="Four Thousand Nine Hundred Eighty One Rupees and Ninety Six Paise Only",
            terms_conditions=[{"title": "Payment", "description": "30 days"}],
            customer_remarks=None,
        )

        path = render_quotation_pdf(quotation, output_dir=str(tmp_path))
        assert path.endswith("QT_2026_0001.pdf")
        with open(path, "rb") as f:
            assert f.read(4) == b"%PDF"
