# app/services/quotation_pdf.py
import os
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from app.calculations.gst import GstSplit, GST_TYPE_IGST, gst_component_amounts
from app.core.config import QUOTATION_PDF_DIR


def _money(value) -> str:
    return f"Rs. {value:,.2f}"


def render_quotation_pdf(quotation, company=None, output_dir: str = QUOTATION_PDF_DIR) -> str:
    """Write the quotation to ``<output_dir>/<number>.pdf`` and return the path."""
    os.makedirs(output_dir, exist_ok=True)
    file_path = os.path.join(output_dir, f"{quotation.quotation_no.replace('/', '_')}.pdf")

    styles = getSampleStyleSheet()
    doc = SimpleDocTemplate(file_path, pagesize=A4)
    elements = []

    # Header
    elements.append(Paragraph(f"<b>{escape(quotation.company_name)}</b>", styles["Title"]))
    if company is not None:
        elements.append(Paragraph(escape(company.address or ""), styles["Normal"]))
    elements.append(Paragraph(f"GSTIN: {quotation.company_gstin}", styles["Normal"]))
    elements.append(Spacer(1, 12))
    elements.append(Paragraph("<b>QUOTATION</b>", styles["Heading2"]))
    elements.append(Paragraph(
        f"No: {quotation.quotation_no} &nbsp;&nbsp; Date: {quotation.quotation_date:%d-%m-%Y} "
        f"&nbsp;&nbsp; Valid till: {quotation.valid_till:%d-%m-%Y}",
        styles["Normal"],
    ))
    elements.append(Spacer(1, 8))
    elements.append(Paragraph(f"<b>To:</b> {escape(quotation.customer_name)}", styles["Normal"]))
    elements.append(Paragraph(
        f"{quotation.customer_state} (State Code: {quotation.customer_state_code})"
        + (f" &nbsp; GSTIN: {quotation.customer_gstin}" if quotation.customer_gstin else ""),
        styles["Normal"],
    ))
    elements.append(Spacer(1, 12))

    # Line items
    rows = [["#", "Part No", "Description", "HSN", "Qty", "Unit", "Rate", "Amount"]]
    for line in quotation.items:
        rows.append([
            line.line_no, line.part_no, line.part_name, line.hsn_code,
            line.quantity, line.unit, _money(line.unit_final_rate), _money(line.amount),
        ])
    items_table = Table(rows, repeatRows=1)
    items_table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("ALIGN", (4, 1), (-1, -1), "RIGHT"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
    ]))
    elements.append(items_table)
    elements.append(Spacer(1, 12))

    # Totals
    split = GstSplit(
        gst_type=quotation.gst_type,
        cgst=quotation.cgst_percentage,
        sgst=quotation.sgst_percentage,
        igst=quotation.igst_percentage,
    )
    components = gst_component_amounts(split, quotation.sub_total)
    totals = [["Sub Total", _money(quotation.sub_total)]]
    if quotation.gst_type == GST_TYPE_IGST:
        totals.append([f"IGST @ {split.igst}%", _money(components["igst_amount"])])
    else:
        totals.append([f"CGST @ {split.cgst}%", _money(components["cgst_amount"])])
        totals.append([f"SGST @ {split.sgst}%", _money(components["sgst_amount"])])
    totals.append(["Grand Total", _money(quotation.grand_total)])

    totals_table = Table(totals, hAlign="RIGHT")
    totals_table.setStyle(TableStyle([
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("LINEABOVE", (0, -1), (-1, -1), 1, colors.black),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
    ]))
    elements.append(totals_table)
    elements.append(Spacer(1, 8))
    elements.append(Paragraph(f"<b>Amount in words:</b> {quotation.amount_in_words}", styles["Normal"]))

    if quotation.terms_conditions:
        elements.append(Spacer(1, 12))
        elements.append(Paragraph("<b>Terms &amp; Conditions</b>", styles["Heading4"]))
        for number, term in enumerate(quotation.terms_conditions, start=1):
            elements.append(Paragraph(f"{number}. <b>{escape(term['title'])}</b>: {escape(term['description'] or '')}", styles["Normal"]))

    if quotation.customer_remarks:
        elements.append(Spacer(1, 8))
        elements.append(Paragraph(f"<b>Remarks:</b> {escape(quotation.customer_remarks)}", styles["Normal"]))

    doc.build(elements)
    return file_path
