"""
PDF generation utilities using ReportLab.
"""

import io
from datetime import datetime
from decimal import Decimal
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle


def _money(value) -> str:
    return f"{Decimal(str(value or 0)):,.2f}"


def _label(value) -> str:
    return str(getattr(value, "value", value) or "-")


def _text(value, default: str = "-") -> str:
    """Escape user-entered text for Paragraph markup."""
    return escape(str(value)) if value not in (None, "") else default


def generate_invoice_pdf(
    invoice: dict,
    company_name: str,
    generated_at: Optional[datetime] = None,
) -> bytes:
    """
    Render an order invoice.

    ``invoice`` is the JSON invoice document (order fields plus ``user``,
    ``region`` and ``order_items``). Returns PDF as bytes for download.
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=0.75 * inch,
        leftMargin=0.75 * inch,
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
        title=f"Invoice {invoice['order_number']}",
    )

    styles = getSampleStyleSheet()
    elements = []

    # Custom styles
    title_style = ParagraphStyle(
        "InvoiceTitle",
        parent=styles["Heading1"],
        fontSize=22,
        textColor=colors.HexColor("#15803d"),
        spaceAfter=6,
    )
    heading_style = ParagraphStyle(
        "InvoiceHeading",
        parent=styles["Heading2"],
        fontSize=12,
        textColor=colors.HexColor("#1e293b"),
        spaceBefore=14,
        spaceAfter=6,
    )
    normal_style = styles["Normal"]
    cell_style = ParagraphStyle("InvoiceCell", parent=normal_style, fontSize=9)

    # Header
    elements.append(Paragraph(_text(company_name), title_style))
    elements.append(Paragraph("Tax Invoice", styles["Heading2"]))

    region = invoice.get("region") or {}
    if region:
        contact = " | ".join(
            part
            for part in (
                _text(region.get("name"), ""),
                _text(region.get("support_email"), ""),
                _text(region.get("support_phone"), ""),
            )
            if part
        )
        elements.append(Paragraph(contact, normal_style))
    elements.append(Spacer(1, 12))

    # Order info
    created_at = invoice.get("created_at")
    info_data = [
        ["Invoice No:", invoice["order_number"]],
        ["Date:", created_at.strftime("%d %b %Y") if created_at else "-"],
        ["Status:", _label(invoice["status"]).replace("_", " ").title()],
        [
            "Payment:",
            f"{_label(invoice['payment_method']).upper()} "
            f"({_label(invoice['payment_status']).title()})",
        ],
    ]
    info_table = Table(info_data, colWidths=[1.3 * inch, 4 * inch])
    info_table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("TEXTCOLOR", (0, 0), (0, -1), colors.HexColor("#64748b")),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ]
        )
    )
    elements.append(info_table)

    # Bill to / ship to
    customer = invoice.get("user") or {}
    bill_to = [
        f"<b>{_text(customer.get('business_name') or customer.get('full_name'))}</b>",
        _text(customer.get("full_name"), ""),
        _text(customer.get("email"), ""),
        _text(customer.get("phone"), ""),
    ]
    if customer.get("gstin"):
        bill_to.append(f"GSTIN: {_text(customer['gstin'])}")
    ship_to = [
        _text(invoice.get("delivery_address")),
        ", ".join(
            _text(part, "")
            for part in (
                invoice.get("delivery_city"),
                invoice.get("delivery_state"),
                invoice.get("delivery_pincode"),
            )
            if part
        ),
        f"Phone: {_text(invoice.get('delivery_phone'))}",
    ]
    parties = Table(
        [
            [Paragraph("Bill To", heading_style), Paragraph("Ship To", heading_style)],
            [
                Paragraph("<br/>".join(line for line in bill_to if line), cell_style),
                Paragraph("<br/>".join(line for line in ship_to if line), cell_style),
            ],
        ],
        colWidths=[3.4 * inch, 3.4 * inch],
    )
    parties.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
    elements.append(parties)
    elements.append(Spacer(1, 12))

    # Line items
    elements.append(Paragraph("Items", heading_style))
    item_data = [["#", "Item", "SKU", "Qty", "Rate", "Amount"]]
    for index, item in enumerate(invoice.get("order_items") or [], start=1):
        per = item.get("price_per_quantity") or 1
        rate = f"{_money(item['price'])} / {per} {_text(item.get('unit'), 'piece')}"
        item_data.append(
            [
                str(index),
                Paragraph(_text(item.get("name"), "Product"), cell_style),
                _text(item.get("sku"), "N/A"),
                str(item["quantity"]),
                rate,
                _money(item["total"]),
            ]
        )
    item_data.append(["", "", "", "", "Subtotal", _money(invoice["subtotal"])])
    item_data.append(["", "", "", "", "Total", _money(invoice["total_amount"])])

    item_table = Table(
        item_data,
        colWidths=[
            0.35 * inch,
            2.45 * inch,
            1 * inch,
            0.5 * inch,
            1.4 * inch,
            1.1 * inch,
        ],
        repeatRows=1,
    )
    item_table.setStyle(
        TableStyle(
            [
                # Header
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#15803d")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, 0), 10),
                # Body
                ("FONTSIZE", (0, 1), (-1, -1), 9),
                ("GRID", (0, 0), (-1, -3), 0.5, colors.HexColor("#e2e8f0")),
                ("ALIGN", (3, 0), (-1, -1), "RIGHT"),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("PADDING", (0, 0), (-1, -1), 6),
                # Totals
                ("FONTNAME", (4, -2), (-1, -1), "Helvetica-Bold"),
                ("LINEABOVE", (4, -1), (-1, -1), 1, colors.HexColor("#1e293b")),
            ]
        )
    )
    elements.append(item_table)

    if invoice.get("notes"):
        elements.append(Paragraph("Notes", heading_style))
        elements.append(Paragraph(_text(invoice["notes"]), normal_style))

    elements.append(Spacer(1, 30))

    # Footer
    footer_style = ParagraphStyle(
        "Footer",
        parent=normal_style,
        fontSize=8,
        textColor=colors.HexColor("#94a3b8"),
        alignment=1,  # Center
    )
    generated_str = (generated_at or datetime.now()).strftime("%d %b %Y %H:%M")
    elements.append(
        Paragraph(
            f"Computer-generated invoice from {_text(company_name)} | {generated_str}",
            footer_style,
        )
    )

    # Build PDF
    doc.build(elements)
    buffer.seek(0)
    return buffer.getvalue()
