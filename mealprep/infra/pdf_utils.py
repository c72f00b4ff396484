import io
from xml.sax.saxutils import escape
from typing import List, Optional

from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from mealprep.domain.GroceryList import DepartmentSection, GroceryListItem

HEADER_COLOR = colors.HexColor("#4CAF50")
DEPARTMENT_COLOR = colors.HexColor("#E8F5E9")


def _fmt_quantity(qty) -> str:
    if isinstance(qty, float) and qty.is_integer():
        return str(int(qty))
    return str(qty)


def _quantity_cell(item: GroceryListItem) -> str:
    text = f"{_fmt_quantity(item.quantity)} {item.unit}".strip()
    if item.unit_mismatch:
        extra = ", ".join(f"{_fmt_quantity(q)} {u}".strip() for u, q in item.other_quantities)
        text = f"{text} (+ {extra})"
    return text


def generate_pdf_for_grocery_list(sections: List[DepartmentSection], week_label: Optional[str] = None) -> bytes:
    """Render the visible grocery list: one shaded row per department, then Item / Quantity / Recipes rows."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=A4,
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(escape(f"Grocery List - {week_label}" if week_label else "Grocery List"), styles["Title"]),
        Spacer(1, 16),
    ]
    if not sections:
        elements.append(Paragraph("Nothing to buy.", styles["Normal"]))
        doc.build(elements)
        return buf.getvalue()

    data = [["Item", "Quantity", "Recipes"]]
    style = [
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 12),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 10),
        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]
    warnings = []
    for section in sections:
        row = len(data)
        data.append([section.name, "", ""])
        style += [
            ("SPAN", (0, row), (-1, row)),
            ("BACKGROUND", (0, row), (-1, row), DEPARTMENT_COLOR),
            ("FONTNAME", (0, row), (-1, row), "Helvetica-Bold"),
        ]
        for item in section.items:
            data.append([item.name, _quantity_cell(item), ", ".join(item.recipes)])
            if item.unit_mismatch:
                warnings.append(str(item.warning))

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle(style))
    elements.append(table)

    if warnings:
        elements.append(Spacer(1, 12))
        elements.append(Paragraph("Unit warnings", styles["Heading3"]))
        elements.extend(Paragraph(escape(w), styles["Normal"]) for w in warnings)

    doc.build(elements)
    return buf.getvalue()
