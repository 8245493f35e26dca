from __future__ import annotations

import csv
import io

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .service import ReportData

HEADER_COLOR = colors.HexColor("#4f46e5")


def write_csv(data: ReportData) -> bytes:
    out = io.StringIO()
    writer = csv.writer(out)
    writer.writerow([label for _, label in data.columns])
    for row in data.rows:
        writer.writerow([row.get(key, "") for key, _ in data.columns])
    # BOM so spreadsheet apps detect UTF-8
    return out.getvalue().encode("utf-8-sig")


def _add_page_number(canvas, doc) -> None:
    canvas.setFont("Helvetica", 9)
    canvas.drawRightString(A4[0] - 30, 20, f"Page {canvas.getPageNumber()}")


def render_pdf(data: ReportData) -> bytes:
    buffer = io.BytesIO()
    pdf = SimpleDocTemplate(buffer, pagesize=A4, rightMargin=25, leftMargin=25, topMargin=40, bottomMargin=40)
    styles = getSampleStyleSheet()

    elements = [Paragraph(data.title, styles["Title"])]
    for line in data.header_lines:
        elements.append(Paragraph(line, styles["Normal"]))
    elements.append(Spacer(1, 10))

    table_data = [[label for _, label in data.columns]]
    for row in data.rows:
        table_data.append([str(row.get(key, "")) for key, _ in data.columns])
    if not data.rows:
        table_data.append(["No records"] + [""] * (len(data.columns) - 1))

    table = Table(table_data, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f0f4ff")]),
            ]
        )
    )
    elements.append(table)

    if data.summary:
        elements.append(Spacer(1, 14))
        elements.append(Paragraph("Summary", styles["Heading2"]))
        summary_rows = [["Student", "Present", "Absent", "Total", "%"]]
        for s in data.summary:
            summary_rows.append([s["student_name"], s["present"], s["absent"], s["total"], f"{s['percentage']}%"])
        summary_table = Table(summary_rows, repeatRows=1)
        summary_table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ]
            )
        )
        elements.append(summary_table)

    pdf.build(elements, onFirstPage=_add_page_number, onLaterPages=_add_page_number)
    return buffer.getvalue()
