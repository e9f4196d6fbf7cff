# reports.py
from __future__ import annotations

import io
from typing import List

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from domain import MonthSummary, RateConfig, WorkDayEntry
from utils import entries_to_dataframe, format_hours, money

TITLE = "ShiftMate"


def pdf_filename(year, month) -> str:
    return f"ShiftMate_{year}-{month}.pdf"


def _draw_page_border(canvas, doc_obj):
    canvas.saveState()
    w, h = doc_obj.pagesize
    canvas.setStrokeColor(colors.HexColor("#C7CCD6"))
    canvas.setLineWidth(0.8)
    margin = 12
    canvas.rect(margin, margin, w - 2*margin, h - 2*margin)
    canvas.restoreState()


def month_report_pdf(
    entries: List[WorkDayEntry],
    summary: MonthSummary,
    year: int,
    month: int,
    rates: RateConfig,
    currency: str = "€",
) -> bytes:
    """One-page report: entries table plus a totals box."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, topMargin=24, bottomMargin=24, leftMargin=24, rightMargin=24)
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(name="TitleCentered", parent=styles["Title"], alignment=TA_CENTER)
    summary_style = ParagraphStyle(
        name="Summary", parent=styles["Normal"], alignment=TA_CENTER,
        textColor=colors.black, fontSize=10, leading=13,
    )

    story = [Paragraph(f"{TITLE} · {year}-{month}", title_style), Spacer(1, 8)]
    df = entries_to_dataframe(entries)
    if df.empty:
        story.append(Paragraph("No work days recorded.", styles["Normal"]))
    else:
        df["Hours"] = df["Hours"].map(lambda h: f"{h:.2f}")
        data = [list(df.columns)] + df.values.tolist()
        table = Table(data, repeatRows=1, hAlign="CENTER")
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F5F5F7")),
            ("ALIGN", (0, 0), (-1, -1), "CENTER"),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#E0E0E0")),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.whitesmoke, colors.white]),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]))
        story.append(table)

    lines = [
        f"Total hours: {format_hours(summary.total_hours)}",
        f"Gross salary: {money(summary.gross, currency)} ({money(rates.hourly_rate, currency)}/h)",
        f"Tax ({rates.tax_rate:g}%): -{money(summary.tax, currency)}",
        f"Net salary: {money(summary.net, currency)}",
    ]
    story.append(Spacer(1, 12))
    box = Table([[Paragraph(line, summary_style)] for line in lines], colWidths=[min(360, 0.65 * doc.width)], hAlign="CENTER")
    box.setStyle(TableStyle([
        ("ALIGN", (0, 0), (-1, -1), "CENTER"),
        ("BOX", (0, 0), (-1, -1), 0.6, colors.HexColor("#C7CCD6")),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]))
    story.append(box)

    doc.build(story, onFirstPage=_draw_page_border, onLaterPages=_draw_page_border)
    return buf.getvalue()
