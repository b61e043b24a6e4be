"""
PDF rendering of a patient's medical history.
"""
from __future__ import annotations

from datetime import datetime
from io import BytesIO
from typing import Any, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    BaseDocTemplate,
    Frame,
    KeepTogether,
    PageTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
)

from apps.history.export_render.sections import (
    ExportOptions,
    ReportSection,
    build_report_sections,
    summary_counts,
)
from apps.history.state import HistoryState

PRIMARY_COLOR = colors.HexColor("#E91E63")
FOOTER_TEXT = "Generated by Hospital Management System"


class _NumberedCanvas(canvas.Canvas):
    """Defers page output until the total page count is known."""

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self._saved_page_states: list[dict] = []

    def showPage(self) -> None:
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self) -> None:
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int) -> None:
        self.saveState()
        self.setFont("Helvetica", 8)
        self.setFillColor(colors.grey)
        self.drawCentredString(
            letter[0] / 2.0,
            0.5 * inch,
            f"Page {self._pageNumber} of {total} | {FOOTER_TEXT}",
        )
        self.restoreState()


def _generated_label(generated_at: datetime) -> str:
    hour = generated_at.hour % 12 or 12
    meridiem = "AM" if generated_at.hour < 12 else "PM"
    return f"{generated_at.strftime('%B')} {generated_at.day}, {generated_at.year} {hour}:{generated_at.minute:02d} {meridiem}"


def _summary_table(counts: list[tuple[str, int]], width: float, style: ParagraphStyle) -> Table:
    cells = [Paragraph(escape(f"{label}: {count}"), style) for label, count in counts]
    rows = [cells[i:i + 3] for i in range(0, len(cells), 3)]
    rows[-1] += [""] * (3 - len(rows[-1]))
    table = Table(rows, colWidths=[width / 3.0] * 3)
    table.setStyle(TableStyle([("BOTTOMPADDING", (0, 0), (-1, -1), 4)]))
    return table


def _section_flowables(section: ReportSection, width: float, styles: Any) -> list:
    heading = ParagraphStyle(
        "SectionHeading",
        parent=styles["Heading2"],
        textColor=PRIMARY_COLOR,
        spaceBefore=12,
        spaceAfter=6,
    )
    header_cell = ParagraphStyle("HeaderCell", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=9, textColor=colors.white)
    body_cell = ParagraphStyle("BodyCell", parent=styles["Normal"], fontSize=8, leading=10)

    table_view = section.table
    data = [[Paragraph(escape(c), header_cell) for c in table_view.columns]]
    data.extend([Paragraph(escape(cell), body_cell) for cell in row] for row in table_view.rows)

    col_width = width / max(1, len(table_view.columns))
    table = Table(data, colWidths=[col_width] * len(table_view.columns), repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), PRIMARY_COLOR),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F5F5F5")]),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#DDDDDD")),
            ]
        )
    )
    # Heading and table move to the next page together when they do not fit.
    return [KeepTogether([Paragraph(escape(table_view.title), heading), table]), Spacer(1, 0.15 * inch)]


def generate_history_pdf(
    state: HistoryState,
    patient_name: Optional[str] = None,
    *,
    generated_at: Optional[datetime] = None,
    options: Optional[ExportOptions] = None,
) -> bytes:
    generated_at = generated_at or datetime.now()
    buffer = BytesIO()
    doc = BaseDocTemplate(
        buffer,
        pagesize=letter,
        leftMargin=0.75 * inch,
        rightMargin=0.75 * inch,
        topMargin=0.75 * inch,
        bottomMargin=0.9 * inch,
        title="Medical History Report",
    )
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle("TitleStyle", parent=styles["Title"], fontSize=20, textColor=PRIMARY_COLOR, spaceAfter=6)
    meta_style = ParagraphStyle("MetaStyle", parent=styles["Normal"], alignment=1, fontSize=10)
    h1_style = ParagraphStyle("H1Style", parent=styles["Heading1"], fontSize=14, spaceBefore=12, spaceAfter=6)

    flowables: list = [
        Paragraph("Medical History Report", title_style),
        Paragraph(escape(f"Patient: {patient_name or 'N/A'}"), meta_style),
        Paragraph(escape(f"Generated: {_generated_label(generated_at)}"), meta_style),
        Spacer(1, 0.25 * inch),
        Paragraph("Summary", h1_style),
        _summary_table(summary_counts(state), doc.width, styles["Normal"]),
        Spacer(1, 0.2 * inch),
    ]
    for section in build_report_sections(state, options):
        flowables.extend(_section_flowables(section, doc.width, styles))

    frame = Frame(doc.leftMargin, doc.bottomMargin, doc.width, doc.height, id="normal")
    doc.addPageTemplates([PageTemplate(id="history", frames=[frame])])
    doc.build(flowables, canvasmaker=_NumberedCanvas)
    return buffer.getvalue()
