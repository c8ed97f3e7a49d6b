"""
PDF report of a revision comparison (reportlab).
"""
import io
from datetime import datetime
from html import escape
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, HRFlowable

from config import settings
from core import ComparisonResult
from reporters.base import row_cells, row_color, SUMMARY_LABELS


def _hex(color: str) -> colors.Color:
    return colors.HexColor(f"#{color}")


def generate_pdf(
    result: ComparisonResult,
    project_title: Optional[str] = None,
    newer_label: Optional[str] = None,
    older_label: Optional[str] = None,
    generated_at: Optional[datetime] = None
) -> io.BytesIO:
    """Generate the comparison report and return it as an in-memory PDF."""
    generated_at = generated_at or datetime.utcnow()

    buffer = io.BytesIO()
    page_size = landscape(letter)
    doc = SimpleDocTemplate(buffer, pagesize=page_size, topMargin=0.5*inch, bottomMargin=0.5*inch,
                            leftMargin=0.5*inch, rightMargin=0.5*inch)

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle('Title', parent=styles['Heading1'], fontSize=18, spaceAfter=6,
                                 alignment=TA_CENTER, textColor=colors.HexColor('#1e40af'))
    subtitle_style = ParagraphStyle('Subtitle', parent=styles['Normal'], fontSize=10,
                                    alignment=TA_CENTER, textColor=colors.HexColor('#6b7280'))
    section_style = ParagraphStyle('Section', parent=styles['Heading2'], fontSize=13,
                                   spaceBefore=12, spaceAfter=6, textColor=colors.HexColor('#1e40af'))
    cell_style = ParagraphStyle('Cell', parent=styles['Normal'], fontSize=7, leading=9)
    old_style = ParagraphStyle('Old', parent=cell_style, textColor=_hex(settings.OLD_VALUE_COLOR))
    header_style = ParagraphStyle('Header', parent=cell_style, fontName='Helvetica-Bold')

    story = []

    story.append(Paragraph("DATA DICTIONARY COMPARISON REPORT", title_style))
    if project_title:
        story.append(Paragraph(escape(project_title), subtitle_style))
    if newer_label and older_label:
        story.append(Paragraph(f"Comparing {escape(newer_label)} to {escape(older_label)}", subtitle_style))
    story.append(Paragraph(f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')} UTC", subtitle_style))
    story.append(Spacer(1, 0.3*inch))

    # Summary
    summary_data = [[label + ":", str(getattr(result.summary, key))] for key, label in SUMMARY_LABELS]
    summary_table = Table(summary_data, colWidths=[2.5*inch, 1.5*inch])
    summary_table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 5),
        ('TOPPADDING', (0, 0), (-1, -1), 5),
        ('BACKGROUND', (0, 0), (-1, -1), colors.HexColor('#f3f4f6')),
        ('BOX', (0, 0), (-1, -1), 1, colors.HexColor('#1e40af')),
        ('LINEBELOW', (0, 0), (-1, -2), 0.5, colors.HexColor('#d1d5db')),
    ]))
    story.append(summary_table)

    story.append(Paragraph("Table of Changes", section_style))

    if result.is_identical:
        story.append(Paragraph("The data dictionaries are identical", styles['Normal']))
    else:
        headers = list(result.change_set.headers) or ["field_name"]
        data = [[Paragraph(escape(h), header_style) for h in headers]]
        table_style = [
            ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#9ca3af')),
            ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ]

        for row_idx, entry in enumerate(result.change_set, start=1):
            row = []
            for col_idx, cell in enumerate(row_cells(entry)):
                if cell.changed:
                    row.append([
                        Paragraph(escape(cell.value), cell_style),
                        Paragraph(escape(cell.old_value), old_style),
                    ])
                    table_style.append(('BACKGROUND', (col_idx, row_idx), (col_idx, row_idx),
                                        _hex(settings.CHANGED_COLOR)))
                else:
                    row.append(Paragraph(escape(cell.value), cell_style))
            row.extend([""] * (len(headers) - len(row)))
            data.append(row)

            color = row_color(entry)
            if color:
                table_style.append(('BACKGROUND', (0, row_idx), (-1, row_idx), _hex(color)))

        usable_width = page_size[0] - doc.leftMargin - doc.rightMargin
        col_width = usable_width / max(len(headers), 1)
        changes_table = Table(data, colWidths=[col_width] * len(headers), repeatRows=1)
        changes_table.setStyle(TableStyle(table_style))
        story.append(changes_table)

    # Footer
    story.append(Spacer(1, 0.3*inch))
    story.append(HRFlowable(width="100%", thickness=2, color=colors.HexColor('#1e40af')))
    story.append(Spacer(1, 0.1*inch))
    story.append(Paragraph("--- End of Data Dictionary Comparison Report ---", subtitle_style))
    story.append(Paragraph(f"{escape(settings.APP_NAME)} v{settings.APP_VERSION}", subtitle_style))

    doc.build(story)
    buffer.seek(0)
    return buffer
