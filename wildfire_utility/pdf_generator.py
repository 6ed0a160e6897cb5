#!/usr/bin/env python3
"""
PDF report generator for WildFire results
"""
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib import colors
from xml.sax.saxutils import escape
from datetime import datetime
import logging

from .report import ReportAggregator
from .schemas import ApiResult, PARAMETER_ERROR, REQUEST_ERROR, RESPONSE_ERROR

logger = logging.getLogger(__name__)

# Verdict labels start with the name, e.g. "Pending; the file exists, ..."
VERDICT_COLORS = {
    'Benign': colors.green,
    'Grayware': colors.orange,
    'Phishing': colors.orangered,
    'Malware': colors.red,
    'C2': colors.red,
}

ERROR_KEYS = (PARAMETER_ERROR, REQUEST_ERROR, RESPONSE_ERROR)


class PDFReportGenerator:
    def __init__(self, output_path, title="WildFire Analysis Report"):
        self.doc = SimpleDocTemplate(output_path, pagesize=A4)
        self.styles = getSampleStyleSheet()
        self.story = []
        self.title = title

        self.title_style = ParagraphStyle(
            'CustomTitle',
            parent=self.styles['Heading1'],
            fontSize=24,
            textColor=colors.HexColor('#1a1a1a'),
            spaceAfter=30,
            alignment=1  # Center
        )

        self.heading_style = ParagraphStyle(
            'CustomHeading',
            parent=self.styles['Heading2'],
            fontSize=12,
            textColor=colors.HexColor('#333333'),
            spaceAfter=8
        )

        self.cell_style = ParagraphStyle(
            'Cell',
            parent=self.styles['Normal'],
            fontSize=9,
            leading=11
        )

    def add_header(self, report: ReportAggregator):
        """
        Title and run summary
        """
        self.story.append(Paragraph(self.title, self.title_style))
        self.story.append(Spacer(1, 0.2*inch))

        errors = sum(1 for result in report if any(k in result.fields for k in ERROR_KEYS))
        metadata = [
            ['Generated:', datetime.now().strftime('%Y-%m-%d %H:%M:%S')],
            ['Parameters:', str(len(report))],
            ['Errors:', str(errors)],
        ]

        t = Table(metadata, colWidths=[2*inch, 4*inch])
        t.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (0, -1), colors.HexColor('#f0f0f0')),
            ('TEXTCOLOR', (0, 0), (-1, -1), colors.black),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 12),
            ('GRID', (0, 0), (-1, -1), 1, colors.grey)
        ]))

        self.story.append(t)
        self.story.append(Spacer(1, 0.3*inch))

    def add_result(self, result: ApiResult):
        """
        One table per parameter
        """
        self.story.append(Paragraph(escape(result.parameter), self.heading_style))

        rows = [
            [Paragraph(escape(key), self.cell_style), Paragraph(escape(value), self.cell_style)]
            for key, value in result.fields.items()
        ]
        if not rows:
            rows = [['', '']]

        style = [
            ('BACKGROUND', (0, 0), (0, -1), colors.HexColor('#f0f0f0')),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey)
        ]

        keys = list(result.fields)
        if 'verdict' in result.fields:
            label = result.verdict.split(';')[0]
            row = keys.index('verdict')
            style.append(('BACKGROUND', (1, row), (1, row),
                          VERDICT_COLORS.get(label, colors.lightgrey)))
        for key in ERROR_KEYS:
            if key in result.fields:
                row = keys.index(key)
                style.append(('BACKGROUND', (1, row), (1, row), colors.HexColor('#f8d7da')))

        t = Table(rows, colWidths=[2*inch, 4.5*inch])
        t.setStyle(TableStyle(style))
        self.story.append(t)
        self.story.append(Spacer(1, 0.2*inch))

    def generate(self, report: ReportAggregator):
        """
        Build the PDF
        """
        self.add_header(report)
        for result in report:
            self.add_result(result)
        self.doc.build(self.story)


def generate_pdf_report(report: ReportAggregator, output_path):
    """
    Render aggregated results to a PDF file
    """
    generator = PDFReportGenerator(output_path)
    generator.generate(report)
    logger.info(f"PDF report generated: {output_path}")
