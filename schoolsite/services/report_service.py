"""Spreadsheet and PDF exports for the back office"""
import io
from xml.sax.saxutils import escape
from datetime import datetime

import xlsxwriter
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from schoolsite.services.organization_layout import layout_rows
from schoolsite.services.storage_service import StorageService

XLSX_MIME = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
PDF_MIME = 'application/pdf'

CATEGORY_LABELS = {
    'PRINCIPAL': 'Principal',
    'HEAD_OF_ADMIN': 'Head of Administration',
    'VICE_PRINCIPAL': 'Vice Principal',
    'TEACHER': 'Teacher',
    'ADMINISTRATIVE': 'Administrative',
    'STAFF': 'Staff',
}


class ReportService:

    @staticmethod
    def employees_workbook(employees, school_name=None):
        """Staff directory as an .xlsx document (bytes)"""
        output = io.BytesIO()
        workbook = xlsxwriter.Workbook(output, {'in_memory': True})

        title_format = workbook.add_format({'bold': True, 'font_size': 14, 'align': 'center'})
        header_format = workbook.add_format({
            'bold': True,
            'font_color': '#FFFFFF',
            'bg_color': '#4F81BD',
            'align': 'center',
            'valign': 'vcenter',
            'border': 1
        })
        data_format = workbook.add_format({'border': 1, 'align': 'left', 'valign': 'vcenter'})
        center_format = workbook.add_format({'border': 1, 'align': 'center', 'valign': 'vcenter'})

        worksheet = workbook.add_worksheet('Guru & Karyawan')
        worksheet.set_column('A:A', 5)   # No.
        worksheet.set_column('B:B', 30)  # Name
        worksheet.set_column('C:C', 30)  # Position
        worksheet.set_column('D:D', 22)  # Category

        row = 0
        worksheet.merge_range(row, 0, row, 3, school_name or 'Guru & Karyawan', title_format)
        row += 1
        worksheet.merge_range(row, 0, row, 3, f"Generated {datetime.utcnow():%Y-%m-%d %H:%M} UTC",
                              workbook.add_format({'align': 'center', 'italic': True}))
        row += 2

        for col, header in enumerate(('No.', 'Name', 'Position', 'Category')):
            worksheet.write(row, col, header, header_format)
        row += 1

        for index, employee in enumerate(employees, start=1):
            worksheet.write(row, 0, index, center_format)
            worksheet.write(row, 1, employee.name, data_format)
            worksheet.write(row, 2, employee.position, data_format)
            worksheet.write(row, 3, CATEGORY_LABELS.get(employee.category, employee.category), data_format)
            row += 1

        workbook.close()
        return output.getvalue()

    @staticmethod
    def organization_pdf(title, positions, school_name=None):
        """Organization chart as a landscape PDF, one table row per tier"""
        output = io.BytesIO()
        doc = SimpleDocTemplate(
            output,
            pagesize=landscape(A4),
            leftMargin=1.5 * cm,
            rightMargin=1.5 * cm,
            topMargin=1.5 * cm,
            bottomMargin=1.5 * cm,
            title=title or 'Organization Structure'
        )

        styles = getSampleStyleSheet()
        styles.add(ParagraphStyle(name="Center", alignment=TA_CENTER, fontSize=12, leading=14))
        styles.add(ParagraphStyle(name="Cell", alignment=TA_CENTER, fontSize=8, leading=10))

        flow = [
            Paragraph(f"<b>{escape(school_name or '')}</b>", styles["Center"]),
            Paragraph(f"<b>{escape(title or 'Struktur Organisasi')}</b>", styles["Center"]),
            Spacer(1, 0.6 * cm),
        ]

        for tier in layout_rows(positions):
            cells = [ReportService._position_cell(position, styles) for position in tier]
            table = Table([cells], colWidths=[(doc.width / len(cells))] * len(cells))
            table.setStyle(TableStyle([
                ('VALIGN', (0, 0), (-1, -1), 'TOP'),
                ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
                ('BOX', (0, 0), (-1, -1), 0.5, colors.grey),
                ('INNERGRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ]))
            flow.append(table)
            flow.append(Spacer(1, 0.4 * cm))

        doc.build(flow)
        return output.getvalue()

    @staticmethod
    def _position_cell(position, styles):
        parts = []
        if position.image and StorageService.exists(position.image):
            parts.append(Image(StorageService._path(position.image), width=1.8 * cm, height=1.8 * cm))
        parts.append(Paragraph(f"<b>{escape(position.display_title)}</b>", styles["Cell"]))
        if not position.display_only:
            parts.append(Paragraph(escape(position.name or "-"), styles["Cell"]))
        return parts
