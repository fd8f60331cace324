from datetime import datetime
from io import BytesIO

from flask import Blueprint, render_template, send_file, flash, redirect, url_for, current_app
from flask_login import login_required
from schoolsite.models.employee import Employee
from schoolsite.models.setting import Setting
from schoolsite.services.organization_structure_service import OrganizationStructureService
from schoolsite.services.report_service import ReportService, PDF_MIME, XLSX_MIME
from schoolsite.utils.helpers import admin_required, record

bp = Blueprint('admin_reports', __name__, url_prefix='/admin/reports')

@bp.route('/')
@login_required
@admin_required
def index():
    return render_template('admin/reports/index.html', employee_count=Employee.query.count())

@bp.route('/employees.xlsx')
@login_required
@admin_required
def employees():
    try:
        staff = Employee.query.order_by(Employee.display_order, Employee.name).all()
        content = ReportService.employees_workbook(staff, Setting.current().school_name)
    except Exception as e:
        current_app.logger.error(f"Error exporting employees: {str(e)}")
        flash('Error generating the employee report. Please try again.', 'danger')
        return redirect(url_for('admin_reports.index'))

    record('export_report', f'Exported employee directory ({len(staff)} rows)')
    return send_file(BytesIO(content), mimetype=XLSX_MIME, as_attachment=True,
                     download_name=f"guru-karyawan-{datetime.utcnow():%Y%m%d}.xlsx")

@bp.route('/organization-structure.pdf')
@login_required
@admin_required
def organization_structure():
    try:
        title, positions = OrganizationStructureService.get()
        content = ReportService.organization_pdf(title, positions, Setting.current().school_name)
    except Exception as e:
        current_app.logger.error(f"Error exporting organization structure: {str(e)}")
        flash('Error generating the organization structure report. Please try again.', 'danger')
        return redirect(url_for('admin_reports.index'))

    record('export_report', 'Exported organization structure PDF')
    return send_file(BytesIO(content), mimetype=PDF_MIME, as_attachment=True,
                     download_name='struktur-organisasi.pdf')
