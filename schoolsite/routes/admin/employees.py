from flask import Blueprint, render_template, request, flash, redirect, url_for
from flask_login import login_required
from schoolsite import db
from schoolsite.models.employee import Employee, EMPLOYEE_CATEGORIES
from schoolsite.services.storage_service import THUMBNAIL, has_file
from schoolsite.utils.helpers import admin_required, not_found, paginate, record, save_changes, search_arg
from schoolsite.utils.validators import FormValidator

bp = Blueprint('admin_employees', __name__, url_prefix='/admin/employees')

IMAGE_FOLDER = 'employees'

def _validate(form):
    v = FormValidator(form)
    data = {
        'name': v.string('name', required=True, max_length=255),
        'position': v.string('position', required=True, max_length=255),
        'category': v.choice('category', EMPLOYEE_CATEGORIES),
    }
    return data, v.errors

def _form_page(employee, errors, status=200):
    return render_template('admin/employees/form.html', employee=employee,
                           categories=EMPLOYEE_CATEGORIES, form=request.form, errors=errors), status

def _apply(employee, data, batch):
    employee.name = data['name']
    employee.position = data['position']
    employee.apply_category(data['category'])
    image = request.files.get('image')
    if has_file(image):
        employee.image = batch.replace(employee.image, image, THUMBNAIL, IMAGE_FOLDER, field='image')

@bp.route('/')
@login_required
@admin_required
def index():
    search = search_arg()
    category = request.args.get('category', '').strip()
    query = Employee.query
    if search:
        query = query.filter(Employee.name.ilike(f"%{search}%"))
    if category:
        query = query.filter(Employee.category == category)
    employees = paginate(query.order_by(Employee.display_order, Employee.name))
    return render_template('admin/employees/index.html', employees=employees,
                           categories=EMPLOYEE_CATEGORIES,
                           filters={'search': search, 'category': category})

@bp.route('/create', methods=['GET', 'POST'])
@login_required
@admin_required
def create():
    if request.method == 'GET':
        return _form_page(None, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(None, errors, 422)

    employee = Employee()

    def apply(batch):
        _apply(employee, data, batch)
        db.session.add(employee)

    ok, errors = save_changes(apply, 'Error creating employee')
    if ok:
        record('create_employee', f'Created employee: {employee.name}')
        flash('Employee created successfully.', 'success')
        return redirect(url_for('admin_employees.index'))
    if errors is None:
        return redirect(url_for('admin_employees.index'))
    return _form_page(None, errors, 422)

@bp.route('/<int:employee_id>/edit', methods=['GET', 'POST'])
@login_required
@admin_required
def edit(employee_id):
    employee = db.session.get(Employee, employee_id)
    if not employee:
        return not_found('Employee not found.', 'admin_employees.index')
    if request.method == 'GET':
        return _form_page(employee, {})

    data, errors = _validate(request.form)
    if errors:
        return _form_page(employee, errors, 422)

    ok, errors = save_changes(lambda batch: _apply(employee, data, batch), 'Error updating employee')
    if ok:
        record('update_employee', f'Updated employee: {employee.name}')
        flash('Employee updated successfully.', 'success')
        return redirect(url_for('admin_employees.index'))
    if errors is None:
        return redirect(url_for('admin_employees.index'))
    return _form_page(employee, errors, 422)

@bp.route('/<int:employee_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete(employee_id):
    employee = db.session.get(Employee, employee_id)
    if not employee:
        return not_found('Employee not found.', 'admin_employees.index')
    name = employee.name

    def apply(batch):
        batch.discard(employee.image)
        db.session.delete(employee)

    ok, _ = save_changes(apply, 'Error deleting employee')
    if ok:
        record('delete_employee', f'Deleted employee: {name}')
        flash('Employee deleted successfully.', 'success')
    return redirect(url_for('admin_employees.index'))
