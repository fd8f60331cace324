from datetime import datetime

from schoolsite import db
from schoolsite.models.article import Article
from schoolsite.models.employee import Employee
from schoolsite.routes.admin.dashboard import month_buckets


def test_month_buckets_cross_year_boundary():
    assert month_buckets(3, today=datetime(2025, 2, 14)) == ['2024-12', '2025-01', '2025-02']
    assert len(month_buckets()) == 7


def test_admin_dashboard_shows_totals(app, admin_client):
    with app.app_context():
        db.session.add_all([
            Article(title='a', slug='a', content='c', is_published=True),
            Article(title='b', slug='b', content='c'),
        ])
        db.session.commit()
    r = admin_client.get('/admin/dashboard')
    assert r.status_code == 200
    assert b'1 published / 1 draft' in r.data
    assert b'monthly-chart' in r.data


def test_editor_dashboard_hides_admin_stats(editor_client):
    r = editor_client.get('/admin/dashboard')
    assert r.status_code == 200
    assert b'monthly-chart' not in r.data


def test_employee_export(app, admin_client):
    with app.app_context():
        employee = Employee(name='Bu Guru', position='Guru')
        employee.apply_category('TEACHER')
        db.session.add(employee)
        db.session.commit()
    r = admin_client.get('/admin/reports/employees.xlsx')
    assert r.status_code == 200
    assert r.mimetype == 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    assert r.data[:2] == b'PK'


def test_organization_structure_pdf(admin_client):
    r = admin_client.get('/admin/reports/organization-structure.pdf')
    assert r.status_code == 200
    assert r.data.startswith(b'%PDF')
