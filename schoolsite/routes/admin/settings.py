from flask import Blueprint, render_template, request, flash, redirect, url_for
from flask_login import login_required
from schoolsite.models.setting import Setting
from schoolsite.services.storage_service import LOGO, has_file
from schoolsite.utils.helpers import admin_required, record, save_changes
from schoolsite.utils.validators import FormValidator

bp = Blueprint('admin_settings', __name__, url_prefix='/admin/settings')

LOGO_FOLDER = 'settings'
SOCIAL_FIELDS = ('facebook', 'instagram', 'twitter', 'youtube')

def _validate(form):
    v = FormValidator(form)
    data = {
        'school_name': v.string('school_name', required=True, max_length=255, label='school name'),
        'address': v.string('address'),
        'phone': v.string('phone', max_length=50),
        'email': v.email('email'),
        'maps': v.string('maps'),
    }
    for field in SOCIAL_FIELDS:
        data[field] = v.url(field)
    return data, v.errors

@bp.route('/', methods=['GET', 'POST', 'PUT'])
@login_required
@admin_required
def index():
    setting = Setting.instance()
    if request.method == 'GET':
        return render_template('admin/settings/index.html', setting=setting, form={}, errors={})

    data, errors = _validate(request.form)
    if errors:
        return render_template('admin/settings/index.html', setting=setting,
                               form=request.form, errors=errors), 422

    def apply(batch):
        for field in Setting.EDITABLE_FIELDS:
            setattr(setting, field, data.get(field))
        logo = request.files.get('logo')
        if has_file(logo):
            setting.logo = batch.replace(setting.logo, logo, LOGO, LOGO_FOLDER, field='logo')

    ok, errors = save_changes(apply, 'Error updating settings')
    if ok:
        record('update_settings', 'Updated site settings')
        flash('Settings updated successfully.', 'success')
        return redirect(url_for('admin_settings.index'))
    if errors is None:
        return redirect(url_for('admin_settings.index'))
    return render_template('admin/settings/index.html', setting=setting,
                           form=request.form, errors=errors), 422
