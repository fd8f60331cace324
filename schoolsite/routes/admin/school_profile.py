from flask import Blueprint, render_template, request, flash, redirect, url_for, abort, current_app
from flask_login import login_required
from sqlalchemy.exc import SQLAlchemyError
from schoolsite.models.school_profile import ProfileType, SchoolProfile
from schoolsite.services.organization_structure_service import (
    OrganizationStructureService, parse_position_form,
)
from schoolsite.services.organization_layout import layout_rows
from schoolsite.services.storage_service import PROFILE_IMAGE, StorageError, UploadValidationError, has_file
from schoolsite.utils.helpers import admin_required, record, save_changes
from schoolsite.utils.validators import FormValidator

bp = Blueprint('admin_school_profile', __name__, url_prefix='/admin/profile')

IMAGE_FOLDER = 'school_profiles'

# Rich-text sections, keyed by URL segment
TEXT_SECTIONS = {
    'headmaster': (ProfileType.HEADMASTER, 'Headmaster'),
    'profile': (ProfileType.PROFILE, 'School Profile'),
    'history': (ProfileType.HISTORY, 'History'),
}

@bp.route('/')
@login_required
@admin_required
def index():
    profiles = {p.type: p for p in SchoolProfile.query.all()}
    return render_template('admin/profile/index.html', sections=TEXT_SECTIONS, profiles=profiles)

@bp.route('/vision-mission', methods=['GET', 'POST', 'PUT'])
@login_required
@admin_required
def vision_mission():
    profile = SchoolProfile.get(ProfileType.VISION_MISSION)
    if request.method == 'GET':
        return render_template('admin/profile/vision_mission.html', profile=profile, form={}, errors={})

    v = FormValidator(request.form)
    title = v.string('title', max_length=255)
    data = {
        'vision': v.string('vision', required=True),
        'mission': v.string('mission', required=True),
        'motto': v.string('motto', max_length=255),
    }
    if v.errors:
        return render_template('admin/profile/vision_mission.html', profile=profile,
                               form=request.form, errors=v.errors), 422

    def apply(batch):
        target = SchoolProfile.get_or_new(ProfileType.VISION_MISSION)
        target.title = title
        target.data = data

    ok, _ = save_changes(apply, 'Error updating vision and mission')
    if ok:
        record('update_school_profile', 'Updated Vision & Mission')
        flash('Vision & Mission updated successfully.', 'success')
    return redirect(url_for('admin_school_profile.vision_mission'))

@bp.route('/organization-structure', methods=['GET', 'POST', 'PUT'])
@login_required
@admin_required
def organization_structure():
    if request.method == 'GET':
        title, positions = OrganizationStructureService.get()
        return _structure_page(title, positions, {})

    title, entries, uploads, errors = parse_position_form(request.form, request.files)
    if errors:
        return _structure_page(title, OrganizationStructureService.preview(entries), errors, 422)

    try:
        committed = OrganizationStructureService.save(title, entries, uploads)
    except UploadValidationError as e:
        return _structure_page(title, OrganizationStructureService.preview(entries), {e.field: e.message}, 422)
    except (StorageError, SQLAlchemyError) as e:
        current_app.logger.error(f"Error saving organization structure: {str(e)}")
        flash('Error saving organization structure. Please try again.', 'danger')
        return redirect(url_for('admin_school_profile.organization_structure'))

    record('update_school_profile', f'Updated Organization Structure ({len(committed)} positions)')
    flash('Organization Structure updated successfully.', 'success')
    return redirect(url_for('admin_school_profile.organization_structure'))

def _structure_page(title, positions, errors, status=200):
    return render_template('admin/profile/organization_structure.html', title=title,
                           positions=positions, rows=layout_rows(positions), errors=errors), status

@bp.route('/<section>', methods=['GET', 'POST', 'PUT'])
@login_required
@admin_required
def section(section):
    if section not in TEXT_SECTIONS:
        abort(404)
    profile_type, label = TEXT_SECTIONS[section]
    profile = SchoolProfile.get(profile_type)
    if request.method == 'GET':
        return _section_page(section, label, profile, {})

    v = FormValidator(request.form)
    title = v.string('title', required=True, max_length=255)
    content = v.string('content', required=True)
    if v.errors:
        return _section_page(section, label, profile, v.errors, 422)

    def apply(batch):
        target = SchoolProfile.get_or_new(profile_type)
        target.title = title
        target.content = content
        image = request.files.get('main_image')
        if has_file(image):
            target.main_image = batch.replace(target.main_image, image, PROFILE_IMAGE, IMAGE_FOLDER, field='main_image')

    ok, errors = save_changes(apply, f'Error updating {label}')
    if ok:
        record('update_school_profile', f'Updated {label}')
        flash(f'{label} updated successfully.', 'success')
        return redirect(url_for('admin_school_profile.section', section=section))
    if errors is None:
        return redirect(url_for('admin_school_profile.section', section=section))
    return _section_page(section, label, profile, errors, 422)

def _section_page(section, label, profile, errors, status=200):
    return render_template('admin/profile/section.html', section=section, label=label,
                           profile=profile, form=request.form, errors=errors), status
