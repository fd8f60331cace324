from flask import Blueprint, render_template, abort
from schoolsite.models.school_profile import ProfileType, SchoolProfile
from schoolsite.services.organization_layout import layout_rows
from schoolsite.services.organization_structure_service import OrganizationStructureService

bp = Blueprint('profile', __name__, url_prefix='/profile')

SECTIONS = {
    'headmaster': ProfileType.HEADMASTER,
    'profile': ProfileType.PROFILE,
    'history': ProfileType.HISTORY,
    'vision-mission': ProfileType.VISION_MISSION,
}

@bp.route('/organization-structure')
def organization_structure():
    title, positions = OrganizationStructureService.get()
    return render_template('public/profile/organization_structure.html',
                           title=title, rows=layout_rows(positions))

@bp.route('/<section>')
def show(section):
    if section not in SECTIONS:
        abort(404)
    profile = SchoolProfile.get(SECTIONS[section])
    return render_template('public/profile/section.html', section=section, profile=profile)
