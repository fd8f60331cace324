from schoolsite import db
from datetime import datetime
from enum import Enum

class ProfileType(Enum):
    HEADMASTER = "HEADMASTER"
    PROFILE = "PROFILE"
    HISTORY = "HISTORY"
    VISION_MISSION = "VISION_MISSION"
    ORGANIZATION_STRUCTURE = "ORGANIZATION_STRUCTURE"

class SchoolProfile(db.Model):
    """One row per profile section.

    ``content`` holds rich text for HEADMASTER, PROFILE and HISTORY; ``data``
    holds structured JSON for VISION_MISSION ({vision, mission, motto}) and
    ORGANIZATION_STRUCTURE ({positions: [...]}).
    """
    __tablename__ = 'school_profiles'

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(30), unique=True, nullable=False)  # Using string instead of Enum for compatibility
    title = db.Column(db.String(255))
    content = db.Column(db.Text)
    data = db.Column(db.JSON)
    main_image = db.Column(db.String(255))
    order = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @staticmethod
    def get(profile_type):
        return SchoolProfile.query.filter_by(type=profile_type.value).first()

    @staticmethod
    def get_or_new(profile_type):
        """Existing row for ``profile_type`` or a new pending one (update-or-create)"""
        profile = SchoolProfile.get(profile_type)
        if profile is None:
            profile = SchoolProfile(type=profile_type.value)
            db.session.add(profile)
        return profile

    def __repr__(self):
        return f'<SchoolProfile {self.type}>'
