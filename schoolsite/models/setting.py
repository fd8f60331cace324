from schoolsite import db
from datetime import datetime

class Setting(db.Model):
    """Single global settings row (school identity, contacts, social links)"""
    id = db.Column(db.Integer, primary_key=True)
    school_name = db.Column(db.String(255))
    logo = db.Column(db.String(255))
    address = db.Column(db.Text)
    phone = db.Column(db.String(50))
    email = db.Column(db.String(120))
    maps = db.Column(db.Text)
    facebook = db.Column(db.String(255))
    instagram = db.Column(db.String(255))
    twitter = db.Column(db.String(255))
    youtube = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    EDITABLE_FIELDS = ('school_name', 'address', 'phone', 'email', 'maps',
                       'facebook', 'instagram', 'twitter', 'youtube')

    @staticmethod
    def instance():
        """Get-or-create the settings row"""
        setting = Setting.query.order_by(Setting.id).first()
        if setting is None:
            setting = Setting()
            db.session.add(setting)
            db.session.commit()
        return setting

    @staticmethod
    def current():
        """Settings for rendering; an unsaved blank record when none exists yet"""
        return Setting.query.order_by(Setting.id).first() or Setting()
