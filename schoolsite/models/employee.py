from schoolsite import db
from datetime import datetime

# Category -> position in the staff listing
EMPLOYEE_CATEGORY_ORDER = {
    'PRINCIPAL': 0,
    'HEAD_OF_ADMIN': 1,
    'VICE_PRINCIPAL': 2,
    'TEACHER': 3,
    'ADMINISTRATIVE': 4,
    'STAFF': 5,
}
EMPLOYEE_CATEGORIES = tuple(EMPLOYEE_CATEGORY_ORDER)

class Employee(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    position = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(20), nullable=False, index=True)
    image = db.Column(db.String(255))
    display_order = db.Column(db.Integer, default=5, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def apply_category(self, category):
        self.category = category
        self.display_order = EMPLOYEE_CATEGORY_ORDER.get(category, 5)
