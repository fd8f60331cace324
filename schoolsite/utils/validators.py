import re
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlparse

EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


class FormValidator:
    """Collects field-by-field errors for a submitted form.

    Each check returns the cleaned value (or None) and records a message
    under the field name when the value is invalid. Only the first error per
    field is kept.
    """

    def __init__(self, form):
        self.form = form
        self.errors: Dict[str, str] = {}

    def add_error(self, field, message):
        self.errors.setdefault(field, message)

    @property
    def is_valid(self):
        return not self.errors

    def _raw(self, field):
        value = self.form.get(field)
        if isinstance(value, str):
            value = value.strip()
        return value if value not in ('', None) else None

    def string(self, field, required=False, max_length=None, label=None):
        value = self._raw(field)
        label = label or field.replace('_', ' ')
        if value is None:
            if required:
                self.add_error(field, f'The {label} field is required.')
            return None
        if max_length and len(value) > max_length:
            self.add_error(field, f'The {label} may not be greater than {max_length} characters.')
        return value

    def choice(self, field, choices, required=True, label=None):
        value = self.string(field, required=required, label=label)
        if value is not None and value not in choices:
            self.add_error(field, f'The selected {label or field} is invalid.')
            return None
        return value

    def integer(self, field, required=False, minimum=None, default=None, label=None):
        value = self._raw(field)
        label = label or field.replace('_', ' ')
        if value is None:
            if required:
                self.add_error(field, f'The {label} field is required.')
            return default
        try:
            number = int(value)
        except (TypeError, ValueError):
            self.add_error(field, f'The {label} must be an integer.')
            return default
        if minimum is not None and number < minimum:
            self.add_error(field, f'The {label} must be at least {minimum}.')
        return number

    def boolean(self, field, default=False):
        value = self._raw(field)
        if value is None:
            return default
        return str(value).lower() in ('1', 'true', 'on', 'yes')

    def url(self, field, required=False, max_length=255, label=None):
        value = self.string(field, required=required, max_length=max_length, label=label)
        if value is not None:
            parsed = urlparse(value)
            if parsed.scheme not in ('http', 'https') or not parsed.netloc:
                self.add_error(field, f'The {label or field} must be a valid URL.')
        return value

    def email(self, field, required=False, max_length=120, label=None):
        value = self.string(field, required=required, max_length=max_length, label=label)
        if value is not None and not EMAIL_PATTERN.match(value):
            self.add_error(field, f'The {label or field} must be a valid email address.')
        return value


class PasswordValidator:
    def __init__(self, min_length=8):
        self.min_length = min_length
        self.common_passwords = [
            'password', '12345678', 'qwertyuiop', 'admin123', 'welcome1',
            'letmein1', 'sekolah1', 'password1',
        ]

    def check_common_passwords(self, password: str) -> bool:
        """Check if the password is in the list of common passwords."""
        return password.lower() in self.common_passwords

    def validate_password(self, password: Optional[str]) -> Tuple[bool, List[str]]:
        """Validate password strength and return (is_valid, issues)."""
        issues = []
        password = password or ''

        if len(password) < self.min_length:
            issues.append(f"Password must be at least {self.min_length} characters long")

        if not re.search(r'\d', password):
            issues.append("Password must contain at least one number")

        if self.check_common_passwords(password):
            issues.append("Password is too common and easily guessable")

        return len(issues) == 0, issues
