import json
import os
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from urllib.parse import urlsplit

MAX_TEXT_LENGTH = 10000
MAX_TITLE_LENGTH = 200
MAX_CREDENTIAL_ID_LENGTH = 200
MIN_PASSWORD_LENGTH = 6

IMAGE_TYPES = frozenset({'image/jpeg', 'image/jpg', 'image/png', 'image/webp'})
CERTIFICATE_TYPES = IMAGE_TYPES | {'application/pdf'}

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
UUID_RE = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$',
    re.IGNORECASE,
)


@dataclass
class ValidationResult:
    errors: dict = field(default_factory=dict)

    @property
    def valid(self):
        return not self.errors


def sanitize_text(value):
    if not isinstance(value, str):
        return value
    return value.strip().replace('<', '').replace('>', '')[:MAX_TEXT_LENGTH]


def is_well_formed_url(value):
    if not isinstance(value, str) or not value or any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


def is_email(value):
    return isinstance(value, str) and bool(EMAIL_RE.match(value))


def is_uuid(value):
    return isinstance(value, str) and bool(UUID_RE.match(value))


def parse_date(value):
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None) - parsed.utcoffset()
    return parsed


def parse_bool(val):
    if isinstance(val, bool):
        return val
    if isinstance(val, str):
        return val.strip().lower() == 'true'
    return False


def parse_int(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


NOT_JSON = object()


def try_json(text):
    try:
        return json.loads(text)
    except ValueError:
        return NOT_JSON


def fallback_split(text):
    return [item.strip() for item in text.split(',') if item.strip()]


def parse_string_list(value):
    if isinstance(value, str):
        parsed = try_json(value)
        value = fallback_split(value) if parsed is NOT_JSON else parsed
    if not isinstance(value, list):
        raise ValueError('Value must be an array or comma-separated string')
    return value


def is_allowed_upload(file, allowed_types):
    mimetype = (getattr(file, 'mimetype', None) or '').lower()
    return mimetype in allowed_types


def upload_size(file):
    stream = file.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def _blank(value):
    return not isinstance(value, str) or not value.strip()


def validate_project(data):
    errors = {}

    title = data.get('title')
    if _blank(title):
        errors['title'] = 'Title is required'
    elif len(title) > MAX_TITLE_LENGTH:
        errors['title'] = 'Title must be less than 200 characters'

    if _blank(data.get('descriptionEn')):
        errors['descriptionEn'] = 'English description is required'
    if _blank(data.get('descriptionId')):
        errors['descriptionId'] = 'Indonesian description is required'

    technologies = data.get('technologies')
    if not isinstance(technologies, list) or not technologies:
        errors['technologies'] = 'At least one technology is required'
    elif any(_blank(tech) for tech in technologies):
        errors['technologies'] = 'Each technology must be a non-empty string'

    if data.get('demoUrl') and not is_well_formed_url(data['demoUrl']):
        errors['demoUrl'] = 'Invalid demo URL format'
    if data.get('githubUrl') and not is_well_formed_url(data['githubUrl']):
        errors['githubUrl'] = 'Invalid GitHub URL format'

    order = data.get('order')
    if order is not None and parse_int(order) is None:
        errors['order'] = 'Order must be an integer'

    return ValidationResult(errors)


def validate_certification(data):
    errors = {}

    if _blank(data.get('title')):
        errors['title'] = 'Title is required'
    if _blank(data.get('issuer')):
        errors['issuer'] = 'Issuer is required'

    issued_at = data.get('issuedAt')
    if not issued_at:
        errors['issuedAt'] = 'Issued date is required'
    elif parse_date(issued_at) is None:
        errors['issuedAt'] = 'Invalid date format'

    if data.get('expirationAt') and parse_date(data['expirationAt']) is None:
        errors['expirationAt'] = 'Invalid date format'

    if data.get('credentialUrl') and not is_well_formed_url(data['credentialUrl']):
        errors['credentialUrl'] = 'Invalid Credential URL format'

    credential_id = data.get('credentialId')
    if isinstance(credential_id, str) and len(credential_id) > MAX_CREDENTIAL_ID_LENGTH:
        errors['credentialId'] = 'credentialId must be less than 200 characters'

    if 'skills' in data and data['skills'] is not None:
        skills = data['skills']
        if not isinstance(skills, list):
            errors['skills'] = 'Skills must be an array of strings'
        elif any(_blank(skill) for skill in skills):
            errors['skills'] = 'Each skill must be a non-empty string'

    return ValidationResult(errors)


def validate_login(data):
    errors = {}

    email = data.get('email')
    if _blank(email):
        errors['email'] = 'Email is required'
    elif not is_email(email):
        errors['email'] = 'Invalid email format'

    password = data.get('password')
    if _blank(password):
        errors['password'] = 'Password is required'
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors['password'] = 'Password must be at least 6 characters'

    return ValidationResult(errors)
