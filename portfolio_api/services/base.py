import logging
from dataclasses import dataclass

from sqlalchemy import asc, desc
from sqlalchemy.exc import SQLAlchemyError

from portfolio_api.errors import (
    FileTooLarge,
    InvalidIdentifier,
    MissingFile,
    RecordNotFound,
    UnsupportedMediaType,
)
from portfolio_api.services.media import CleanupResult, discard_media
from portfolio_api.services.pagination import compute_skip, pagination_response
from portfolio_api.services.validation import is_allowed_upload, is_uuid, sanitize_text, upload_size

LOGGER = logging.getLogger('portfolio_api.services')


class _Missing:
    def __bool__(self):
        return False

    def __repr__(self):
        return 'MISSING'


MISSING = _Missing()


class ResourceInput:
    FORM_FIELDS = {}
    TEXT_FIELDS = ()

    @classmethod
    def from_form(cls, form):
        return cls(**{attr: form.get(name, MISSING) for name, attr in cls.FORM_FIELDS.items()})

    def supplied(self):
        values = {}
        for name, attr in self.FORM_FIELDS.items():
            value = getattr(self, attr)
            if value is MISSING:
                continue
            values[name] = sanitize_text(value) if name in self.TEXT_FIELDS else value
        return values


@dataclass
class ListQuery:
    page: int
    limit: int
    search: str | None = None
    sort_by: str | None = None
    sort_order: str = 'desc'

    @staticmethod
    def common_args(args):
        search = (args.get('search') or '').strip() or None
        sort_order = 'asc' if (args.get('sortOrder') or '').lower() == 'asc' else 'desc'
        return {'search': search, 'sort_by': args.get('sortBy') or None, 'sort_order': sort_order}


@dataclass
class ServiceOutcome:
    record: object
    cleanup: CleanupResult | None = None


def is_blank(value):
    return value is None or value is MISSING or (isinstance(value, str) and not value.strip())


class ResourceService:
    model = None
    label = 'Resource'
    folder = None
    allowed_types = frozenset()
    allowed_types_message = 'Unsupported file type'
    required_file_label = 'Image'
    max_file_size = None
    sort_fields = {}

    def __init__(self, session, media_store):
        self.session = session
        self.media = media_store

    def default_ordering(self):
        raise NotImplementedError

    def ordering(self, query):
        column = self.sort_fields.get(query.sort_by)
        if column is None:
            return self.default_ordering()
        return [asc(column) if query.sort_order == 'asc' else desc(column)]

    def paginate(self, statement, query, base_url=''):
        total_items = statement.count()
        records = (
            statement.order_by(*self.ordering(query))
            .offset(compute_skip(query.page, query.limit))
            .limit(query.limit)
            .all()
        )
        return pagination_response(
            [record.to_dict() for record in records],
            query.page,
            query.limit,
            total_items,
            base_url,
        )

    def get(self, record_id):
        if not is_uuid(record_id):
            raise InvalidIdentifier(f'Invalid {self.label.lower()} ID format')
        record = self.session.get(self.model, record_id)
        if record is None:
            raise RecordNotFound(f'{self.label} not found')
        return record

    def check_file(self, file, required):
        if file is None or not getattr(file, 'filename', None):
            if required:
                raise MissingFile(f'{self.required_file_label} is required')
            return None
        if not is_allowed_upload(file, self.allowed_types):
            raise UnsupportedMediaType(self.allowed_types_message)
        if self.max_file_size is not None and upload_size(file) > self.max_file_size:
            limit_mb = self.max_file_size // (1024 * 1024)
            raise FileTooLarge(f'File too large. Maximum size is {limit_mb} MB')
        return file

    def persist(self, uploaded=None):
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            if uploaded is not None:
                discard_media(self.media, uploaded.url, self.folder)
            raise

    def delete(self, record_id):
        record = self.get(record_id)
        cleanup = discard_media(self.media, record.image, self.folder)
        self.session.delete(record)
        self.session.commit()
        LOGGER.info('Deleted %s %s', self.label.lower(), record_id)
        return ServiceOutcome(record, cleanup)


def apply_fields(record, values):
    for attr, value in values.items():
        setattr(record, attr, value)
    return record
