import logging
from dataclasses import dataclass

from sqlalchemy import Text, cast, or_

from portfolio_api.errors import ValidationFailed
from portfolio_api.models import Certification
from portfolio_api.services.base import (
    MISSING,
    ListQuery,
    ResourceInput,
    ResourceService,
    ServiceOutcome,
    apply_fields,
    is_blank,
)
from portfolio_api.services.media import (
    KIND_RAW,
    MediaReference,
    discard_media,
    is_pdf_url,
    pdf_preview_urls,
    pdf_thumbnail_url,
    resolve_media_reference,
)
from portfolio_api.services.media_store import CERTIFICATION_FOLDER, CERTIFICATION_MAX_BYTES
from portfolio_api.services.pagination import get_pagination_params
from portfolio_api.services.validation import (
    CERTIFICATE_TYPES,
    parse_date,
    parse_string_list,
    validate_certification,
)

LOGGER = logging.getLogger('portfolio_api.certifications')

SKILLS_MESSAGE = 'Skills must be an array or comma-separated string'
PDF_MIMETYPE = 'application/pdf'


@dataclass
class CertificationQuery(ListQuery):
    @classmethod
    def from_args(cls, args):
        page, limit = get_pagination_params(args, default_limit=10, max_limit=50)
        return cls(page=page, limit=limit, **cls.common_args(args))


@dataclass
class CertificationInput(ResourceInput):
    title: object = MISSING
    issuer: object = MISSING
    issued_at: object = MISSING
    expiration_at: object = MISSING
    credential_url: object = MISSING
    credential_id: object = MISSING
    skills: object = MISSING

    FORM_FIELDS = {
        'title': 'title',
        'issuer': 'issuer',
        'issuedAt': 'issued_at',
        'expirationAt': 'expiration_at',
        'credentialUrl': 'credential_url',
        'credentialId': 'credential_id',
        'skills': 'skills',
    }
    TEXT_FIELDS = ('title', 'issuer', 'credentialId')


def derive_display_fields(url, media_store, folder=CERTIFICATION_FOLDER, uploaded=None):
    # A fresh upload carries the provider's own identifier; stored URLs are parsed.
    if uploaded is not None:
        reference = MediaReference(uploaded.public_id, uploaded.resource_type)
    else:
        reference = resolve_media_reference(url, folder)
    fields = {
        'is_pdf': False,
        'pdf_pages': None,
        'thumbnail': url,
        'preview_url': url,
        'previews': [],
    }
    if not (is_pdf_url(url) or reference.kind == KIND_RAW):
        return fields

    fields['is_pdf'] = True
    if reference.identifier is not None:
        pages = media_store.page_count(reference.identifier, reference.kind or KIND_RAW)
        fields['pdf_pages'] = pages
        fields['thumbnail'] = pdf_thumbnail_url(url, width=400)
        fields['previews'] = pdf_preview_urls(url, pages)
    return fields


def _skills(value):
    try:
        return parse_string_list(value)
    except ValueError:
        raise ValidationFailed(SKILLS_MESSAGE, {'skills': SKILLS_MESSAGE}) from None


def _validated(payload):
    result = validate_certification(payload)
    if not result.valid:
        raise ValidationFailed(errors=result.errors)


def _columns(payload):
    return {
        'title': payload['title'],
        'issuer': payload['issuer'],
        'issued_at': parse_date(payload['issuedAt']),
        'expiration_at': parse_date(payload.get('expirationAt')),
        'credential_url': payload.get('credentialUrl') or None,
        'credential_id': payload.get('credentialId') or None,
        'skills': payload.get('skills') or [],
    }


def _resource_type(file):
    return KIND_RAW if (file.mimetype or '').lower() == PDF_MIMETYPE else 'image'


class CertificationService(ResourceService):
    model = Certification
    label = 'Certification'
    folder = CERTIFICATION_FOLDER
    allowed_types = CERTIFICATE_TYPES
    allowed_types_message = 'Only images (JPG, PNG, WebP) and PDF files are allowed'
    required_file_label = 'Image or PDF'
    max_file_size = CERTIFICATION_MAX_BYTES
    sort_fields = {
        'title': Certification.title,
        'issuer': Certification.issuer,
        'issuedAt': Certification.issued_at,
        'createdAt': Certification.created_at,
    }

    def default_ordering(self):
        return [Certification.issued_at.desc()]

    def list(self, query, base_url=''):
        statement = self.session.query(Certification)
        if query.search:
            pattern = f'%{query.search}%'
            statement = statement.filter(
                or_(
                    Certification.title.ilike(pattern),
                    Certification.issuer.ilike(pattern),
                    cast(Certification.skills, Text).ilike(pattern),
                )
            )
        return self.paginate(statement, query, base_url)

    def _upload(self, file):
        return self.media.upload(file, self.folder, _resource_type(file))

    def create(self, data, file):
        payload = data.supplied()
        skills = payload.get('skills')
        payload['skills'] = [] if skills is None else _skills(skills)
        _validated(payload)
        file = self.check_file(file, required=True)

        uploaded = self._upload(file)
        certification = Certification(
            image=uploaded.url,
            **_columns(payload),
            **derive_display_fields(uploaded.url, self.media, self.folder, uploaded),
        )
        self.session.add(certification)
        self.persist(uploaded)
        LOGGER.info('Created certification %s', certification.id)
        return ServiceOutcome(certification)

    def update(self, record_id, data, file):
        certification = self.get(record_id)
        supplied = data.supplied()

        payload = {
            'title': certification.title,
            'issuer': certification.issuer,
            'issuedAt': certification.issued_at,
            'expirationAt': certification.expiration_at,
            'credentialUrl': certification.credential_url,
            'credentialId': certification.credential_id,
            'skills': certification.skills,
        }
        for name in ('title', 'issuer', 'issuedAt'):
            if not is_blank(supplied.get(name)):
                payload[name] = supplied[name]
        for name in ('expirationAt', 'credentialUrl', 'credentialId'):
            if name in supplied:
                payload[name] = supplied[name] or None
        if 'skills' in supplied:
            payload['skills'] = _skills(supplied['skills'])
        _validated(payload)
        file = self.check_file(file, required=False)

        uploaded = None
        previous_image = certification.image
        if file is not None:
            uploaded = self._upload(file)
            certification.image = uploaded.url
            apply_fields(
                certification,
                derive_display_fields(uploaded.url, self.media, self.folder, uploaded),
            )
        apply_fields(certification, _columns(payload))
        self.persist(uploaded)

        cleanup = None
        if uploaded is not None:
            cleanup = discard_media(self.media, previous_image, self.folder)
        LOGGER.info('Updated certification %s', certification.id)
        return ServiceOutcome(certification, cleanup)
