import logging
from dataclasses import dataclass

from sqlalchemy import Text, cast, or_

from portfolio_api.errors import ValidationFailed
from portfolio_api.models import Project
from portfolio_api.services.base import (
    MISSING,
    ListQuery,
    ResourceInput,
    ResourceService,
    ServiceOutcome,
    apply_fields,
    is_blank,
)
from portfolio_api.services.media import discard_media
from portfolio_api.services.media_store import (
    PROJECT_FOLDER,
    PROJECT_MAX_BYTES,
    PROJECT_TRANSFORMATION,
)
from portfolio_api.services.pagination import get_pagination_params
from portfolio_api.services.validation import (
    IMAGE_TYPES,
    parse_bool,
    parse_int,
    parse_string_list,
    validate_project,
)

LOGGER = logging.getLogger('portfolio_api.projects')

TECHNOLOGIES_MESSAGE = 'Technologies must be an array or comma-separated string'


@dataclass
class ProjectQuery(ListQuery):
    featured: bool = False

    @classmethod
    def from_args(cls, args):
        page, limit = get_pagination_params(args, default_limit=10, max_limit=100)
        return cls(
            page=page,
            limit=limit,
            featured=(args.get('featured') or '').lower() == 'true',
            **cls.common_args(args),
        )


@dataclass
class ProjectInput(ResourceInput):
    title: object = MISSING
    description_en: object = MISSING
    description_id: object = MISSING
    technologies: object = MISSING
    demo_url: object = MISSING
    github_url: object = MISSING
    featured: object = MISSING
    order: object = MISSING

    FORM_FIELDS = {
        'title': 'title',
        'descriptionEn': 'description_en',
        'descriptionId': 'description_id',
        'technologies': 'technologies',
        'demoUrl': 'demo_url',
        'githubUrl': 'github_url',
        'featured': 'featured',
        'order': 'order',
    }
    TEXT_FIELDS = ('title', 'descriptionEn', 'descriptionId')


def _technologies(value):
    try:
        return parse_string_list(value)
    except ValueError:
        raise ValidationFailed(TECHNOLOGIES_MESSAGE, {'technologies': TECHNOLOGIES_MESSAGE}) from None


def _validated(payload):
    result = validate_project(payload)
    if not result.valid:
        raise ValidationFailed(errors=result.errors)


def _columns(payload):
    return {
        'title': payload['title'],
        'description_en': payload['descriptionEn'],
        'description_id': payload['descriptionId'],
        'technologies': payload['technologies'],
        'demo_url': payload.get('demoUrl') or None,
        'github_url': payload.get('githubUrl') or None,
        'featured': parse_bool(payload.get('featured', False)),
        'order': parse_int(payload['order']) if payload.get('order') is not None else 0,
    }


class ProjectService(ResourceService):
    model = Project
    label = 'Project'
    folder = PROJECT_FOLDER
    allowed_types = IMAGE_TYPES
    allowed_types_message = 'Only images (JPG, PNG, WebP) are allowed'
    max_file_size = PROJECT_MAX_BYTES
    sort_fields = {
        'title': Project.title,
        'order': Project.order,
        'createdAt': Project.created_at,
        'updatedAt': Project.updated_at,
    }

    def default_ordering(self):
        return [Project.order.asc(), Project.created_at.desc()]

    def list(self, query, base_url=''):
        statement = self.session.query(Project)
        if query.featured:
            statement = statement.filter(Project.featured.is_(True))
        if query.search:
            pattern = f'%{query.search}%'
            statement = statement.filter(
                or_(
                    Project.title.ilike(pattern),
                    Project.description_en.ilike(pattern),
                    Project.description_id.ilike(pattern),
                    cast(Project.technologies, Text).ilike(pattern),
                )
            )
        return self.paginate(statement, query, base_url)

    def create(self, data, file):
        payload = data.supplied()
        technologies = payload.get('technologies')
        payload['technologies'] = [] if is_blank(technologies) else _technologies(technologies)
        if is_blank(payload.get('order')):
            payload['order'] = None
        _validated(payload)
        file = self.check_file(file, required=True)

        uploaded = self.media.upload(file, self.folder, 'image', PROJECT_TRANSFORMATION)
        project = Project(image=uploaded.url, **_columns(payload))
        self.session.add(project)
        self.persist(uploaded)
        LOGGER.info('Created project %s', project.id)
        return ServiceOutcome(project)

    def update(self, record_id, data, file):
        project = self.get(record_id)
        supplied = data.supplied()

        payload = {
            'title': project.title,
            'descriptionEn': project.description_en,
            'descriptionId': project.description_id,
            'technologies': project.technologies,
            'demoUrl': project.demo_url,
            'githubUrl': project.github_url,
            'featured': project.featured,
            'order': project.order,
        }
        for name in ('title', 'descriptionEn', 'descriptionId', 'order'):
            if not is_blank(supplied.get(name)):
                payload[name] = supplied[name]
        if not is_blank(supplied.get('technologies')):
            payload['technologies'] = _technologies(supplied['technologies'])
        for name in ('demoUrl', 'githubUrl'):
            if name in supplied:
                payload[name] = supplied[name] or None
        if 'featured' in supplied:
            payload['featured'] = parse_bool(supplied['featured'])
        _validated(payload)
        file = self.check_file(file, required=False)

        uploaded = None
        previous_image = project.image
        if file is not None:
            uploaded = self.media.upload(file, self.folder, 'image', PROJECT_TRANSFORMATION)
            project.image = uploaded.url
        apply_fields(project, _columns(payload))
        self.persist(uploaded)

        cleanup = None
        if uploaded is not None:
            cleanup = discard_media(self.media, previous_image, self.folder)
        LOGGER.info('Updated project %s', project.id)
        return ServiceOutcome(project, cleanup)
