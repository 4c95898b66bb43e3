import logging
from dataclasses import dataclass

import cloudinary
import cloudinary.api
import cloudinary.exceptions
import cloudinary.uploader

LOGGER = logging.getLogger('portfolio_api.media_store')

PROJECT_FOLDER = 'portfolio-projects'
CERTIFICATION_FOLDER = 'portfolio-certifications'

# Upload size caps per resource; the request-wide MAX_CONTENT_LENGTH is the outer bound.
PROJECT_MAX_BYTES = 5 * 1024 * 1024
CERTIFICATION_MAX_BYTES = 10 * 1024 * 1024

PROJECT_TRANSFORMATION = [{'width': 1200, 'height': 800, 'crop': 'limit'}]


class MediaStoreError(Exception):
    pass


@dataclass(frozen=True)
class UploadedMedia:
    url: str
    public_id: str
    resource_type: str


class CloudinaryMediaStore:
    def __init__(self, cloud_name=None, api_key=None, api_secret=None):
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )

    @classmethod
    def from_config(cls, config):
        return cls(
            cloud_name=config.get('CLOUDINARY_CLOUD_NAME'),
            api_key=config.get('CLOUDINARY_API_KEY'),
            api_secret=config.get('CLOUDINARY_API_SECRET'),
        )

    def upload(self, file, folder, resource_type='image', transformation=None):
        options = {'folder': folder, 'resource_type': resource_type}
        if transformation:
            options['transformation'] = transformation
        try:
            result = cloudinary.uploader.upload(file.stream, **options)
        except cloudinary.exceptions.Error as exc:
            raise MediaStoreError(f'Upload failed: {exc}') from exc
        return UploadedMedia(
            url=result['secure_url'],
            public_id=result['public_id'],
            resource_type=result.get('resource_type', resource_type),
        )

    def destroy(self, public_id, resource_type='image'):
        try:
            result = cloudinary.uploader.destroy(
                public_id, resource_type=resource_type, invalidate=True
            )
        except cloudinary.exceptions.Error as exc:
            raise MediaStoreError(f'Delete failed: {exc}') from exc
        outcome = result.get('result')
        if outcome != 'ok':
            raise MediaStoreError(f'Delete of {public_id} returned {outcome!r}')
        return outcome

    def page_count(self, public_id, resource_type='raw'):
        try:
            result = cloudinary.api.resource(public_id, resource_type=resource_type, pages=True)
        except cloudinary.exceptions.Error as exc:
            LOGGER.error('Error getting document metadata for %s: %s', public_id, exc)
            return 1
        return result.get('pages') or 1
