import logging
import posixpath
import re
from dataclasses import dataclass
from urllib.parse import urlsplit

LOGGER = logging.getLogger('portfolio_api.media')

KIND_IMAGE = 'image'
KIND_RAW = 'raw'

DELIVERY_RE = re.compile(r'/(image|raw|video)/upload/(.+)$')
VERSION_RE = re.compile(r'^v\d+$')
TRANSFORMATION_RE = re.compile(r'^[a-z]{1,3}_[^,/]+(,[a-z]{1,3}_[^,/]+)*$')


@dataclass(frozen=True)
class MediaReference:
    identifier: str | None
    kind: str | None


@dataclass(frozen=True)
class CleanupResult:
    identifier: str | None
    attempted: bool
    succeeded: bool
    error: str | None = None


def _strip_transformations(segments):
    for index, segment in enumerate(segments):
        if VERSION_RE.match(segment):
            return segments[index + 1:]
    while len(segments) > 1 and TRANSFORMATION_RE.match(segments[0]):
        segments = segments[1:]
    return segments


def resolve_media_reference(url, folder=None):
    if not isinstance(url, str) or not url.strip():
        return MediaReference(None, None)
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return MediaReference(None, None)
    if not parts.scheme or not parts.netloc:
        return MediaReference(None, None)

    match = DELIVERY_RE.search(parts.path)
    if match:
        kind, rest = match.groups()
        segments = _strip_transformations([s for s in rest.split('/') if s])
        if not segments:
            return MediaReference(None, kind)
        stem = posixpath.splitext(segments[-1])[0]
        if not stem:
            return MediaReference(None, kind)
        return MediaReference('/'.join(segments[:-1] + [stem]), kind)

    filename = posixpath.basename(parts.path)
    stem, ext = posixpath.splitext(filename)
    if not stem:
        return MediaReference(None, None)
    kind = KIND_RAW if ext.lower() == '.pdf' else KIND_IMAGE
    identifier = f'{folder}/{stem}' if folder else stem
    return MediaReference(identifier, kind)


def is_pdf_url(url):
    if not isinstance(url, str):
        return False
    lowered = url.lower()
    return lowered.endswith('.pdf') or '.pdf?' in lowered


def pdf_thumbnail_url(url, width=800, height=1000, page=1, quality='auto'):
    parts = url.split('/upload/')
    if len(parts) != 2:
        return url
    base, path = parts
    transformation = f'w_{width},h_{height},c_fill,q_{quality},pg_{page}'
    return f'{base}/upload/{transformation}/{path}'


def pdf_preview_urls(url, total_pages=1):
    return [
        {
            'page': page,
            'url': pdf_thumbnail_url(url, width=1200, page=page),
            'thumbnail': pdf_thumbnail_url(url, width=400, page=page),
        }
        for page in range(1, (total_pages or 0) + 1)
    ]


def discard_media(store, url, folder=None):
    reference = resolve_media_reference(url, folder)
    if reference.identifier is None:
        LOGGER.info('No media identifier in %r, nothing to delete', url)
        return CleanupResult(None, attempted=False, succeeded=False)
    try:
        store.destroy(reference.identifier, reference.kind)
    except Exception as exc:
        LOGGER.warning('Failed to delete media %s: %s', reference.identifier, exc)
        return CleanupResult(reference.identifier, attempted=True, succeeded=False, error=str(exc))
    return CleanupResult(reference.identifier, attempted=True, succeeded=True)
