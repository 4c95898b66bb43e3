import math

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def _to_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def get_pagination_params(args, default_limit=DEFAULT_LIMIT, max_limit=MAX_LIMIT):
    page = _to_int(args.get('page'))
    limit = _to_int(args.get('limit'))

    if page is None or page < 1:
        page = DEFAULT_PAGE
    if limit is None or limit < 1:
        limit = default_limit
    if limit > max_limit:
        limit = max_limit

    return page, limit


def compute_skip(page, limit):
    return (page - 1) * limit


def _link(base_url, page, limit):
    return f'{base_url}?page={page}&limit={limit}'


def compute_pagination(page, limit, total_items, base_url=''):
    total_pages = math.ceil(total_items / limit) if total_items else 0
    has_next_page = page < total_pages
    has_prev_page = page > 1 and total_pages > 0

    pagination = {
        'currentPage': page,
        'totalPages': total_pages,
        'totalItems': total_items,
        'itemsPerPage': limit,
        'hasNextPage': has_next_page,
        'hasPrevPage': has_prev_page,
        'nextPage': page + 1 if has_next_page else None,
        'prevPage': page - 1 if has_prev_page else None,
    }
    links = {
        'self': _link(base_url, page, limit) if base_url else None,
        'first': _link(base_url, 1, limit) if base_url else None,
        'last': _link(base_url, total_pages, limit) if base_url else None,
        'next': _link(base_url, page + 1, limit) if base_url and has_next_page else None,
        'prev': _link(base_url, page - 1, limit) if base_url and has_prev_page else None,
    }
    return pagination, links


def pagination_response(data, page, limit, total_items, base_url=''):
    pagination, links = compute_pagination(page, limit, total_items, base_url)
    return {
        'success': True,
        'data': data,
        'pagination': pagination,
        'links': links,
    }
