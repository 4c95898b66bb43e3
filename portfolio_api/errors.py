import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

LOGGER = logging.getLogger('portfolio_api.errors')


class ApiError(Exception):
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None, errors=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.errors = errors

    def to_dict(self):
        body = {'message': self.message}
        if self.errors:
            body['errors'] = dict(self.errors)
        return body


class InvalidIdentifier(ApiError):
    status_code = 400
    message = 'Invalid ID format'


class ValidationFailed(ApiError):
    status_code = 400
    message = 'Validation failed'


class MissingFile(ApiError):
    status_code = 400
    message = 'File is required'


class UnsupportedMediaType(ApiError):
    status_code = 400
    message = 'Unsupported file type'


class FileTooLarge(ApiError):
    status_code = 413
    message = 'File too large'


class AuthenticationFailed(ApiError):
    status_code = 401
    message = 'Invalid credentials'


class RecordNotFound(ApiError):
    status_code = 404
    message = 'Not found'


def register_error_handlers(app, db):
    """Route every failure through the same ``{message, errors?}`` envelope."""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        # routing redirects are HTTPExceptions too
        if error.code is None or error.code < 400:
            return error
        return jsonify({'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        LOGGER.exception('Unhandled error: %s', error)
        db.session.rollback()
        return jsonify({'message': ApiError.message}), 500
