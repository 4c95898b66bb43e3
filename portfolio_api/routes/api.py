from functools import wraps

from flask import Blueprint, current_app, g, jsonify, request

from portfolio_api import db
from portfolio_api.errors import AuthenticationFailed
from portfolio_api.services.auth import AuthService
from portfolio_api.services.certifications import (
    CertificationInput,
    CertificationQuery,
    CertificationService,
)
from portfolio_api.services.projects import ProjectInput, ProjectQuery, ProjectService

api_bp = Blueprint('api', __name__)


# --- Service wiring ---
def auth_service():
    return AuthService(
        db.session,
        current_app.config['JWT_SECRET'],
        current_app.config['JWT_EXPIRES_HOURS'],
    )


def project_service():
    return ProjectService(db.session, current_app.extensions['media_store'])


def certification_service():
    return CertificationService(db.session, current_app.extensions['media_store'])


# --- Auth Helpers ---
def admin_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get('Authorization', '')
        if not auth_header.startswith('Bearer '):
            raise AuthenticationFailed('Access denied. No token provided')
        token = auth_header.split(' ', 1)[1].strip()
        claims = auth_service().decode_token(token)
        g.user_id = claims['userId']
        return f(*args, **kwargs)
    return decorated


@api_bp.route('/health', methods=['GET'])
def health():
    return jsonify({'status': 'OK', 'message': 'Server is running'})


# --- Auth Routes ---
@api_bp.route('/auth/login', methods=['POST'])
def login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    return jsonify(auth_service().login(data.get('email'), data.get('password')))


@api_bp.route('/auth/me', methods=['GET'])
@admin_required
def me():
    return jsonify({'user': auth_service().me(g.user_id)})


# --- Project CRUD ---
@api_bp.route('/projects', methods=['GET'])
def get_projects():
    query = ProjectQuery.from_args(request.args)
    return jsonify(project_service().list(query, request.base_url))


@api_bp.route('/projects/<project_id>', methods=['GET'])
def get_project(project_id):
    return jsonify({'project': project_service().get(project_id).to_dict()})


@api_bp.route('/projects', methods=['POST'])
@admin_required
def create_project():
    outcome = project_service().create(
        ProjectInput.from_form(request.form), request.files.get('image')
    )
    return jsonify({'message': 'Project created', 'project': outcome.record.to_dict()}), 201


@api_bp.route('/projects/<project_id>', methods=['PUT'])
@admin_required
def update_project(project_id):
    outcome = project_service().update(
        project_id, ProjectInput.from_form(request.form), request.files.get('image')
    )
    return jsonify({'message': 'Project updated', 'project': outcome.record.to_dict()})


@api_bp.route('/projects/<project_id>', methods=['DELETE'])
@admin_required
def delete_project(project_id):
    project_service().delete(project_id)
    return jsonify({'message': 'Project deleted successfully'})


# --- Certification CRUD ---
@api_bp.route('/certifications', methods=['GET'])
def get_certifications():
    query = CertificationQuery.from_args(request.args)
    return jsonify(certification_service().list(query, request.base_url))


@api_bp.route('/certifications/<cert_id>', methods=['GET'])
def get_certification(cert_id):
    return jsonify({'certification': certification_service().get(cert_id).to_dict()})


@api_bp.route('/certifications', methods=['POST'])
@admin_required
def create_certification():
    outcome = certification_service().create(
        CertificationInput.from_form(request.form), request.files.get('image')
    )
    return jsonify({
        'message': 'Certification created',
        'certification': outcome.record.to_dict(),
    }), 201


@api_bp.route('/certifications/<cert_id>', methods=['PUT'])
@admin_required
def update_certification(cert_id):
    outcome = certification_service().update(
        cert_id, CertificationInput.from_form(request.form), request.files.get('image')
    )
    return jsonify({
        'message': 'Certification updated',
        'certification': outcome.record.to_dict(),
    })


@api_bp.route('/certifications/<cert_id>', methods=['DELETE'])
@admin_required
def delete_certification(cert_id):
    certification_service().delete(cert_id)
    return jsonify({'message': 'Certification deleted successfully'})
