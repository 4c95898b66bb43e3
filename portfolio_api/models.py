import uuid
from datetime import datetime, timezone

from portfolio_api import db


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id():
    return str(uuid.uuid4())


def _iso(value):
    return value.isoformat() if value else None


class User(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_public_dict(self):
        return {'id': self.id, 'email': self.email, 'name': self.name}


class Project(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    title = db.Column(db.String(200), nullable=False)
    description_en = db.Column(db.Text, nullable=False)
    description_id = db.Column(db.Text, nullable=False)
    image = db.Column(db.String(500), nullable=False)
    technologies = db.Column(db.JSON, nullable=False, default=list)
    demo_url = db.Column(db.Text)
    github_url = db.Column(db.Text)
    featured = db.Column(db.Boolean, default=False, nullable=False)
    order = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'descriptionEn': self.description_en,
            'descriptionId': self.description_id,
            'image': self.image,
            'technologies': list(self.technologies or []),
            'demoUrl': self.demo_url,
            'githubUrl': self.github_url,
            'featured': self.featured,
            'order': self.order,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }


class Certification(db.Model):
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    title = db.Column(db.Text, nullable=False)
    issuer = db.Column(db.Text, nullable=False)
    issued_at = db.Column(db.DateTime, nullable=False)
    expiration_at = db.Column(db.DateTime)
    credential_url = db.Column(db.Text)
    credential_id = db.Column(db.String(200))
    skills = db.Column(db.JSON, nullable=False, default=list)
    image = db.Column(db.String(500), nullable=False)
    # Display fields derived from `image`; rewritten whenever the image changes.
    is_pdf = db.Column(db.Boolean, default=False, nullable=False)
    pdf_pages = db.Column(db.Integer)
    thumbnail = db.Column(db.String(500))
    preview_url = db.Column(db.String(500))
    previews = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'issuer': self.issuer,
            'issuedAt': _iso(self.issued_at),
            'expirationAt': _iso(self.expiration_at),
            'credentialUrl': self.credential_url,
            'credentialId': self.credential_id,
            'skills': list(self.skills or []),
            'image': self.image,
            'isPDF': self.is_pdf,
            'pdfPages': self.pdf_pages,
            'thumbnail': self.thumbnail,
            'previewUrl': self.preview_url,
            'previews': list(self.previews or []),
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }
