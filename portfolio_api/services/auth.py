import logging
from datetime import datetime, timedelta, timezone

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from portfolio_api.errors import AuthenticationFailed, RecordNotFound, ValidationFailed
from portfolio_api.models import User
from portfolio_api.services.validation import validate_login

LOGGER = logging.getLogger('portfolio_api.auth')

ALGORITHM = 'HS256'


class AuthService:
    def __init__(self, session, secret, expires_hours=12):
        self.session = session
        self.secret = secret
        self.expires_hours = expires_hours

    def issue_token(self, user):
        payload = {
            'userId': user.id,
            'email': user.email,
            'exp': datetime.now(timezone.utc) + timedelta(hours=self.expires_hours),
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def decode_token(self, token):
        try:
            payload = jwt.decode(
                token, self.secret, algorithms=[ALGORITHM], options={'require': ['exp']}
            )
        except jwt.PyJWTError:
            raise AuthenticationFailed('Invalid or expired token') from None
        if not payload.get('userId'):
            raise AuthenticationFailed('Invalid or expired token')
        return payload

    def login(self, email, password):
        result = validate_login({'email': email, 'password': password})
        if not result.valid:
            raise ValidationFailed(errors=result.errors)

        user = self.session.query(User).filter_by(email=email).first()
        if user is None or not check_password_hash(user.password_hash, password):
            LOGGER.info('Rejected login for %s', email)
            raise AuthenticationFailed('Invalid credentials')

        return {'token': self.issue_token(user), 'user': user.to_public_dict()}

    def me(self, user_id):
        user = self.session.get(User, user_id)
        if user is None:
            raise RecordNotFound('User not found')
        return user.to_public_dict()

    def seed_admin(self, email, password, name='Admin'):
        """Create the admin user once; an existing user is returned untouched."""
        user = self.session.query(User).filter_by(email=email).first()
        if user is not None:
            return user, False
        user = User(email=email, password_hash=generate_password_hash(password), name=name)
        self.session.add(user)
        self.session.commit()
        return user, True
