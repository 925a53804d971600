from models import db
from datetime import datetime
from flask_login import UserMixin
from sqlalchemy.orm import validates
from werkzeug.security import generate_password_hash, check_password_hash
import re

AUTH_PROVIDERS = ['local', 'google', 'github']


class User(UserMixin, db.Model):
    """User model - local or OAuth account owning all tracked data"""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)

    # Null for OAuth-only accounts
    password_hash = db.Column(db.String(255))

    # local, google, github
    auth_provider = db.Column(db.String(20), nullable=False, default='local')
    provider_id = db.Column(db.String(255))

    profile_picture = db.Column(db.Text)
    is_email_verified = db.Column(db.Boolean, nullable=False, default=False)
    last_login_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    problems = db.relationship('Problem', back_populates='user', lazy='dynamic',
                               cascade='all, delete-orphan')
    learning_items = db.relationship('LearningItem', back_populates='user', lazy='dynamic',
                                     cascade='all, delete-orphan')
    revision_items = db.relationship('RevisionItem', back_populates='user', lazy='dynamic',
                                     cascade='all, delete-orphan')
    roadmaps = db.relationship('Roadmap', back_populates='user', lazy='dynamic',
                               cascade='all, delete-orphan')

    __table_args__ = (
        db.UniqueConstraint('auth_provider', 'provider_id', name='uq_user_provider'),
    )

    @validates('email')
    def validate_email(self, key, email):
        if not email:
            raise ValueError('Email is required')
        pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        if not re.match(pattern, email):
            raise ValueError(f'Invalid email format: {email}')
        return email.lower()

    @validates('auth_provider')
    def validate_auth_provider(self, key, provider):
        if provider not in AUTH_PROVIDERS:
            raise ValueError(f'Invalid auth provider: {provider}')
        return provider

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'auth_provider': self.auth_provider,
            'profile_picture': self.profile_picture,
            'is_email_verified': self.is_email_verified,
            'last_login_at': self.last_login_at.isoformat() if self.last_login_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<User {self.email}>'
