from models import db
from datetime import datetime
from sqlalchemy.orm import validates
import re

DEFAULT_ROADMAP_COLOR = '#3B82F6'


class Roadmap(db.Model):
    """Roadmap model - a user-defined learning path made of topics"""
    __tablename__ = 'roadmaps'

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'),
                        nullable=False, index=True)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    color = db.Column(db.String(7), default=DEFAULT_ROADMAP_COLOR)
    is_public = db.Column(db.Boolean, nullable=False, default=False)
    last_visited = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = db.relationship('User', back_populates='roadmaps')
    topics = db.relationship('Topic', back_populates='roadmap', order_by='Topic.order',
                             cascade='all, delete-orphan')

    @validates('color')
    def validate_color(self, key, color):
        if color is not None and not re.match(r'^#[0-9A-Fa-f]{6}$', color):
            raise ValueError(f'Invalid color format: {color}')
        return color

    @property
    def is_completed(self):
        """A roadmap is complete once it has topics and all of them are completed"""
        return bool(self.topics) and all(topic.is_completed for topic in self.topics)

    def to_dict(self, include_topics=True):
        data = {
            'id': self.id,
            'user_id': self.user_id,
            'title': self.title,
            'description': self.description,
            'color': self.color,
            'is_public': self.is_public,
            'is_completed': self.is_completed,
            'last_visited': self.last_visited.isoformat() if self.last_visited else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
        if include_topics:
            data['topics'] = [topic.to_dict() for topic in self.topics]
        return data

    def __repr__(self):
        return f'<Roadmap {self.title}>'
