from models import db, utc_today
from datetime import datetime
from sqlalchemy.orm import validates

LEARNING_TYPES = ['course', 'book', 'tutorial', 'article', 'video', 'podcast', 'workshop', 'other']
LEARNING_STATUSES = ['not-started', 'in-progress', 'completed', 'paused']
LEARNING_DIFFICULTIES = ['beginner', 'intermediate', 'advanced']


class LearningItem(db.Model):
    """LearningItem model - a course, book, article or other learning resource"""
    __tablename__ = 'learning_items'

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'),
                        nullable=False, index=True)

    title = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(20), nullable=False)
    category = db.Column(db.String(100), nullable=False)
    subtopic = db.Column(db.String(100))

    # Minutes
    time_spent = db.Column(db.Integer, nullable=False, default=0)

    # Percentage 0-100
    progress = db.Column(db.Integer, nullable=False, default=0)

    status = db.Column(db.String(20), nullable=False, default='not-started')
    date = db.Column(db.Date, nullable=False, default=utc_today, index=True)

    link = db.Column(db.Text)
    resource_link = db.Column(db.Text)
    tags = db.Column(db.Text)
    notes = db.Column(db.Text)
    platform = db.Column(db.String(100))
    difficulty = db.Column(db.String(20))

    is_revision = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = db.relationship('User', back_populates='learning_items')

    @validates('type')
    def validate_type(self, key, value):
        if value not in LEARNING_TYPES:
            raise ValueError(f'Invalid learning item type: {value}')
        return value

    @validates('status')
    def validate_status(self, key, value):
        if value not in LEARNING_STATUSES:
            raise ValueError(f'Invalid status: {value}')
        return value

    @validates('difficulty')
    def validate_difficulty(self, key, value):
        if value is not None and value not in LEARNING_DIFFICULTIES:
            raise ValueError(f'Invalid difficulty: {value}')
        return value

    @validates('progress')
    def validate_progress(self, key, value):
        if value is not None and not (0 <= value <= 100):
            raise ValueError('progress must be between 0 and 100')
        return value

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'title': self.title,
            'type': self.type,
            'category': self.category,
            'subtopic': self.subtopic,
            'time_spent': self.time_spent,
            'progress': self.progress,
            'status': self.status,
            'date': self.date.isoformat() if self.date else None,
            'link': self.link,
            'resource_link': self.resource_link,
            'tags': self.tags,
            'notes': self.notes,
            'platform': self.platform,
            'difficulty': self.difficulty,
            'is_revision': self.is_revision,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f'<LearningItem {self.title} ({self.status})>'
