from models import db
from datetime import datetime
from sqlalchemy.orm import validates

SUBTOPIC_DIFFICULTIES = ['beginner', 'intermediate', 'advanced']


class Subtopic(db.Model):
    """Subtopic model - a single learning objective inside a topic"""
    __tablename__ = 'subtopics'

    id = db.Column(db.Integer, primary_key=True)

    topic_id = db.Column(db.Integer, db.ForeignKey('topics.id', ondelete='CASCADE'),
                         nullable=False, index=True)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    order = db.Column(db.Integer, nullable=False, default=0)

    is_completed = db.Column(db.Boolean, nullable=False, default=False)
    completed_date = db.Column(db.Date)

    difficulty = db.Column(db.String(20), default='beginner')

    # Minutes
    estimated_time = db.Column(db.Integer)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    topic = db.relationship('Topic', back_populates='subtopics')

    @validates('difficulty')
    def validate_difficulty(self, key, value):
        if value is not None and value not in SUBTOPIC_DIFFICULTIES:
            raise ValueError(f'Invalid difficulty: {value}')
        return value

    def to_dict(self):
        return {
            'id': self.id,
            'topic_id': self.topic_id,
            'title': self.title,
            'description': self.description,
            'order': self.order,
            'is_completed': self.is_completed,
            'completed_date': self.completed_date.isoformat() if self.completed_date else None,
            'difficulty': self.difficulty,
            'estimated_time': self.estimated_time
        }

    def __repr__(self):
        return f'<Subtopic {self.title}>'
