from models import db
from datetime import datetime
from sqlalchemy.orm import validates

PLATFORMS = ['LeetCode', 'HackerRank', 'Codeforces', 'AtCoder', 'CodeChef', 'other']
DIFFICULTIES = ['easy', 'medium', 'hard']
OUTCOMES = ['solved', 'attempted', 'stuck', 'skipped', 'hints', 'failed']

# 24 hours in minutes
MAX_TIME_SPENT = 1440


class Problem(db.Model):
    """Problem model - a single coding practice attempt"""
    __tablename__ = 'problems'

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'),
                        nullable=False, index=True)

    title = db.Column(db.String(200), nullable=False)
    platform = db.Column(db.String(20), nullable=False)
    difficulty = db.Column(db.String(10), nullable=False)
    topic = db.Column(db.String(100), nullable=False)

    # Minutes
    time_spent = db.Column(db.Integer, nullable=False, default=0)

    outcome = db.Column(db.String(20), nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    link = db.Column(db.String(500))
    code_link = db.Column(db.String(500))

    # Array of free-form tags e.g. ["two-pointers", "sorting"]
    tags = db.Column(db.JSON, default=list)

    is_revision = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = db.relationship('User', back_populates='problems')

    @validates('platform')
    def validate_platform(self, key, platform):
        if platform not in PLATFORMS:
            raise ValueError(f'Invalid platform: {platform}')
        return platform

    @validates('difficulty')
    def validate_difficulty(self, key, difficulty):
        if difficulty not in DIFFICULTIES:
            raise ValueError(f'Invalid difficulty: {difficulty}')
        return difficulty

    @validates('outcome')
    def validate_outcome(self, key, outcome):
        if outcome not in OUTCOMES:
            raise ValueError(f'Invalid outcome: {outcome}')
        return outcome

    @validates('time_spent')
    def validate_time_spent(self, key, value):
        if value is not None and not (0 <= value <= MAX_TIME_SPENT):
            raise ValueError(f'time_spent must be between 0 and {MAX_TIME_SPENT} minutes')
        return value

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'title': self.title,
            'platform': self.platform,
            'difficulty': self.difficulty,
            'topic': self.topic,
            'time_spent': self.time_spent,
            'outcome': self.outcome,
            'date': self.date.isoformat() if self.date else None,
            'link': self.link,
            'code_link': self.code_link,
            'tags': self.tags or [],
            'is_revision': self.is_revision,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f'<Problem {self.title} ({self.outcome})>'
