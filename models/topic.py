from models import db
from datetime import datetime


class Topic(db.Model):
    """Topic model - a roadmap section holding subtopics.

    total_subtopics/completed_subtopics are derived counters, kept in sync by
    services.roadmap_service.recompute_topic_progress.
    """
    __tablename__ = 'topics'

    id = db.Column(db.Integer, primary_key=True)

    roadmap_id = db.Column(db.Integer, db.ForeignKey('roadmaps.id', ondelete='CASCADE'),
                           nullable=False, index=True)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    order = db.Column(db.Integer, nullable=False, default=0)

    is_completed = db.Column(db.Boolean, nullable=False, default=False)
    completed_date = db.Column(db.Date)

    total_subtopics = db.Column(db.Integer, nullable=False, default=0)
    completed_subtopics = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    roadmap = db.relationship('Roadmap', back_populates='topics')
    subtopics = db.relationship('Subtopic', back_populates='topic', order_by='Subtopic.order',
                                cascade='all, delete-orphan')

    __table_args__ = (
        db.CheckConstraint('completed_subtopics <= total_subtopics', name='ck_topic_progress'),
    )

    def to_dict(self, include_subtopics=True):
        data = {
            'id': self.id,
            'roadmap_id': self.roadmap_id,
            'title': self.title,
            'description': self.description,
            'order': self.order,
            'is_completed': self.is_completed,
            'completed_date': self.completed_date.isoformat() if self.completed_date else None,
            'total_subtopics': self.total_subtopics,
            'completed_subtopics': self.completed_subtopics
        }
        if include_subtopics:
            data['subtopics'] = [subtopic.to_dict() for subtopic in self.subtopics]
        return data

    def __repr__(self):
        return f'<Topic {self.title} {self.completed_subtopics}/{self.total_subtopics}>'
