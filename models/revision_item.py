from models import db
from datetime import datetime
from sqlalchemy.orm import validates

# Discriminator values for the loose item reference
ITEM_TYPES = ['problem', 'learning']


class RevisionItem(db.Model):
    """RevisionItem model - one scheduled spaced repetition review.

    item_id/item_type point at a Problem or LearningItem without a foreign key,
    so the target is resolved by services.revision_service.resolve_target.
    """
    __tablename__ = 'revision_items'

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'),
                        nullable=False)

    item_id = db.Column(db.Integer, nullable=False)
    item_type = db.Column(db.String(20), nullable=False)

    original_date = db.Column(db.Date, nullable=False)
    next_revision_date = db.Column(db.Date, nullable=False)

    # 1-based position in the interval table
    revision_cycle = db.Column(db.Integer, nullable=False, default=1)

    is_completed = db.Column(db.Boolean, nullable=False, default=False)
    completed_date = db.Column(db.Date)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = db.relationship('User', back_populates='revision_items')

    __table_args__ = (
        db.Index('idx_user_next_revision', 'user_id', 'next_revision_date'),
        db.Index('idx_revision_target', 'item_type', 'item_id'),
    )

    @validates('item_type')
    def validate_item_type(self, key, item_type):
        if item_type not in ITEM_TYPES:
            raise ValueError(f'Invalid item_type: {item_type}. Must be one of {ITEM_TYPES}')
        return item_type

    @validates('revision_cycle')
    def validate_revision_cycle(self, key, value):
        if value is not None and value < 1:
            raise ValueError('revision_cycle must be a positive integer')
        return value

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'item_id': self.item_id,
            'item_type': self.item_type,
            'original_date': self.original_date.isoformat() if self.original_date else None,
            'next_revision_date': self.next_revision_date.isoformat() if self.next_revision_date else None,
            'revision_cycle': self.revision_cycle,
            'is_completed': self.is_completed,
            'completed_date': self.completed_date.isoformat() if self.completed_date else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<RevisionItem {self.item_type}:{self.item_id} cycle={self.revision_cycle}>'
