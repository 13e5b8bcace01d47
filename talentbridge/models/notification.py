"""
Notification Model
One row per recipient, created in bulk by the side-effect dispatcher
"""
from datetime import datetime
from talentbridge import db


class Notification(db.Model):
    """
    In-app notification for a single user.
    Never edited after creation except to stamp read_at.
    """
    
    __tablename__ = 'notifications'
    
    id = db.Column(db.Integer, primary_key=True)
    
    user_id = db.Column(
        db.Integer,
        db.ForeignKey('users.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    
    # Notification Type, e.g. candidate.allocated, candidate.accepted, performance.alert
    type = db.Column(db.String(50), nullable=False)
    payload = db.Column(db.JSON, nullable=False)
    
    read_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    
    user = db.relationship(
        'User',
        backref=db.backref('notifications', passive_deletes=True)
    )
    
    __table_args__ = (
        db.Index('idx_notification_user_read', 'user_id', 'read_at'),
        db.Index('idx_notification_type', 'type'),
    )
    
    def __repr__(self):
        return f'<Notification user={self.user_id} type={self.type} read={self.read_at is not None}>'
    
    @property
    def is_read(self):
        return self.read_at is not None
    
    def mark_as_read(self):
        """Stamp read_at once; later calls keep the first timestamp."""
        if self.read_at is None:
            self.read_at = datetime.utcnow()
    
    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'type': self.type,
            'payload': self.payload,
            'is_read': self.is_read,
            'read_at': self.read_at.isoformat() if self.read_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
