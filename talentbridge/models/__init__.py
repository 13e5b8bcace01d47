"""SQLAlchemy models package."""

from datetime import datetime
from talentbridge import db


class BaseModel(db.Model):
    """Base model with common columns."""
    
    __abstract__ = True
    
    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    def to_dict(self):
        """Convert model to dictionary."""
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
    
    def __repr__(self):
        """String representation."""
        return f"<{self.__class__.__name__} id={self.id}>"


class AuditLog(BaseModel):
    """
    Append-only audit trail.
    
    One row per committed candidate mutation, holding the before and after
    snapshots of the record.
    """
    
    __tablename__ = "audit_logs"
    
    actor_id = db.Column(
        db.Integer,
        db.ForeignKey('users.id', ondelete='SET NULL'),
        nullable=True,
        index=True
    )
    entity_type = db.Column(db.String(100), nullable=False, index=True)
    entity_id = db.Column(db.Integer, nullable=False, index=True)
    action = db.Column(db.String(50), nullable=False, index=True)
    before = db.Column(db.JSON, nullable=True)
    after = db.Column(db.JSON, nullable=True)
    
    actor = db.relationship('User', foreign_keys=[actor_id])
    
    __table_args__ = (
        db.Index('idx_audit_entity', 'entity_type', 'entity_id'),
    )
    
    def to_dict(self, include_actor=False):
        """Convert model to dictionary."""
        data = super().to_dict()
        data.update({
            "actor_id": self.actor_id,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "action": self.action,
            "before": self.before,
            "after": self.after,
        })
        if include_actor and self.actor:
            data["actor"] = {
                "id": self.actor.id,
                "email": self.actor.email,
                "role": self.actor.role.value,
            }
        return data


# Import models to ensure they're registered with SQLAlchemy
from talentbridge.models.joint_venture import JointVenture
from talentbridge.models.user import User, UserRole
from talentbridge.models.candidate import Candidate, CandidateStatus
from talentbridge.models.performance_review import PerformanceReview
from talentbridge.models.notification import Notification
from talentbridge.models.allocation_record import AllocationRecord, AllocationAction
from talentbridge.models.comment import Comment
