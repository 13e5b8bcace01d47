"""
AllocationRecord Model
Append-only history of candidate handoffs between the HQ pool and JVs
"""
import enum
from datetime import datetime
from talentbridge import db


class AllocationAction(str, enum.Enum):
    ALLOCATE = "ALLOCATE"
    ACCEPT = "ACCEPT"
    REJECT = "REJECT"
    RETURN = "RETURN"
    WITHDRAW = "WITHDRAW"
    EXPIRE = "EXPIRE"


class AllocationRecord(db.Model):
    """
    Records every proposal, decision and return for a candidate.
    Rows are never updated.
    """
    
    __tablename__ = 'allocation_records'
    
    id = db.Column(db.Integer, primary_key=True)
    
    candidate_id = db.Column(
        db.Integer,
        db.ForeignKey('candidates.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    jv_id = db.Column(
        db.Integer,
        db.ForeignKey('joint_ventures.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    actor_id = db.Column(
        db.Integer,
        db.ForeignKey('users.id', ondelete='SET NULL'),
        nullable=True
    )
    action = db.Column(
        db.Enum(AllocationAction, name="allocation_action", native_enum=False, length=20),
        nullable=False
    )
    note = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    
    jv = db.relationship('JointVenture')
    
    def __repr__(self):
        return f'<AllocationRecord candidate={self.candidate_id} jv={self.jv_id} action={self.action.value}>'
    
    def to_dict(self):
        return {
            'id': self.id,
            'candidate_id': self.candidate_id,
            'jv_id': self.jv_id,
            'jv_name': self.jv.name if self.jv else None,
            'actor_id': self.actor_id,
            'action': self.action.value,
            'note': self.note,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
