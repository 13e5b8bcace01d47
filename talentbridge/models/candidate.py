"""
Candidate Model
Tracks a person through the HQ pool and JV placement lifecycle
"""

import enum

from talentbridge import db
from talentbridge.models import BaseModel


class CandidateStatus(str, enum.Enum):
    """Candidate lifecycle statuses."""
    # Pool
    NEW = "NEW"
    INTERVIEWING = "INTERVIEWING"
    READY = "READY"
    # Transit
    PENDING_ACCEPTANCE = "PENDING_ACCEPTANCE"
    # Active placement
    ONBOARDING = "ONBOARDING"
    PROBATION = "PROBATION"
    CONFIRMED = "CONFIRMED"
    PIP = "PIP"
    # End
    RESIGNED = "RESIGNED"
    TERMINATED = "TERMINATED"
    RETURNED = "RETURNED"


class Candidate(BaseModel):
    """
    Candidate record.

    ``status``, ``current_jv_id`` and ``pending_jv_id`` are owned by the
    lifecycle engine; nothing else writes them. ``version`` is the optimistic
    concurrency counter, bumped by SQLAlchemy on every UPDATE.
    """

    __tablename__ = "candidates"

    # Descriptive fields (opaque to the engine)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(255), nullable=True, index=True)
    phone = db.Column(db.String(30), nullable=True)
    resume_url = db.Column(db.String(1000), nullable=True)
    function_role = db.Column(db.String(200), nullable=True)
    tags = db.Column(db.JSON, nullable=True)
    interview_notes = db.Column(db.Text, nullable=True)
    expected_salary = db.Column(db.Integer, nullable=True)
    interview_date = db.Column(db.DateTime, nullable=True)

    # Lifecycle
    status = db.Column(
        db.Enum(CandidateStatus, name="candidate_status", native_enum=False, length=30),
        nullable=False,
        default=CandidateStatus.NEW,
        index=True
    )
    current_jv_id = db.Column(
        db.Integer,
        db.ForeignKey('joint_ventures.id'),
        nullable=True,
        index=True
    )
    pending_jv_id = db.Column(
        db.Integer,
        db.ForeignKey('joint_ventures.id'),
        nullable=True,
        index=True
    )
    status_note = db.Column(db.Text, nullable=True)
    last_status_update = db.Column(db.DateTime, nullable=True, index=True)
    expected_start_date = db.Column(db.Date, nullable=True)

    # Performance (derived from reviews)
    performance_rating = db.Column(db.Integer, nullable=True)
    performance_notes = db.Column(db.Text, nullable=True)

    version = db.Column(db.Integer, nullable=False)

    current_jv = db.relationship('JointVenture', foreign_keys=[current_jv_id])
    pending_jv = db.relationship('JointVenture', foreign_keys=[pending_jv_id])

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        db.Index('idx_candidate_pending', 'pending_jv_id', 'status'),
    )

    def __repr__(self):
        return f'<Candidate id={self.id} status={self.status.value if self.status else None}>'

    def snapshot(self):
        """Plain, JSON-safe copy of the record used for audit before/after."""
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'function_role': self.function_role,
            'status': self.status.value if self.status else None,
            'current_jv_id': self.current_jv_id,
            'pending_jv_id': self.pending_jv_id,
            'status_note': self.status_note,
            'last_status_update': self.last_status_update.isoformat() if self.last_status_update else None,
            'expected_start_date': self.expected_start_date.isoformat() if self.expected_start_date else None,
            'performance_rating': self.performance_rating,
            'version': self.version,
        }

    def to_dict(self, include_jvs=False):
        """Convert candidate to dictionary"""
        result = super().to_dict()
        result.update({
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'resume_url': self.resume_url,
            'function_role': self.function_role,
            'tags': self.tags or [],
            'interview_notes': self.interview_notes,
            'expected_salary': self.expected_salary,
            'interview_date': self.interview_date.isoformat() if self.interview_date else None,
            'status': self.status.value if self.status else None,
            'current_jv_id': self.current_jv_id,
            'pending_jv_id': self.pending_jv_id,
            'status_note': self.status_note,
            'last_status_update': self.last_status_update.isoformat() if self.last_status_update else None,
            'expected_start_date': self.expected_start_date.isoformat() if self.expected_start_date else None,
            'performance_rating': self.performance_rating,
            'performance_notes': self.performance_notes,
            'version': self.version,
        })

        if include_jvs:
            result['current_jv'] = {'id': self.current_jv.id, 'name': self.current_jv.name} if self.current_jv else None
            result['pending_jv'] = {'id': self.pending_jv.id, 'name': self.pending_jv.name} if self.pending_jv else None

        return result
