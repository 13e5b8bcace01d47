"""Performance review model."""

from talentbridge import db
from talentbridge.models import BaseModel


class PerformanceReview(BaseModel):
    """A rating (1-5) of a placed candidate, written by HQ or the owning JV."""
    
    __tablename__ = "performance_reviews"
    
    candidate_id = db.Column(
        db.Integer,
        db.ForeignKey('candidates.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    reviewer_id = db.Column(
        db.Integer,
        db.ForeignKey('users.id', ondelete='SET NULL'),
        nullable=True,
        index=True
    )
    rating = db.Column(db.Integer, nullable=False)
    summary = db.Column(db.Text, nullable=True)
    need_hq_intervention = db.Column(db.Boolean, nullable=False, default=False)
    review_date = db.Column(db.Date, nullable=False)
    
    candidate = db.relationship('Candidate', backref=db.backref('reviews', lazy='dynamic', passive_deletes=True))
    reviewer = db.relationship('User', foreign_keys=[reviewer_id])
    
    __table_args__ = (
        db.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_review_rating_range'),
    )
    
    def to_dict(self, include_reviewer=False):
        data = super().to_dict()
        data.update({
            "candidate_id": self.candidate_id,
            "reviewer_id": self.reviewer_id,
            "rating": self.rating,
            "summary": self.summary,
            "need_hq_intervention": self.need_hq_intervention,
            "review_date": self.review_date.isoformat() if self.review_date else None,
        })
        if include_reviewer and self.reviewer:
            data["reviewer"] = {"id": self.reviewer.id, "email": self.reviewer.email}
        return data
