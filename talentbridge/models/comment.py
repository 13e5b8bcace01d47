"""Candidate comment model."""

from talentbridge import db
from talentbridge.models import BaseModel


class Comment(BaseModel):
    """Free-text discussion on a candidate, shared between HQ and the JV that can see it."""
    
    __tablename__ = "comments"
    
    candidate_id = db.Column(
        db.Integer,
        db.ForeignKey('candidates.id', ondelete='CASCADE'),
        nullable=False,
        index=True
    )
    author_id = db.Column(
        db.Integer,
        db.ForeignKey('users.id', ondelete='SET NULL'),
        nullable=True
    )
    content = db.Column(db.Text, nullable=False)
    
    author = db.relationship('User')
    
    def to_dict(self):
        data = super().to_dict()
        data.update({
            "candidate_id": self.candidate_id,
            "author_id": self.author_id,
            "content": self.content,
            "author": {
                "id": self.author.id,
                "email": self.author.email,
                "name": self.author.name,
                "role": self.author.role.value,
            } if self.author else None,
        })
        return data
