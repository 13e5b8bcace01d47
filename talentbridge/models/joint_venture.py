"""Joint venture (partner organization) model."""

from talentbridge import db
from talentbridge.models import BaseModel


class JointVenture(BaseModel):
    """A partner organization that receives and employs candidates."""
    
    __tablename__ = "joint_ventures"
    
    name = db.Column(db.String(200), nullable=False, unique=True)
    
    partners = db.relationship('User', back_populates='jv', lazy='select')
    
    def to_dict(self):
        data = super().to_dict()
        data["name"] = self.name
        return data
