"""User model for HQ administrators and JV partner users."""

import enum

from talentbridge import db
from talentbridge.models import BaseModel


class UserRole(str, enum.Enum):
    """Roles recognised by the authorization policy."""
    HQ_ADMIN = "HQ_ADMIN"
    JV_PARTNER = "JV_PARTNER"


class User(BaseModel):
    """
    Portal user.
    
    HQ admins have no JV. Partner users belong to exactly one JV while
    linked; an unlinked partner (jv_id NULL) can sign in but sees nothing.
    """
    
    __tablename__ = "users"
    
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(200), nullable=True)
    role = db.Column(
        db.Enum(UserRole, name="user_role", native_enum=False, length=20),
        nullable=False,
        index=True
    )
    jv_id = db.Column(
        db.Integer,
        db.ForeignKey('joint_ventures.id', ondelete='SET NULL'),
        nullable=True,
        index=True
    )
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    last_login = db.Column(db.DateTime, nullable=True)
    
    jv = db.relationship('JointVenture', back_populates='partners')
    
    __table_args__ = (
        db.Index('idx_user_role_jv', 'role', 'jv_id'),
    )
    
    @property
    def is_hq_admin(self):
        return self.role == UserRole.HQ_ADMIN
    
    def to_dict(self):
        """Convert user to dictionary (never includes the password hash)."""
        data = super().to_dict()
        data.update({
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "jv_id": self.jv_id,
            "is_active": self.is_active,
            "last_login": self.last_login.isoformat() if self.last_login else None,
        })
        return data
