from sqlalchemy import Column, Integer, ForeignKey, DateTime, Boolean, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from hr_approvals.db.base import BaseModel
from hr_approvals.models.shared.enums import UserRole

class UserOrganization(BaseModel):
    """Per-organization role membership of a user."""
    __tablename__ = "user_organizations"
    __table_args__ = (
        UniqueConstraint("user_id", "org_id", name="uq_user_organization"),
    )

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    org_id = Column(Integer, ForeignKey("organizations.id"), nullable=False, index=True)
    role = Column(SQLEnum(UserRole), nullable=False)
    assigned_at = Column(DateTime(timezone=True), server_default=func.now())
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    user = relationship("User", back_populates="memberships")
    organization = relationship("Organization")

    def __repr__(self):
        return f"<UserOrganization user_id={self.user_id} org_id={self.org_id} role={self.role}>"
