from sqlalchemy import Column, String, Boolean, JSON
from sqlalchemy.orm import relationship
from hr_approvals.db.base import BaseModel

class Organization(BaseModel):
    __tablename__ = 'organizations'

    name = Column(String(150), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    approval_settings = Column(JSON, nullable=True)  # raw workflow configuration blob
    group_hr_approvals_enabled = Column(Boolean, default=True, nullable=False)

    # Relationships
    departments = relationship("Department", back_populates="organization")
    group_memberships = relationship("OrganizationGroupOrganization", back_populates="organization")
