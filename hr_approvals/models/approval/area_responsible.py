from sqlalchemy import Column, Integer, Boolean, ForeignKey, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from hr_approvals.db.base import BaseModel
from hr_approvals.models.shared.enums import ResponsibleScope

class AreaResponsible(BaseModel):
    """A user granted permissions over a team, department, cost center or organization."""
    __tablename__ = 'area_responsibles'

    org_id = Column(Integer, ForeignKey('organizations.id'), nullable=False, index=True)
    scope = Column(SQLEnum(ResponsibleScope), nullable=False)
    scope_id = Column(Integer, nullable=True, index=True)  # team/department/cost center id
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    permissions = Column(JSON, nullable=False, default=list)  # list of Permission values
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    user = relationship("User")
