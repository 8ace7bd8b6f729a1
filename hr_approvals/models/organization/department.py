from sqlalchemy import Column, Integer, String, Boolean, Text, ForeignKey
from sqlalchemy.orm import relationship
from hr_approvals.db.base import BaseModel

class Department(BaseModel):
    __tablename__ = 'departments'

    org_id = Column(Integer, ForeignKey('organizations.id'), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text)
    is_active = Column(Boolean, default=True)

    # Relationships
    organization = relationship("Organization", back_populates="departments")
