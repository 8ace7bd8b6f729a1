from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from hr_approvals.db.base import BaseModel

class Team(BaseModel):
    __tablename__ = 'teams'

    org_id = Column(Integer, ForeignKey('organizations.id'), nullable=False, index=True)
    cost_center_id = Column(Integer, ForeignKey('cost_centers.id'), nullable=True)
    name = Column(String(100), nullable=False)
    is_active = Column(Boolean, default=True)
