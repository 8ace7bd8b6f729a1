from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from hr_approvals.db.base import BaseModel

class CostCenter(BaseModel):
    __tablename__ = 'cost_centers'

    org_id = Column(Integer, ForeignKey('organizations.id'), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    code = Column(String(30))
    is_active = Column(Boolean, default=True)
