from sqlalchemy import Column, Integer, String, Boolean, Date, ForeignKey
from sqlalchemy.orm import relationship
from hr_approvals.db.base import BaseModel

class Employee(BaseModel):
    __tablename__ = 'employees'

    org_id = Column(Integer, ForeignKey('organizations.id'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=True)  # login account, if any
    team_id = Column(Integer, ForeignKey('teams.id'), nullable=True)
    employee_number = Column(String(20), index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100))
    hire_date = Column(Date)
    is_active = Column(Boolean, default=True)

    # Relationships
    user = relationship("User", foreign_keys=[user_id])
    team = relationship("Team")
    employment_contracts = relationship(
        "EmploymentContract",
        back_populates="employee",
        foreign_keys="EmploymentContract.employee_id"
    )
