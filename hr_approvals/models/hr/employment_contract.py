from sqlalchemy import Column, Integer, String, Boolean, Date, ForeignKey
from sqlalchemy.orm import relationship
from hr_approvals.db.base import BaseModel

class EmploymentContract(BaseModel):
    __tablename__ = 'employment_contracts'

    employee_id = Column(Integer, ForeignKey('employees.id'), nullable=False, index=True)
    manager_id = Column(Integer, ForeignKey('employees.id'), nullable=True)  # manager is an employee
    department_id = Column(Integer, ForeignKey('departments.id'), nullable=True)
    cost_center_id = Column(Integer, ForeignKey('cost_centers.id'), nullable=True)
    contract_type = Column(String(50))
    start_date = Column(Date, nullable=False)
    end_date = Column(Date)
    active = Column(Boolean, default=True, nullable=False)

    # Relationships
    employee = relationship("Employee", back_populates="employment_contracts", foreign_keys=[employee_id])
    manager = relationship("Employee", foreign_keys=[manager_id])
    department = relationship("Department")
    cost_center = relationship("CostCenter")
