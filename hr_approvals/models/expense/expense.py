from sqlalchemy import Column, Integer, String, Text, Numeric, Date, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from hr_approvals.db.base import BaseModel
from hr_approvals.models.shared.enums import ExpenseStatus

class Expense(BaseModel):
    __tablename__ = 'expenses'

    org_id = Column(Integer, ForeignKey('organizations.id'), nullable=False, index=True)
    employee_id = Column(Integer, ForeignKey('employees.id'), nullable=False, index=True)
    expense_date = Column(Date)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), default="EUR")
    notes = Column(Text)
    status = Column(SQLEnum(ExpenseStatus), default=ExpenseStatus.DRAFT, nullable=False)

    # Relationships
    employee = relationship("Employee")
    approvals = relationship(
        "ExpenseApproval",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseApproval.level"
    )
