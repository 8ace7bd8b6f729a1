from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from hr_approvals.db.base import BaseModel
from hr_approvals.models.shared.enums import ApprovalDecision

class ExpenseApproval(BaseModel):
    __tablename__ = 'expense_approvals'
    __table_args__ = (
        UniqueConstraint("expense_id", "level", name="uq_expense_approval_level"),
    )

    expense_id = Column(Integer, ForeignKey('expenses.id'), nullable=False, index=True)
    approver_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    level = Column(Integer, nullable=False)
    decision = Column(SQLEnum(ApprovalDecision), default=ApprovalDecision.PENDING, nullable=False)
    comments = Column(Text)
    decided_at = Column(DateTime(timezone=True))

    # Relationships
    expense = relationship("Expense", back_populates="approvals")
    approver = relationship("User")
