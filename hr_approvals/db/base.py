from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.sql import func
from hr_approvals.models.base import Base

class BaseModel(Base):
    """Base model with common audit columns"""
    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    created_by = Column(Integer, nullable=True)
    updated_by = Column(Integer, nullable=True)
