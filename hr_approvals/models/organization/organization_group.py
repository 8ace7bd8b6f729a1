from sqlalchemy import Column, Integer, String, Boolean, Text, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from hr_approvals.db.base import BaseModel
from hr_approvals.models.shared.enums import GroupMembershipStatus, UserRole

class OrganizationGroup(BaseModel):
    """A conglomerate of organizations that may share HR staff."""
    __tablename__ = 'organization_groups'

    name = Column(String(150), nullable=False)
    description = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    organizations = relationship("OrganizationGroupOrganization", back_populates="group")
    members = relationship("OrganizationGroupUser", back_populates="group")


class OrganizationGroupOrganization(BaseModel):
    __tablename__ = 'organization_group_organizations'
    __table_args__ = (
        UniqueConstraint("group_id", "org_id", name="uq_group_organization"),
    )

    group_id = Column(Integer, ForeignKey('organization_groups.id'), nullable=False, index=True)
    org_id = Column(Integer, ForeignKey('organizations.id'), nullable=False, index=True)
    status = Column(SQLEnum(GroupMembershipStatus), default=GroupMembershipStatus.PENDING, nullable=False)

    # Relationships
    group = relationship("OrganizationGroup", back_populates="organizations")
    organization = relationship("Organization", back_populates="group_memberships")


class OrganizationGroupUser(BaseModel):
    __tablename__ = 'organization_group_users'
    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_group_user"),
    )

    group_id = Column(Integer, ForeignKey('organization_groups.id'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    role = Column(SQLEnum(UserRole), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    group = relationship("OrganizationGroup", back_populates="members")
    user = relationship("User")
