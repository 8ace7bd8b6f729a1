# hr_approvals/models/auth/__init__.py

# Import models in dependency order
from .user import User
from .user_organization import UserOrganization

__all__ = [
    "User",
    "UserOrganization",
]
