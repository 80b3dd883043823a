from .accommodation_group import AccommodationGroup
from .admin_user import AdminRole, AdminUser
from .base import Base, BaseModel, CreatedAt, TimeStamp

__all__ = [
    "AccommodationGroup",
    "AdminRole",
    "AdminUser",
    "Base",
    "BaseModel",
    "CreatedAt",
    "TimeStamp",
]
