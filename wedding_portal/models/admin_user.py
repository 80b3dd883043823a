from enum import Enum as PyEnum

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from wedding_portal.config.table_names import TableNames
from wedding_portal.models.base import Base, CreatedAt


class AdminRole(str, PyEnum):
    ADMIN = "admin"
    WEDDING_PLANNER = "wedding_planner"


class AdminUser(Base, CreatedAt):
    __tablename__ = TableNames.ADMIN_USERS.value

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    role: Mapped[AdminRole] = mapped_column(
        Enum(AdminRole, name="admin_role_enum", values_callable=lambda x: [e.value for e in x]),
        default=AdminRole.ADMIN,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<AdminUser {self.email} ({self.role.value})>"
