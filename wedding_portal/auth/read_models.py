import abc
from dataclasses import dataclass
from functools import partial

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_portal.config.database import async_session_manager
from wedding_portal.models import AdminRole, AdminUser


@dataclass(frozen=True)
class AdminUserDTO:
    email: str
    role: AdminRole


class AdminUserReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_admin_user(self, email: str) -> AdminUserDTO | None:
        raise NotImplementedError


class SqlAdminUserReadModel(AdminUserReadModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_admin_user(self, email: str) -> AdminUserDTO | None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(AdminUser).where(func.lower(AdminUser.email) == email.strip().lower())
            )
            admin = result.scalar_one_or_none()
            if admin is None:
                return None
            return AdminUserDTO(email=admin.email, role=AdminRole(admin.role))
