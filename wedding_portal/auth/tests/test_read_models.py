"""Tests for SqlAdminUserReadModel."""

from wedding_portal.auth.read_models import SqlAdminUserReadModel
from wedding_portal.models import AdminRole, AdminUser


async def test_get_admin_user_ignores_case(db_session):
    db_session.add(AdminUser(email="planner@example.com", role=AdminRole.WEDDING_PLANNER))
    await db_session.flush()
    read_model = SqlAdminUserReadModel(session_overwrite=db_session)

    admin = await read_model.get_admin_user(" Planner@Example.com ")

    assert admin.email == "planner@example.com"
    assert admin.role == AdminRole.WEDDING_PLANNER


async def test_get_admin_user_unknown_email(db_session):
    read_model = SqlAdminUserReadModel(session_overwrite=db_session)

    assert await read_model.get_admin_user("ana@example.com") is None
