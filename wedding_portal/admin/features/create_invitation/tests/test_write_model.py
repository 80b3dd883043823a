"""Tests for InvitationProvisioner and SqlProvisioningStore."""

import pytest
from sqlalchemy import select

from wedding_portal.admin.features.create_invitation.dtos import (
    InvitationConflictError,
    NewInvitationDTO,
)
from wedding_portal.admin.features.create_invitation.tests.inmemory_models import (
    InMemoryProvisioningStore,
)
from wedding_portal.admin.features.create_invitation.write_model import (
    CREATE_INVITE_STEP,
    CREATE_PRIMARY_GUEST_STEP,
    EMAIL_TAKEN_MESSAGE,
    INVITE_CODE_TAKEN_MESSAGE,
    InvitationProvisioner,
    SqlProvisioningStore,
)
from wedding_portal.auth.tests.inmemory_models import InMemoryIdentityProvider
from wedding_portal.guests.dtos import InviteType, RsvpStatus
from wedding_portal.guests.repository.orm_models import Guest, Invite
from wedding_portal.saga import SagaStepFailedError


def make_invitation(**overrides) -> NewInvitationDTO:
    fields = dict(
        primary_first_name="Ana",
        primary_last_name="Lopez",
        primary_email="ana@example.com",
        invite_type=InviteType.COUPLE,
        accommodation_group="hotel_lago",
        invited_to_atitlan=False,
        invite_code="ANA2026",
        second_first_name="Luis",
        second_last_name="Perez",
    )
    fields.update(overrides)
    return NewInvitationDTO(**fields)


async def test_create_couple_invitation():
    identity_provider = InMemoryIdentityProvider()
    store = InMemoryProvisioningStore()
    provisioner = InvitationProvisioner(identity_provider, store)

    created = await provisioner.create_invitation(make_invitation())

    assert created.invite_code == "ANA2026"
    assert created.invite_id in store.invites
    primary = store.guests[created.primary_guest_id]
    second = store.guests[created.second_guest_id]
    assert primary["is_primary"] is True
    assert primary["email"] == "ana@example.com"
    assert second["is_primary"] is False
    assert second["user_id"] is None and second["email"] is None

    # the invite code is the password
    (identity, password) = next(iter(identity_provider.users.values()))
    assert primary["user_id"] == identity.id
    assert password == "ANA2026"


async def test_taken_email_writes_nothing():
    identity_provider = InMemoryIdentityProvider()
    identity_provider.add_user("ANA@example.com")
    store = InMemoryProvisioningStore()
    provisioner = InvitationProvisioner(identity_provider, store)

    with pytest.raises(InvitationConflictError, match=EMAIL_TAKEN_MESSAGE):
        await provisioner.create_invitation(make_invitation())

    assert store.invites == {}
    assert len(identity_provider.users) == 1


async def test_taken_invite_code_writes_nothing():
    identity_provider = InMemoryIdentityProvider()
    store = InMemoryProvisioningStore(existing_codes={"ANA2026"})
    provisioner = InvitationProvisioner(identity_provider, store)

    with pytest.raises(InvitationConflictError, match=INVITE_CODE_TAKEN_MESSAGE):
        await provisioner.create_invitation(make_invitation())

    assert identity_provider.users == {}


async def test_failed_identity_creation_stops_the_saga():
    identity_provider = InMemoryIdentityProvider()
    identity_provider.fail_create = True
    store = InMemoryProvisioningStore()
    provisioner = InvitationProvisioner(identity_provider, store)

    with pytest.raises(SagaStepFailedError):
        await provisioner.create_invitation(make_invitation())

    assert store.invites == {}


async def test_failed_invite_deletes_identity():
    identity_provider = InMemoryIdentityProvider()
    store = InMemoryProvisioningStore()
    store.fail_on.add("invite")
    provisioner = InvitationProvisioner(identity_provider, store)

    with pytest.raises(SagaStepFailedError) as exc_info:
        await provisioner.create_invitation(make_invitation())

    assert exc_info.value.step == CREATE_INVITE_STEP
    assert identity_provider.users == {}
    assert len(identity_provider.deleted) == 1


async def test_failed_primary_guest_deletes_invite_and_identity():
    identity_provider = InMemoryIdentityProvider()
    store = InMemoryProvisioningStore()
    store.fail_on.add("primary_guest")
    provisioner = InvitationProvisioner(identity_provider, store)

    with pytest.raises(SagaStepFailedError) as exc_info:
        await provisioner.create_invitation(make_invitation())

    assert exc_info.value.step == CREATE_PRIMARY_GUEST_STEP
    assert store.invites == {}
    assert identity_provider.users == {}


async def test_failed_second_guest_keeps_invitation():
    identity_provider = InMemoryIdentityProvider()
    store = InMemoryProvisioningStore()
    store.fail_on.add("second_guest")
    provisioner = InvitationProvisioner(identity_provider, store)

    created = await provisioner.create_invitation(make_invitation())

    assert created.second_guest_id is None
    assert created.invite_id in store.invites
    assert list(store.guests) == [created.primary_guest_id]


async def test_sql_store_provisions_rows(db_session):
    identity_provider = InMemoryIdentityProvider()
    store = SqlProvisioningStore(session_overwrite=db_session)
    provisioner = InvitationProvisioner(identity_provider, store)

    created = await provisioner.create_invitation(make_invitation(invited_to_atitlan=True))

    result = await db_session.execute(select(Invite).where(Invite.id == created.invite_id))
    invite = result.scalar_one()
    assert invite.invite_code == "ANA2026"
    assert invite.invite_type == InviteType.COUPLE
    assert invite.invited_to_atitlan is True
    assert invite.rsvp_status == RsvpStatus.PENDING

    result = await db_session.execute(select(Guest).where(Guest.invite_id == invite.id))
    guests = {guest.id: guest for guest in result.scalars().all()}
    assert set(guests) == {created.primary_guest_id, created.second_guest_id}
    assert await store.invite_code_exists("ANA2026") is True
    assert await store.invite_code_exists("OTHER") is False


async def test_sql_store_delete_invite(db_session):
    store = SqlProvisioningStore(session_overwrite=db_session)
    invite_id = await store.insert_invite(make_invitation())

    await store.delete_invite(invite_id)

    assert await store.invite_code_exists("ANA2026") is False
