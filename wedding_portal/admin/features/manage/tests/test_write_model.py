from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import select

from wedding_portal.admin.features.manage.write_model import (
    AdminRsvpUpdateDTO,
    GuestUpdateDTO,
    PaymentUpdateDTO,
    SqlAdminManageWriteModel,
)
from wedding_portal.guests.dtos import ContributionTier, InviteType, RsvpStatus
from wedding_portal.guests.features.submit_rsvp.write_model import (
    GuestRsvpInput,
    RsvpSubmissionDTO,
    SqlRsvpWriteModel,
)
from wedding_portal.guests.repository.orm_models import Guest, Payment, RsvpResponse
from wedding_portal.guests.tests.sql_models import seed_group, seed_invite


async def seed_answered_couple(db_session):
    await seed_group(db_session)
    invite, guests = await seed_invite(
        db_session,
        invite_type=InviteType.COUPLE,
        names=(("Ana", "Lopez"), ("Luis", "Perez")),
        accommodation_group="hotel_lago",
    )
    await SqlRsvpWriteModel(session_overwrite=db_session).submit_rsvp(
        RsvpSubmissionDTO(
            invite_id=invite.id,
            guests=tuple(
                GuestRsvpInput(guest.id, attending=True, dietary_restrictions=("vegan",))
                for guest in guests
            ),
            accommodation_needed=True,
            accommodation_payment_level=ContributionTier.HALF,
        )
    )
    return invite, guests


async def get_response(db_session, guest_id) -> RsvpResponse:
    result = await db_session.execute(
        select(RsvpResponse).where(RsvpResponse.guest_id == guest_id)
    )
    return result.scalar_one()


async def test_update_guest_changes_guest_and_invite(db_session):
    invite, (ana,) = await seed_invite(db_session)
    write_model = SqlAdminManageWriteModel(session_overwrite=db_session)

    await write_model.update_guest(
        ana.id,
        GuestUpdateDTO(
            first_name="Anita",
            last_name="Lopez",
            email="",
            invite_type=InviteType.PLUSONE,
            accommodation_group="hotel_volcan",
        ),
    )

    assert ana.first_name == "Anita"
    assert ana.email is None
    assert invite.invite_type == InviteType.PLUSONE
    assert invite.accommodation_group == "hotel_volcan"


async def test_update_unknown_guest(db_session):
    write_model = SqlAdminManageWriteModel(session_overwrite=db_session)
    update = GuestUpdateDTO("Ana", "Lopez", None, InviteType.SINGLE, None)

    with pytest.raises(ValueError):
        await write_model.update_guest(uuid4(), update)


async def test_delete_guest_removes_their_response(db_session):
    _, (_, luis) = await seed_answered_couple(db_session)
    write_model = SqlAdminManageWriteModel(session_overwrite=db_session)

    await write_model.delete_guest(luis.id)

    assert await db_session.get(Guest, luis.id) is None
    result = await db_session.execute(
        select(RsvpResponse).where(RsvpResponse.guest_id == luis.id)
    )
    assert result.scalar_one_or_none() is None



async def test_deleting_the_only_absent_guest_confirms_the_invite(db_session):
    invite, (ana, luis) = await seed_invite(
        db_session, invite_type=InviteType.COUPLE, names=(("Ana", "Lopez"), ("Luis", "Perez"))
    )
    await SqlRsvpWriteModel(session_overwrite=db_session).submit_rsvp(
        RsvpSubmissionDTO(
            invite_id=invite.id,
            guests=(
                GuestRsvpInput(ana.id, attending=True, dietary_restrictions=("none",)),
                GuestRsvpInput(luis.id, attending=False),
            ),
        )
    )
    assert invite.rsvp_status == RsvpStatus.PARTIAL
    write_model = SqlAdminManageWriteModel(session_overwrite=db_session)

    await write_model.delete_guest(luis.id)

    assert invite.rsvp_status == RsvpStatus.CONFIRMED


async def test_deleting_a_guest_keeps_a_pending_invite_pending(db_session):
    invite, (_, luis) = await seed_invite(
        db_session, invite_type=InviteType.COUPLE, names=(("Ana", "Lopez"), ("Luis", "Perez"))
    )
    write_model = SqlAdminManageWriteModel(session_overwrite=db_session)

    await write_model.delete_guest(luis.id)

    assert invite.rsvp_status == RsvpStatus.PENDING

async def test_update_rsvp_rederives_invite_status(db_session):
    invite, (_, luis) = await seed_answered_couple(db_session)
    write_model = SqlAdminManageWriteModel(session_overwrite=db_session)
    response = await get_response(db_session, luis.id)

    status = await write_model.update_rsvp(
        response.id,
        AdminRsvpUpdateDTO(
            attending=False, dietary_restrictions=("Vegan",), accommodation_needed=True
        ),
    )

    assert status == RsvpStatus.PARTIAL
    assert invite.rsvp_status == RsvpStatus.PARTIAL
    assert response.dietary_restrictions == []
    assert response.accommodation_needed is False


async def test_update_rsvp_stores_labels_as_tags(db_session):
    _, (ana, _) = await seed_answered_couple(db_session)
    write_model = SqlAdminManageWriteModel(session_overwrite=db_session)
    response = await get_response(db_session, ana.id)

    status = await write_model.update_rsvp(
        response.id,
        AdminRsvpUpdateDTO(attending=True, dietary_restrictions=("Gluten-Free", "vegan")),
    )

    assert status == RsvpStatus.CONFIRMED
    assert response.dietary_restrictions == ["gluten_free", "vegan"]


async def test_update_rsvp_unknown_response(db_session):
    write_model = SqlAdminManageWriteModel(session_overwrite=db_session)

    with pytest.raises(ValueError):
        await write_model.update_rsvp(uuid4(), AdminRsvpUpdateDTO(attending=True))


async def test_update_payment_records_amount_paid(db_session):
    await seed_answered_couple(db_session)
    write_model = SqlAdminManageWriteModel(session_overwrite=db_session)
    payment = (await db_session.execute(select(Payment))).scalar_one()

    result = await write_model.update_payment(
        payment.id, PaymentUpdateDTO(amount_paid=Decimal("100.00"), payment_method="transfer")
    )

    assert result.amount_committed == Decimal("180.00")
    assert result.amount_paid == Decimal("100.00")
    assert result.balance == Decimal("80.00")
    assert result.payment_method == "transfer"
    assert result.notes is None


async def test_update_unknown_payment(db_session):
    write_model = SqlAdminManageWriteModel(session_overwrite=db_session)

    with pytest.raises(ValueError):
        await write_model.update_payment(uuid4(), PaymentUpdateDTO(amount_paid=Decimal("1")))
