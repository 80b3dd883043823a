from decimal import Decimal
from uuid import UUID, uuid4

from wedding_portal.guests.cache import session_fingerprint
from wedding_portal.guests.dependencies import get_guest_data_read_model
from wedding_portal.guests.dtos import (
    ContributionTier,
    InviteType,
    PaymentDTO,
    PaymentType,
    RsvpOutcomeDTO,
    RsvpStatus,
)
from wedding_portal.guests.features.submit_rsvp.router import get_rsvp_write_model
from wedding_portal.guests.features.submit_rsvp.write_model import (
    DECLINED_MESSAGE,
    SUBMITTED_MESSAGE,
    RsvpSubmissionDTO,
    RsvpWriteModel,
)
from wedding_portal.guests.tests.inmemory_models import (
    InMemoryGuestDataReadModel,
    create_test_bundle,
    create_test_group,
    guest_auth_headers,
)
from wedding_portal.guests.urls import RSVP_URL


class InMemoryRsvpWriteModel(RsvpWriteModel):
    def __init__(self) -> None:
        self.submissions: list[RsvpSubmissionDTO] = []
        self.declined: list[UUID] = []

    async def submit_rsvp(self, submission: RsvpSubmissionDTO) -> RsvpOutcomeDTO:
        self.submissions.append(submission)
        attending = sum(1 for guest in submission.guests if guest.attending)
        payments = []
        if submission.accommodation_needed:
            payments.append(
                PaymentDTO(
                    id=uuid4(),
                    invite_id=submission.invite_id,
                    payment_type=PaymentType.ACCOMMODATION,
                    amount_committed=Decimal("180.00"),
                )
            )
        return RsvpOutcomeDTO(
            message=SUBMITTED_MESSAGE,
            rsvp_status=RsvpStatus.from_attendance(attending, len(submission.guests)),
            payments=payments,
        )

    async def decline_rsvp(self, invite_id: UUID) -> RsvpOutcomeDTO:
        self.declined.append(invite_id)
        return RsvpOutcomeDTO(message=DECLINED_MESSAGE, rsvp_status=RsvpStatus.DECLINED)


async def test_submit_single_rsvp(client_factory, identity_provider):
    bundle = create_test_bundle(accommodation_group="hotel_lago")
    read_model = InMemoryGuestDataReadModel([bundle], [create_test_group()])
    write_model = InMemoryRsvpWriteModel()
    headers = guest_auth_headers(identity_provider, bundle)
    guest = bundle.current_guest

    form = {
        "attending": True,
        # a single invite's guest attends without being selected
        "guests": [{"guest_id": str(guest.id), "dietary_restrictions": ["Gluten-Free"]}],
        "accommodation_needed": True,
        "accommodation_tier": "half",
    }
    overrides = {
        get_guest_data_read_model: lambda: read_model,
        get_rsvp_write_model: lambda: write_model,
    }
    async with client_factory(overrides) as client:
        response = await client.post(RSVP_URL, json=form, headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == SUBMITTED_MESSAGE
    assert data["rsvp_status"] == "confirmed"
    assert data["commitments"] == [{"payment_type": "accommodation", "amount_committed": 180.0}]

    (submission,) = write_model.submissions
    assert submission.invite_id == bundle.invite.id
    assert submission.accommodation_payment_level == ContributionTier.HALF
    assert submission.guests[0].dietary_restrictions == ("gluten_free",)


async def test_submit_couple_with_one_guest(client_factory, identity_provider):
    bundle = create_test_bundle(
        invite_type=InviteType.COUPLE, names=(("Ana", "Lopez"), ("Luis", "Perez"))
    )
    read_model = InMemoryGuestDataReadModel([bundle])
    write_model = InMemoryRsvpWriteModel()
    headers = guest_auth_headers(identity_provider, bundle)
    ana, luis = bundle.all_guests

    form = {
        "attending": True,
        "guests": [
            {"guest_id": str(ana.id), "selected": True, "dietary_restrictions": ["__none__"]},
            {"guest_id": str(luis.id), "selected": False},
        ],
        "accommodation_needed": False,
    }
    overrides = {
        get_guest_data_read_model: lambda: read_model,
        get_rsvp_write_model: lambda: write_model,
    }
    async with client_factory(overrides) as client:
        response = await client.post(RSVP_URL, json=form, headers=headers)

    assert response.status_code == 200
    assert response.json()["rsvp_status"] == "partial"
    (submission,) = write_model.submissions
    answers = {guest.guest_id: guest for guest in submission.guests}
    assert answers[ana.id].attending is True
    assert answers[ana.id].dietary_restrictions == ("none",)
    assert answers[luis.id].attending is False



async def test_submit_plus_one_invite_alone(client_factory, identity_provider):
    bundle = create_test_bundle(invite_type=InviteType.PLUSONE)
    read_model = InMemoryGuestDataReadModel([bundle])
    write_model = InMemoryRsvpWriteModel()
    headers = guest_auth_headers(identity_provider, bundle)

    form = {
        "attending": True,
        "guests": [
            {"guest_id": str(bundle.current_guest.id), "dietary_restrictions": ["__none__"]}
        ],
        "accommodation_needed": False,
    }
    overrides = {
        get_guest_data_read_model: lambda: read_model,
        get_rsvp_write_model: lambda: write_model,
    }
    async with client_factory(overrides) as client:
        response = await client.post(RSVP_URL, json=form, headers=headers)

    assert response.status_code == 200
    assert response.json()["rsvp_status"] == "confirmed"
    (submission,) = write_model.submissions
    assert [guest.attending for guest in submission.guests] == [True]


async def test_submit_plus_one_invite_with_companion(client_factory, identity_provider):
    bundle = create_test_bundle(
        invite_type=InviteType.PLUSONE, names=(("Ana", "Lopez"), ("Maria", "Gomez"))
    )
    read_model = InMemoryGuestDataReadModel([bundle])
    write_model = InMemoryRsvpWriteModel()
    headers = guest_auth_headers(identity_provider, bundle)

    form = {
        "attending": True,
        # the companion is never selected explicitly
        "guests": [
            {"guest_id": str(guest.id), "dietary_restrictions": ["Vegan"]}
            for guest in bundle.all_guests
        ],
        "accommodation_needed": False,
    }
    overrides = {
        get_guest_data_read_model: lambda: read_model,
        get_rsvp_write_model: lambda: write_model,
    }
    async with client_factory(overrides) as client:
        response = await client.post(RSVP_URL, json=form, headers=headers)

    assert response.status_code == 200
    assert response.json()["rsvp_status"] == "confirmed"
    (submission,) = write_model.submissions
    assert [guest.attending for guest in submission.guests] == [True, True]

async def test_decline(client_factory, identity_provider):
    bundle = create_test_bundle()
    read_model = InMemoryGuestDataReadModel([bundle])
    write_model = InMemoryRsvpWriteModel()
    headers = guest_auth_headers(identity_provider, bundle)

    overrides = {
        get_guest_data_read_model: lambda: read_model,
        get_rsvp_write_model: lambda: write_model,
    }
    async with client_factory(overrides) as client:
        response = await client.post(RSVP_URL, json={"attending": False}, headers=headers)

    assert response.status_code == 200
    assert response.json() == {
        "message": DECLINED_MESSAGE,
        "rsvp_status": "declined",
        "commitments": [],
    }
    assert write_model.declined == [bundle.invite.id]


async def test_incomplete_form_is_refused(client_factory, identity_provider):
    bundle = create_test_bundle()
    read_model = InMemoryGuestDataReadModel([bundle])
    write_model = InMemoryRsvpWriteModel()
    headers = guest_auth_headers(identity_provider, bundle)

    # no dietary answer for the attending guest
    form = {"attending": True, "accommodation_needed": False}
    overrides = {
        get_guest_data_read_model: lambda: read_model,
        get_rsvp_write_model: lambda: write_model,
    }
    async with client_factory(overrides) as client:
        response = await client.post(RSVP_URL, json=form, headers=headers)

    assert response.status_code == 422
    assert response.json()["detail"]["section"] == "dietary"
    assert write_model.submissions == []


async def test_guest_outside_invite_is_forbidden(client_factory, identity_provider):
    bundle = create_test_bundle()
    read_model = InMemoryGuestDataReadModel([bundle])
    write_model = InMemoryRsvpWriteModel()
    headers = guest_auth_headers(identity_provider, bundle)

    form = {
        "attending": True,
        "guests": [{"guest_id": str(uuid4()), "selected": True, "dietary_restrictions": ["Vegan"]}],
        "accommodation_needed": False,
    }
    overrides = {
        get_guest_data_read_model: lambda: read_model,
        get_rsvp_write_model: lambda: write_model,
    }
    async with client_factory(overrides) as client:
        response = await client.post(RSVP_URL, json=form, headers=headers)

    assert response.status_code == 403
    assert write_model.submissions == []


async def test_submit_invalidates_cached_guest_data(
    client_factory, identity_provider, guest_data_cache
):
    bundle = create_test_bundle()
    read_model = InMemoryGuestDataReadModel([bundle])
    write_model = InMemoryRsvpWriteModel()
    headers = guest_auth_headers(identity_provider, bundle)
    token = headers["Authorization"].removeprefix("Bearer ")

    overrides = {
        get_guest_data_read_model: lambda: read_model,
        get_rsvp_write_model: lambda: write_model,
    }
    async with client_factory(overrides) as client:
        response = await client.post(RSVP_URL, json={"attending": False}, headers=headers)

    assert response.status_code == 200
    assert guest_data_cache.get(bundle.current_guest.user_id, session_fingerprint(token)) is None
