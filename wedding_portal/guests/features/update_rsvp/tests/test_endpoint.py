from uuid import UUID, uuid4

from wedding_portal.guests.dependencies import get_guest_data_read_model
from wedding_portal.guests.dtos import DIETARY_MISSING_MESSAGE, InviteType, RsvpStatus
from wedding_portal.guests.features.update_rsvp.router import get_rsvp_update_write_model
from wedding_portal.guests.features.update_rsvp.write_model import (
    RsvpResponseUpdateDTO,
    RsvpUpdateWriteModel,
)
from wedding_portal.guests.tests.inmemory_models import (
    InMemoryGuestDataReadModel,
    create_test_bundle,
    guest_auth_headers,
)
from wedding_portal.guests.urls import RSVP_RESPONSES_URL


class InMemoryRsvpUpdateWriteModel(RsvpUpdateWriteModel):
    def __init__(self) -> None:
        self.updates: list[tuple[UUID, list[RsvpResponseUpdateDTO]]] = []

    async def update_responses(
        self, invite_id: UUID, updates: list[RsvpResponseUpdateDTO]
    ) -> RsvpStatus:
        self.updates.append((invite_id, updates))
        if all(update.attending for update in updates):
            return RsvpStatus.CONFIRMED
        return RsvpStatus.PARTIAL


async def test_update_responses(client_factory, identity_provider):
    bundle = create_test_bundle(
        invite_type=InviteType.COUPLE, names=(("Ana", "Lopez"), ("Luis", "Perez"))
    )
    read_model = InMemoryGuestDataReadModel([bundle])
    write_model = InMemoryRsvpUpdateWriteModel()
    headers = guest_auth_headers(identity_provider, bundle)
    ana, luis = bundle.all_guests

    body = {
        "responses": [
            {"guest_id": str(ana.id), "attending": True, "dietary_restrictions": ["Vegan"]},
            {"guest_id": str(luis.id), "attending": False},
        ]
    }
    overrides = {
        get_guest_data_read_model: lambda: read_model,
        get_rsvp_update_write_model: lambda: write_model,
    }
    async with client_factory(overrides) as client:
        response = await client.put(RSVP_RESPONSES_URL, json=body, headers=headers)

    assert response.status_code == 200
    assert response.json() == {"message": "RSVP updated successfully!", "rsvp_status": "partial"}
    ((invite_id, updates),) = write_model.updates
    assert invite_id == bundle.invite.id
    assert updates[0].dietary_restrictions == ("Vegan",)


async def test_update_guest_outside_invite_is_forbidden(client_factory, identity_provider):
    bundle = create_test_bundle()
    read_model = InMemoryGuestDataReadModel([bundle])
    write_model = InMemoryRsvpUpdateWriteModel()
    headers = guest_auth_headers(identity_provider, bundle)

    body = {"responses": [{"guest_id": str(uuid4()), "attending": True}]}
    overrides = {
        get_guest_data_read_model: lambda: read_model,
        get_rsvp_update_write_model: lambda: write_model,
    }
    async with client_factory(overrides) as client:
        response = await client.put(RSVP_RESPONSES_URL, json=body, headers=headers)

    assert response.status_code == 403
    assert write_model.updates == []


async def test_update_attending_guest_requires_dietary(client_factory, identity_provider):
    bundle = create_test_bundle()
    read_model = InMemoryGuestDataReadModel([bundle])
    write_model = InMemoryRsvpUpdateWriteModel()
    headers = guest_auth_headers(identity_provider, bundle)
    (guest,) = bundle.all_guests

    body = {
        "responses": [
            {"guest_id": str(guest.id), "attending": True, "dietary_restrictions": ["  "]}
        ]
    }
    overrides = {
        get_guest_data_read_model: lambda: read_model,
        get_rsvp_update_write_model: lambda: write_model,
    }
    async with client_factory(overrides) as client:
        response = await client.put(RSVP_RESPONSES_URL, json=body, headers=headers)

    assert response.status_code == 400
    assert response.json() == {"detail": DIETARY_MISSING_MESSAGE}
    assert write_model.updates == []
