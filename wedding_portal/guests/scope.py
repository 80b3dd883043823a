from collections.abc import Iterable
from dataclasses import dataclass
from uuid import UUID

from wedding_portal.guests.dtos import GuestBundleDTO, OutOfInviteScopeError


@dataclass(frozen=True)
class InviteScope:
    """What a signed-in guest may read and write: their own invite and its guests."""

    guest_id: UUID
    invite_id: UUID
    guest_ids: frozenset[UUID]

    @classmethod
    def from_bundle(cls, bundle: GuestBundleDTO) -> "InviteScope":
        return cls(
            guest_id=bundle.current_guest.id,
            invite_id=bundle.invite.id,
            guest_ids=bundle.guest_ids,
        )

    def allows_guest(self, guest_id: UUID) -> bool:
        return guest_id in self.guest_ids

    def ensure_guest(self, guest_id: UUID) -> None:
        if not self.allows_guest(guest_id):
            raise OutOfInviteScopeError(guest_id)

    def ensure_guests(self, guest_ids: Iterable[UUID]) -> None:
        for guest_id in guest_ids:
            self.ensure_guest(guest_id)
