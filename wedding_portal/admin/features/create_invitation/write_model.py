"""Provisioning of a new invitation across the session store and the database.

The session store and the database share no transaction, so the writes run
as a saga: a failed step undoes the steps before it.
"""

import logging
from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from wedding_portal.admin.features.create_invitation.dtos import (
    CreatedInvitationDTO,
    InvitationConflictError,
    NewInvitationDTO,
)
from wedding_portal.auth.identity import IdentityProvider
from wedding_portal.config.database import async_session_manager
from wedding_portal.guests.dtos import RsvpStatus
from wedding_portal.guests.repository.orm_models import Guest, Invite
from wedding_portal.saga import SagaRunner, SagaStep

logger = logging.getLogger(__name__)

EMAIL_TAKEN_MESSAGE = (
    "This email is already registered. Please ask the user to log in or reset their password."
)
INVITE_CODE_TAKEN_MESSAGE = "This invite code is already in use. Please choose a different code."

CREATE_IDENTITY_STEP = "create_identity"
CREATE_INVITE_STEP = "create_invite"
CREATE_PRIMARY_GUEST_STEP = "create_primary_guest"
CREATE_SECOND_GUEST_STEP = "create_second_guest"


class ProvisioningStore(ABC):
    """Database writes of the provisioning saga. Each call commits on its own."""

    @abstractmethod
    async def invite_code_exists(self, invite_code: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def insert_invite(self, invitation: NewInvitationDTO) -> UUID:
        raise NotImplementedError

    @abstractmethod
    async def delete_invite(self, invite_id: UUID) -> None:
        raise NotImplementedError

    @abstractmethod
    async def insert_guest(
        self,
        invite_id: UUID,
        first_name: str,
        last_name: str,
        email: str | None,
        user_id: UUID | None,
        is_primary: bool,
    ) -> UUID:
        raise NotImplementedError


class SqlProvisioningStore(ProvisioningStore):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def invite_code_exists(self, invite_code: str) -> bool:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(Invite.id).where(Invite.invite_code == invite_code)
            )
            return result.first() is not None

    async def insert_invite(self, invitation: NewInvitationDTO) -> UUID:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            invite = Invite(
                invite_code=invitation.invite_code,
                invite_type=invitation.invite_type,
                accommodation_group=invitation.accommodation_group,
                invited_to_atitlan=invitation.invited_to_atitlan,
                rsvp_status=RsvpStatus.PENDING,
            )
            session.add(invite)
            await session.flush()
            return invite.id

    async def delete_invite(self, invite_id: UUID) -> None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            await session.execute(delete(Invite).where(Invite.id == invite_id))
            await session.flush()

    async def insert_guest(
        self,
        invite_id: UUID,
        first_name: str,
        last_name: str,
        email: str | None,
        user_id: UUID | None,
        is_primary: bool,
    ) -> UUID:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            guest = Guest(
                invite_id=invite_id,
                first_name=first_name,
                last_name=last_name,
                email=email,
                user_id=user_id,
                is_primary=is_primary,
            )
            session.add(guest)
            await session.flush()
            return guest.id


class InvitationProvisioner:
    """Creates the identity, invite and guest rows of one invitation."""

    def __init__(
        self,
        identity_provider: IdentityProvider,
        store: ProvisioningStore,
        runner: SagaRunner | None = None,
    ) -> None:
        self.identity_provider = identity_provider
        self.store = store
        self.runner = runner or SagaRunner(name="create_invitation")

    async def ensure_available(self, invitation: NewInvitationDTO) -> None:
        if await self.identity_provider.email_exists(invitation.primary_email):
            raise InvitationConflictError(EMAIL_TAKEN_MESSAGE)
        if await self.store.invite_code_exists(invitation.invite_code):
            raise InvitationConflictError(INVITE_CODE_TAKEN_MESSAGE)

    def build_steps(self, invitation: NewInvitationDTO) -> list[SagaStep]:
        async def create_identity(results):
            # the invite code doubles as the guest's password
            return await self.identity_provider.create_user(
                invitation.primary_email, invitation.invite_code
            )

        async def delete_identity(results):
            await self.identity_provider.delete_user(results[CREATE_IDENTITY_STEP].id)

        async def create_invite(results):
            return await self.store.insert_invite(invitation)

        async def delete_invite(results):
            await self.store.delete_invite(results[CREATE_INVITE_STEP])

        async def create_primary_guest(results):
            return await self.store.insert_guest(
                invite_id=results[CREATE_INVITE_STEP],
                first_name=invitation.primary_first_name,
                last_name=invitation.primary_last_name,
                email=invitation.primary_email,
                user_id=results[CREATE_IDENTITY_STEP].id,
                is_primary=True,
            )

        async def create_second_guest(results):
            return await self.store.insert_guest(
                invite_id=results[CREATE_INVITE_STEP],
                first_name=invitation.second_first_name,
                last_name=invitation.second_last_name,
                email=None,
                user_id=None,
                is_primary=False,
            )

        steps = [
            SagaStep(CREATE_IDENTITY_STEP, create_identity, delete_identity),
            SagaStep(CREATE_INVITE_STEP, create_invite, delete_invite),
            SagaStep(CREATE_PRIMARY_GUEST_STEP, create_primary_guest),
        ]
        if invitation.has_second_guest:
            # the invitation is usable without the partner row
            steps.append(SagaStep(CREATE_SECOND_GUEST_STEP, create_second_guest, critical=False))
        return steps

    async def create_invitation(self, invitation: NewInvitationDTO) -> CreatedInvitationDTO:
        """
        Raises InvitationConflictError when the email or invite code is taken,
        SagaStepFailedError when a write fails (earlier writes are undone).
        """
        await self.ensure_available(invitation)

        logger.info(
            "Creating %s invitation %s for %s",
            invitation.invite_type.value,
            invitation.invite_code,
            invitation.primary_email,
        )
        results = await self.runner.run(self.build_steps(invitation))

        return CreatedInvitationDTO(
            invite_code=invitation.invite_code,
            invite_id=results[CREATE_INVITE_STEP],
            primary_guest_id=results[CREATE_PRIMARY_GUEST_STEP],
            second_guest_id=results.get(CREATE_SECOND_GUEST_STEP),
        )
