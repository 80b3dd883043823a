import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError

from wedding_portal.admin.features.create_invitation.dtos import (
    CreateInvitationRequest,
    CreateInvitationResponse,
    InvitationConflictError,
    InvitationData,
    InvitationValidationError,
    validate_invitation,
)
from wedding_portal.admin.features.create_invitation.write_model import (
    CREATE_IDENTITY_STEP,
    CREATE_INVITE_STEP,
    CREATE_PRIMARY_GUEST_STEP,
    InvitationProvisioner,
    ProvisioningStore,
    SqlProvisioningStore,
)
from wedding_portal.admin.urls import CREATE_INVITATION_URL
from wedding_portal.api_errors import ApiError
from wedding_portal.auth.dependencies import get_identity_provider, require_admin
from wedding_portal.auth.identity import IdentityProvider, IdentityProviderError
from wedding_portal.auth.read_models import AdminUserDTO
from wedding_portal.saga import SagaStepFailedError

logger = logging.getLogger(__name__)

router = APIRouter()

STEP_FAILURE_MESSAGES = {
    CREATE_IDENTITY_STEP: "Failed to create authentication account",
    CREATE_INVITE_STEP: "Failed to create invite record",
    CREATE_PRIMARY_GUEST_STEP: "Failed to create primary guest record",
}


def get_provisioning_store() -> ProvisioningStore:
    """Dependency to get the provisioning store instance."""
    return SqlProvisioningStore()


@router.post(
    CREATE_INVITATION_URL,
    response_model=CreateInvitationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_invitation(
    request: CreateInvitationRequest,
    admin: AdminUserDTO = Depends(require_admin),
    identity_provider: IdentityProvider = Depends(get_identity_provider),
    store: ProvisioningStore = Depends(get_provisioning_store),
) -> CreateInvitationResponse:
    """
    Create an invitation: a sign-in account for the primary guest (the invite
    code is the password), the invite, and its guest rows.
    The invite code is returned for manual distribution.
    """
    try:
        invitation = validate_invitation(request)
    except InvitationValidationError as e:
        raise ApiError.validation(str(e))

    provisioner = InvitationProvisioner(identity_provider=identity_provider, store=store)
    try:
        created = await provisioner.create_invitation(invitation)
    except InvitationConflictError as e:
        raise ApiError.conflict(str(e))
    except IdentityProviderError:
        logger.exception("Error checking existing users")
        raise ApiError.internal("Failed to check existing users")
    except SQLAlchemyError:
        logger.exception("Error checking invite code")
        raise ApiError.internal("Failed to check invite code")
    except SagaStepFailedError as e:
        prefix = STEP_FAILURE_MESSAGES.get(e.step, "Failed to create invitation")
        raise ApiError.internal(f"{prefix}: {e.cause}")

    logger.info("Invitation %s created by %s", created.invite_code, admin.email)
    return CreateInvitationResponse(
        invite_code=created.invite_code,
        data=InvitationData(invite_id=created.invite_id, primary_guest_id=created.primary_guest_id),
    )
