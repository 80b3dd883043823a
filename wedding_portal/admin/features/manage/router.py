import logging
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr, Field

from wedding_portal.admin.features.manage.write_model import (
    AdminManageWriteModel,
    AdminRsvpUpdateDTO,
    GuestUpdateDTO,
    PaymentUpdateDTO,
    SqlAdminManageWriteModel,
)
from wedding_portal.admin.urls import ADMIN_GUEST_URL, ADMIN_PAYMENT_URL, ADMIN_RSVP_URL
from wedding_portal.auth.dependencies import require_admin
from wedding_portal.auth.read_models import AdminUserDTO
from wedding_portal.guests.cache import GuestDataCache, get_guest_data_cache
from wedding_portal.guests.dtos import InviteType, PaymentType, RsvpStatus

logger = logging.getLogger(__name__)

router = APIRouter()


def get_admin_manage_write_model() -> AdminManageWriteModel:
    """Dependency to get admin manage write model instance."""
    return SqlAdminManageWriteModel()


class GuestUpdateRequest(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr | None = None
    invite_type: InviteType
    accommodation_group: str | None = None


class AdminRsvpUpdateRequest(BaseModel):
    attending: bool
    # labels or stored tags, e.g. "Gluten-Free" or "gluten_free"
    dietary_restrictions: list[str] = []
    dietary_notes: str | None = None
    accommodation_needed: bool = False
    atitlan_attending: bool = False


class PaymentUpdateRequest(BaseModel):
    amount_paid: Decimal = Field(ge=0)
    payment_method: str | None = None
    notes: str | None = None


class MessageResponse(BaseModel):
    message: str


class AdminRsvpUpdateResponse(MessageResponse):
    rsvp_status: RsvpStatus


class PaymentResponse(BaseModel):
    id: UUID
    invite_id: UUID
    payment_type: PaymentType
    amount_committed: float
    amount_paid: float
    balance: float
    payment_method: str | None = None
    notes: str | None = None


@router.put(ADMIN_GUEST_URL, response_model=MessageResponse)
async def update_guest(
    guest_id: UUID,
    request: GuestUpdateRequest,
    admin: AdminUserDTO = Depends(require_admin),
    write_model: AdminManageWriteModel = Depends(get_admin_manage_write_model),
    cache: GuestDataCache = Depends(get_guest_data_cache),
) -> MessageResponse:
    """Edit a guest's name and email, and their invite's type and accommodation group."""
    try:
        await write_model.update_guest(
            guest_id,
            GuestUpdateDTO(
                first_name=request.first_name,
                last_name=request.last_name,
                email=str(request.email) if request.email else None,
                invite_type=request.invite_type,
                accommodation_group=request.accommodation_group,
            ),
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    cache.clear()
    logger.info("Guest %s updated by %s", guest_id, admin.email)
    return MessageResponse(message="Guest updated successfully")


@router.delete(ADMIN_GUEST_URL, response_model=MessageResponse)
async def delete_guest(
    guest_id: UUID,
    admin: AdminUserDTO = Depends(require_admin),
    write_model: AdminManageWriteModel = Depends(get_admin_manage_write_model),
    cache: GuestDataCache = Depends(get_guest_data_cache),
) -> MessageResponse:
    try:
        await write_model.delete_guest(guest_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    cache.clear()
    logger.info("Guest %s deleted by %s", guest_id, admin.email)
    return MessageResponse(message="Guest deleted successfully")


@router.put(ADMIN_RSVP_URL, response_model=AdminRsvpUpdateResponse)
async def update_rsvp(
    response_id: UUID,
    request: AdminRsvpUpdateRequest,
    admin: AdminUserDTO = Depends(require_admin),
    write_model: AdminManageWriteModel = Depends(get_admin_manage_write_model),
    cache: GuestDataCache = Depends(get_guest_data_cache),
) -> AdminRsvpUpdateResponse:
    try:
        status = await write_model.update_rsvp(
            response_id,
            AdminRsvpUpdateDTO(
                attending=request.attending,
                dietary_restrictions=tuple(request.dietary_restrictions),
                dietary_notes=request.dietary_notes,
                accommodation_needed=request.accommodation_needed,
                atitlan_attending=request.atitlan_attending,
            ),
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    cache.clear()
    logger.info("RSVP response %s updated by %s", response_id, admin.email)
    return AdminRsvpUpdateResponse(message="RSVP updated successfully", rsvp_status=status)


@router.patch(ADMIN_PAYMENT_URL, response_model=PaymentResponse)
async def update_payment(
    payment_id: UUID,
    request: PaymentUpdateRequest,
    admin: AdminUserDTO = Depends(require_admin),
    write_model: AdminManageWriteModel = Depends(get_admin_manage_write_model),
    cache: GuestDataCache = Depends(get_guest_data_cache),
) -> PaymentResponse:
    """Record what was actually paid against a commitment."""
    try:
        payment = await write_model.update_payment(
            payment_id,
            PaymentUpdateDTO(
                amount_paid=request.amount_paid,
                payment_method=request.payment_method,
                notes=request.notes,
            ),
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    cache.clear()
    logger.info("Payment %s updated by %s", payment_id, admin.email)
    return PaymentResponse(
        id=payment.id,
        invite_id=payment.invite_id,
        payment_type=payment.payment_type,
        amount_committed=float(payment.amount_committed),
        amount_paid=float(payment.amount_paid),
        balance=float(payment.balance),
        payment_method=payment.payment_method,
        notes=payment.notes,
    )
