"""CLI commands for wedding portal management."""

import asyncio
import logging
from decimal import Decimal

import typer
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from wedding_portal.admin.features.create_invitation.dtos import (
    CreateInvitationRequest,
    InvitationConflictError,
    InvitationValidationError,
    validate_invitation,
)
from wedding_portal.admin.features.create_invitation.write_model import (
    InvitationProvisioner,
    SqlProvisioningStore,
)
from wedding_portal.auth.identity import IdentityProviderError, SupabaseIdentityProvider
from wedding_portal.config.database import async_session_manager
from wedding_portal.config.logging import setup_logging
from wedding_portal.guests.repository.orm_models import Guest, Invite, RsvpResponse
from wedding_portal.models import AccommodationGroup, AdminRole, AdminUser
from wedding_portal.saga import SagaStepFailedError

app = typer.Typer(help="CLI commands for wedding portal management")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level")):
    setup_logging(logging.DEBUG if verbose else logging.INFO)


@app.command()
def create_invitation(
    email: str = typer.Option(..., "--email", "-e", help="Primary guest email (sign-in name)"),
    first_name: str = typer.Option(..., "--first-name", help="Primary guest first name"),
    last_name: str = typer.Option(..., "--last-name", help="Primary guest last name"),
    invite_code: str = typer.Option(..., "--code", help="Invite code, also the guest's password"),
    accommodation_group: str = typer.Option(..., "--group", help="Accommodation group code"),
    invite_type: str = typer.Option("single", "--type", help="single, couple or plusone"),
    second_first_name: str = typer.Option(None, "--second-first-name"),
    second_last_name: str = typer.Option(None, "--second-last-name"),
    atitlan: bool = typer.Option(False, "--atitlan", help="Invite to the Atitlan excursion"),
):
    """Create a sign-in account, invite and guests in one go."""
    request = CreateInvitationRequest(
        primary_first_name=first_name,
        primary_last_name=last_name,
        primary_email=email,
        invite_type=invite_type,
        second_first_name=second_first_name,
        second_last_name=second_last_name,
        accommodation_group=accommodation_group,
        invited_to_atitlan=atitlan,
        invite_code=invite_code,
    )

    try:
        invitation = validate_invitation(request)
        provisioner = InvitationProvisioner(
            identity_provider=SupabaseIdentityProvider(),
            store=SqlProvisioningStore(),
        )
        created = asyncio.run(provisioner.create_invitation(invitation))
    except (InvitationValidationError, InvitationConflictError) as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)
    except (SagaStepFailedError, IdentityProviderError) as e:
        typer.secho(f"Failed to create invitation: {e}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Invitation created!", fg=typer.colors.GREEN)
    typer.secho(f"  Invite code: {created.invite_code}", fg=typer.colors.CYAN)
    typer.secho(f"  Invite ID: {created.invite_id}", fg=typer.colors.CYAN)
    typer.secho(f"  Primary guest ID: {created.primary_guest_id}", fg=typer.colors.CYAN)
    if created.second_guest_id:
        typer.secho(f"  Second guest ID: {created.second_guest_id}", fg=typer.colors.CYAN)
    elif invitation.has_second_guest:
        typer.secho("  Second guest could not be created, add them manually.", fg=typer.colors.YELLOW)


@app.command()
def add_admin(
    email: str = typer.Argument(..., help="Email the admin signs in with"),
    role: AdminRole = typer.Option(AdminRole.ADMIN, "--role", help="admin or wedding_planner"),
):
    """Grant back office access to an email."""
    async def _add_admin():
        async with async_session_manager() as session:
            admin = AdminUser(email=email.strip().lower(), role=role)
            session.add(admin)
            await session.flush()
            return admin

    try:
        admin = asyncio.run(_add_admin())
    except IntegrityError:
        typer.secho(f"{email} is already an admin", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Admin added!", fg=typer.colors.GREEN)
    typer.secho(f"  Email: {admin.email}", fg=typer.colors.BLUE)
    typer.secho(f"  Role: {admin.role.value}", fg=typer.colors.MAGENTA)


@app.command()
def add_accommodation_group(
    group_code: str = typer.Argument(..., help="Code stored on invites, e.g. 'hotel_atitlan'"),
    display_name: str = typer.Option(..., "--name", help="Name shown to guests"),
    per_night_cost: str = typer.Option(..., "--per-night", help="Cost per night"),
    number_of_nights: int = typer.Option(..., "--nights", help="Number of nights"),
    description: str = typer.Option(None, "--description"),
    payment_options: list[float] = typer.Option(
        [0, 0.5, 1],
        "--option",
        help="Contribution fraction guests may choose; repeat for each option",
    ),
):
    """Add a hotel block invites can be assigned to."""
    async def _add_group():
        async with async_session_manager() as session:
            group = AccommodationGroup(
                group_code=group_code,
                display_name=display_name,
                description=description,
                per_night_cost=Decimal(per_night_cost),
                number_of_nights=number_of_nights,
                payment_options=list(payment_options),
            )
            session.add(group)
            await session.flush()
            return group

    try:
        group = asyncio.run(_add_group())
    except IntegrityError:
        typer.secho(f"Accommodation group {group_code} already exists", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Accommodation group added!", fg=typer.colors.GREEN)
    typer.secho(f"  Code: {group.group_code}", fg=typer.colors.CYAN)
    typer.secho(f"  Name: {group.display_name}", fg=typer.colors.BLUE)
    typer.secho(
        f"  Total per guest: {group.per_night_cost * group.number_of_nights}",
        fg=typer.colors.BLUE,
    )


@app.command()
def show_invite(
    invite_code: str = typer.Argument(..., help="Invite code to show"),
):
    """Show an invite with its guests and their answers."""
    async def _show_invite():
        async with async_session_manager() as session:
            result = await session.execute(select(Invite).where(Invite.invite_code == invite_code))
            invite = result.scalar_one_or_none()
            if not invite:
                raise ValueError(f"Invite not found: {invite_code}")

            stmt = (
                select(Guest, RsvpResponse.attending)
                .outerjoin(RsvpResponse, RsvpResponse.guest_id == Guest.id)
                .where(Guest.invite_id == invite.id)
                .order_by(Guest.is_primary.desc(), Guest.created_at)
            )
            result = await session.execute(stmt)
            return invite, result.all()

    try:
        invite, guests = asyncio.run(_show_invite())
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Invite Info", fg=typer.colors.GREEN)
    typer.secho(f"  Code: {invite.invite_code}", fg=typer.colors.CYAN)
    typer.secho(f"  ID: {invite.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Type: {invite.invite_type.value}", fg=typer.colors.MAGENTA)
    typer.secho(f"  Accommodation: {invite.accommodation_group or '-'}", fg=typer.colors.BLUE)
    typer.secho(f"  Atitlan: {'yes' if invite.invited_to_atitlan else 'no'}", fg=typer.colors.BLUE)
    typer.secho(f"  RSVP status: {invite.rsvp_status.value}", fg=typer.colors.MAGENTA)
    if invite.rsvp_submitted_at:
        typer.secho(f"  Submitted: {invite.rsvp_submitted_at:%Y-%m-%d %H:%M}", fg=typer.colors.BLUE)

    typer.echo()
    typer.secho("Guests:", fg=typer.colors.GREEN)
    for guest, attending in guests:
        answer = "no answer" if attending is None else ("attending" if attending else "not attending")
        primary = " (primary)" if guest.is_primary else ""
        typer.secho(
            f"  - {guest.first_name} {guest.last_name}{primary}: {answer}",
            fg=typer.colors.BLUE,
        )


if __name__ == "__main__":
    app()
