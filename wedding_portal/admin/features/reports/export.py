"""CSV exports of the admin tables, with the back office's column headers."""

import csv
import io
from collections.abc import Iterable, Mapping, Sequence
from datetime import date

from fastapi.responses import StreamingResponse

from wedding_portal.admin.features.reports.read_model import (
    GuestRowDTO,
    PaymentRowDTO,
    RsvpRowDTO,
    TravelRowDTO,
)
from wedding_portal.admin.features.reports.summaries import DietarySummaryItem

GUEST_COLUMNS = (
    "First Name",
    "Last Name",
    "Email",
    "Invite Type",
    "Accommodation Group",
    "RSVP Status",
    "Attending",
    "Invited to Atitlan",
)
RSVP_COLUMNS = (
    "Guest Name",
    "Email",
    "Submitted At",
    "Attending",
    "Dietary Restrictions",
    "Dietary Notes",
    "Accommodation Needed",
    "Atitlan Attending",
)
DIETARY_COLUMNS = ("Guest Name", "Restriction", "Notes")
PAYMENT_COLUMNS = (
    "Guest(s)",
    "Type",
    "Amount Committed",
    "Amount Paid",
    "Balance",
    "Payment Method",
    "Notes",
)
TRAVEL_COLUMNS = (
    "Guest Name",
    "Email",
    "Arrival Date",
    "Arrival Time",
    "Arrival Airline",
    "Arrival Flight #",
    "Departure Date",
    "Departure Time",
    "Departure Airline",
    "Departure Flight #",
    "Needs Transfer",
    "Notes",
)


def _yes_no(value: bool | None) -> str:
    if value is None:
        return ""
    return "Yes" if value else "No"


def _text(value) -> str:
    return "" if value is None else str(value)


def to_csv(columns: Sequence[str], rows: Iterable[Mapping[str, str]]) -> str:
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=list(columns), extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return output.getvalue()


def guests_csv(rows: Iterable[GuestRowDTO]) -> str:
    return to_csv(
        GUEST_COLUMNS,
        (
            {
                "First Name": row.first_name,
                "Last Name": row.last_name,
                "Email": _text(row.email),
                "Invite Type": row.invite_type.value,
                "Accommodation Group": _text(row.accommodation_group),
                "RSVP Status": row.rsvp_status.value,
                "Attending": _yes_no(row.attending),
                "Invited to Atitlan": _yes_no(row.invited_to_atitlan),
            }
            for row in rows
        ),
    )


def rsvps_csv(rows: Iterable[RsvpRowDTO]) -> str:
    return to_csv(
        RSVP_COLUMNS,
        (
            {
                "Guest Name": row.guest_name,
                "Email": _text(row.email),
                "Submitted At": row.submitted_at.isoformat() if row.submitted_at else "",
                "Attending": _yes_no(row.attending),
                "Dietary Restrictions": ", ".join(
                    tag.replace("_", " ") for tag in row.dietary_restrictions
                ),
                "Dietary Notes": _text(row.dietary_notes),
                "Accommodation Needed": _yes_no(row.accommodation_needed),
                "Atitlan Attending": _yes_no(row.atitlan_attending),
            }
            for row in rows
        ),
    )


def dietary_csv(summary: Iterable[DietarySummaryItem]) -> str:
    return to_csv(
        DIETARY_COLUMNS,
        (
            {"Guest Name": guest.name, "Restriction": item.restriction, "Notes": guest.notes}
            for item in summary
            for guest in item.guests
        ),
    )


def payments_csv(rows: Iterable[PaymentRowDTO]) -> str:
    return to_csv(
        PAYMENT_COLUMNS,
        (
            {
                "Guest(s)": row.guest_names,
                "Type": row.payment_type.value,
                "Amount Committed": f"{row.amount_committed:.2f}",
                "Amount Paid": f"{row.amount_paid:.2f}",
                "Balance": f"{row.balance:.2f}",
                "Payment Method": _text(row.payment_method),
                "Notes": _text(row.notes),
            }
            for row in rows
        ),
    )


def travel_csv(rows: Iterable[TravelRowDTO]) -> str:
    return to_csv(
        TRAVEL_COLUMNS,
        (
            {
                "Guest Name": row.guest_name,
                "Email": _text(row.email),
                "Arrival Date": _text(row.travel.arrival_date),
                "Arrival Time": _text(row.travel.arrival_time),
                "Arrival Airline": _text(row.travel.arrival_airline),
                "Arrival Flight #": _text(row.travel.arrival_flight_number),
                "Departure Date": _text(row.travel.departure_date),
                "Departure Time": _text(row.travel.departure_time),
                "Departure Airline": _text(row.travel.departure_airline),
                "Departure Flight #": _text(row.travel.departure_flight_number),
                "Needs Transfer": _yes_no(row.travel.needs_transfer),
                "Notes": _text(row.travel.notes),
            }
            for row in rows
        ),
    )


def csv_response(content: str, name: str, today: date | None = None) -> StreamingResponse:
    """Download named like the back office's, e.g. guests-2026-10-19.csv."""
    filename = f"{name}-{(today or date.today()).isoformat()}.csv"
    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
