from enum import Enum


class TableNames(str, Enum):
    GUESTS = "guests"
    INVITES = "invites"
    RSVP_RESPONSES = "rsvp_responses"
    TRAVEL_DETAILS = "travel_details"
    PAYMENTS = "payments"
    ACCOMMODATION_GROUPS = "accommodation_groups"
    ADMIN_USERS = "admin_users"
