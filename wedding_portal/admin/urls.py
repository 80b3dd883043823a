CREATE_INVITATION_URL = "/api/admin/invitations/create"

ADMIN_GUESTS_URL = "/api/v1/admin/guests"
ADMIN_GUESTS_EXPORT_URL = "/api/v1/admin/guests/export"
ADMIN_GUEST_URL = "/api/v1/admin/guests/{guest_id}"

ADMIN_RSVPS_URL = "/api/v1/admin/rsvps"
ADMIN_RSVPS_EXPORT_URL = "/api/v1/admin/rsvps/export"
ADMIN_RSVP_URL = "/api/v1/admin/rsvps/{response_id}"

ADMIN_DIETARY_URL = "/api/v1/admin/dietary"
ADMIN_DIETARY_EXPORT_URL = "/api/v1/admin/dietary/export"

ADMIN_PAYMENTS_URL = "/api/v1/admin/payments"
ADMIN_PAYMENTS_EXPORT_URL = "/api/v1/admin/payments/export"
ADMIN_PAYMENT_URL = "/api/v1/admin/payments/{payment_id}"

ADMIN_TRAVEL_URL = "/api/v1/admin/travel"
ADMIN_TRAVEL_EXPORT_URL = "/api/v1/admin/travel/export"

ADMIN_STATS_URL = "/api/v1/admin/stats"
