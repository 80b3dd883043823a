GET_GUEST_INFO_URL = "/api/v1/guests/me"

RSVP_URL = "/api/v1/rsvp"
RSVP_READINESS_URL = "/api/v1/rsvp/readiness"
RSVP_ACCOMMODATION_GROUP_URL = "/api/v1/rsvp/accommodation-group"
RSVP_PLUS_ONE_URL = "/api/v1/rsvp/plus-one"
RSVP_RESPONSES_URL = "/api/v1/rsvp/responses"

TRAVEL_URL = "/api/v1/travel"
TRAVEL_GUEST_URL = "/api/v1/travel/{guest_id}"

DASHBOARD_URL = "/api/v1/dashboard"
