LOGIN_URL = "/api/v1/auth/login"
LOGOUT_URL = "/api/v1/auth/logout"
ADMIN_STATUS_URL = "/api/v1/auth/me/admin"
