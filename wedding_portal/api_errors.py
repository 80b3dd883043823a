from fastapi import Request
from fastapi.responses import JSONResponse


class ApiError(Exception):
    """Error rendered as ``{"error": ..., "message": ...}`` by the auth and admin endpoints."""

    def __init__(self, status_code: int, error: str, message: str) -> None:
        self.status_code = status_code
        self.error = error
        self.message = message
        super().__init__(message)

    @classmethod
    def unauthorized(cls, message: str) -> "ApiError":
        return cls(401, "Unauthorized", message)

    @classmethod
    def forbidden(cls, message: str) -> "ApiError":
        return cls(403, "Forbidden", message)

    @classmethod
    def validation(cls, message: str) -> "ApiError":
        return cls(400, "Validation error", message)

    @classmethod
    def conflict(cls, message: str) -> "ApiError":
        return cls(409, "Conflict", message)

    @classmethod
    def internal(cls, message: str) -> "ApiError":
        return cls(500, "Internal server error", message)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "message": exc.message},
    )
