from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class APIError(Exception):
    def __init__(self, code: str, message: str, status: int = 400, details: dict | None = None):
        self.code = code
        self.message = message
        self.status = status
        self.details = details or {}
        super().__init__(message)


class NotFoundError(APIError):
    def __init__(self, code: str = "NOT_FOUND", message: str = "Resource not found", details: dict | None = None):
        super().__init__(code, message, 404, details)


class ValidationError(APIError):
    """Rejected config. ``details["errors"]`` holds the field-level messages."""

    def __init__(self, code: str = "VALIDATION_ERROR", message: str = "Invalid input", details: dict | None = None):
        super().__init__(code, message, 400, details)


class ConflictError(APIError):
    def __init__(self, code: str = "CONFLICT", message: str = "Conflicting state", details: dict | None = None):
        super().__init__(code, message, 409, details)


class AlreadyActiveError(ConflictError):
    def __init__(self, active_game_id: str | None = None, pending_game_id: str | None = None):
        if pending_game_id:
            message = f"Game '{pending_game_id}' is still starting"
        elif active_game_id:
            message = f"Game '{active_game_id}' is already active"
        else:
            message = "A game is already active"
        super().__init__(
            "ALREADY_ACTIVE",
            message,
            {"activeGameId": active_game_id, "pendingGameId": pending_game_id},
        )


class NotActiveError(ConflictError):
    def __init__(self):
        super().__init__("NOT_ACTIVE", "No game is active")


class RuntimeServiceError(APIError):
    """GameRuntime call failed or timed out. Transient, safe to retry."""

    def __init__(self, code: str = "RUNTIME_ERROR", message: str = "Game runtime error", details: dict | None = None):
        super().__init__(code, message, 502, details)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        return JSONResponse(
            status_code=exc.status,
            content={
                "error": {
                    "code": exc.code,
                    "message": exc.message,
                    "details": exc.details,
                }
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": str(exc) if app.debug else "Internal server error",
                    "details": {},
                }
            },
        )
