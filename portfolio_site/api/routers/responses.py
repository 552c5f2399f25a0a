"""Shared JSON response envelopes for API routers."""

from fastapi.responses import JSONResponse


def api_error_response(
    code: str,
    message: str,
    status_code: int,
    field_name: str | None = None,
) -> JSONResponse:
    """Build the shared error envelope.

    Args:
        code: Deterministic error code.
        message: Human-readable message.
        status_code: HTTP status code.
        field_name: Optional offending input field.

    Returns:
        JSONResponse: Error envelope response.
    """

    payload: dict[str, object] = {"status": "error", "code": code, "message": message}
    if field_name is not None:
        payload["field"] = field_name
    return JSONResponse(content=payload, status_code=status_code)


__all__ = ["api_error_response"]
