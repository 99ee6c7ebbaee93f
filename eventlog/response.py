from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from eventlog.models.schemas import ErrorEnvelope, ErrResponse


def respond_with_error(
    status_code: int,
    message: str,
    err: BaseException | str | None,
    trace_id: str,
) -> JSONResponse:
    """Build the standard ``{"error": {...}}`` JSON response."""

    envelope = ErrorEnvelope(
        error=ErrResponse(
            code=status_code,
            reason="" if err is None else str(err),
            message=message,
            error_code=trace_id,
        )
    )
    return JSONResponse(status_code=status_code, content=envelope.model_dump())


def respond_with_success(status_code: int, data: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(data))
