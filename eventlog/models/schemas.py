from __future__ import annotations

from pydantic import BaseModel


class ErrResponse(BaseModel):
    code: int
    reason: str
    message: str
    error_code: str


class ErrorEnvelope(BaseModel):
    error: ErrResponse


class HealthResponse(BaseModel):
    status: str = "ok"


class InfoResponse(BaseModel):
    name: str
    debug: bool
    working_dir: str
