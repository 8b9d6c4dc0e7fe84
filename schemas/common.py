"""
schemas/common.py

- Shared schemas reused across routers (Pydantic v2)
  error response: ErrorDetail, ErrorResponse, COMMON_ERRORS
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class ErrorDetail(BaseModel):
    code: str = Field(..., description="error identifier (e.g. NOT_FOUND, INVALID_WEIGHT_SUM)")
    message: str = Field(..., description="human readable message")
    field: Optional[str] = Field(default=None, description="offending request field, when known")


class ErrorResponse(BaseModel):
    """Body returned by the handlers in middlewares/error_handler.py"""
    success: bool = False
    error: ErrorDetail
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(extra="ignore")


# ✅ documented error responses shared by the owner-scoped routers
COMMON_ERRORS = {
    401: {"model": ErrorResponse, "description": "Missing or invalid session"},
    404: {"model": ErrorResponse, "description": "Not found or owned by another user"},
}

