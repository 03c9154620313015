"""
Cupcake Store — Pydantic Request/Response Schemas
==================================================

What:  Pydantic models defining the JSON contract of the API.
How:   FastAPI decodes request bodies into the request models and serializes
       ORM entities through the response models.
Who:   Route handlers (decoding/encoding) and CupcakeService (request input).

Decoding rules:
    - Request models are strict: a JSON value of the wrong type
      (`"price_cents": "1500"`, `"is_available": "yes"`) is a decode error,
      reported as 400 "Error decoding request".
    - Unknown fields are ignored.
    - price_cents must fit a signed 32-bit INTEGER column; a larger value
      is a decode error, while zero and negatives decode and are then
      rejected by the price rule.
    - CupcakeCreate fields default to their zero value so that a missing
      field reaches the validation rules ("name is required") instead of
      failing decoding.
    - CupcakeUpdate fields default to None; None means "not present".
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Bounds of the INTEGER price_cents column
PRICE_CENTS_MIN = -(2**31)
PRICE_CENTS_MAX = 2**31 - 1


# ══════════════════════════════════════════════════════════════════════════
# Request Models: What the client sends
# ══════════════════════════════════════════════════════════════════════════


class CupcakeCreate(BaseModel):
    """Body of POST /api/v1/cupcakes."""

    name: str = Field(
        default="",
        description="Display name, 2 bytes to 100 characters once trimmed",
    )
    flavor: str = Field(default="", description="Flavor, required once trimmed")
    price_cents: int = Field(
        default=0,
        ge=PRICE_CENTS_MIN,
        le=PRICE_CENTS_MAX,
        description="Price in cents, greater than zero",
    )

    model_config = ConfigDict(strict=True, extra="ignore")


class CupcakeUpdate(BaseModel):
    """
    Body of PUT /api/v1/cupcakes/{id}.

    Every field is optional. Absent (or null) fields leave the stored value
    unchanged; present fields overwrite it after validation.
    """

    name: Optional[str] = Field(
        default=None, description="New name (trimmed, 2 bytes to 100 characters)"
    )
    flavor: Optional[str] = Field(default=None, description="New flavor (trimmed)")
    price_cents: Optional[int] = Field(
        default=None,
        ge=PRICE_CENTS_MIN,
        le=PRICE_CENTS_MAX,
        description="New price in cents (> 0)",
    )
    is_available: Optional[bool] = Field(default=None, description="Availability flag")

    model_config = ConfigDict(strict=True, extra="ignore")


# ══════════════════════════════════════════════════════════════════════════
# Response Models: What the API returns
# ══════════════════════════════════════════════════════════════════════════


class CupcakeResponse(BaseModel):
    """
    Full representation of a stored cupcake.

    Returned by create, get, update (single object) and list (array).
    """

    id: int = Field(description="Store-assigned identifier")
    name: str
    flavor: str
    price_cents: int = Field(description="Price in cents")
    is_available: bool
    created_at: datetime = Field(description="Creation time (ISO 8601)")
    updated_at: datetime = Field(description="Last successful write (ISO 8601)")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive values; every timestamp is stored in UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class ErrorResponse(BaseModel):
    """
    Error body for every failed request.

    Example:
        {"error": "price must be greater than zero"}
    """

    error: str = Field(description="Human-readable description of what went wrong")


class HealthResponse(BaseModel):
    """Body of GET /health."""

    status: str = Field(description="Always 'ok' while the process is serving")
    message: str
