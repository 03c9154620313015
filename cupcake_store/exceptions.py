"""
Cupcake Store — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for every failure the API can report.
How:   Each exception carries a human-readable message (returned verbatim in
       the `{"error": ...}` response body) and an optional context dict
       (logged, never returned). Global handlers in main.py map them to
       HTTP status codes.
Who:   Raised by the validation rules, the service, the repository, the
       database layer and the route dependencies.

Exception Hierarchy:
    CupcakeStoreError (base)
    ├── ValidationError              → 400 (client can fix)
    │   ├── NameRequiredError
    │   ├── NameTooShortError
    │   ├── FlavorRequiredError
    │   ├── FieldTooLongError
    │   └── InvalidPriceError
    ├── DecodeError                  → 400 malformed request body
    ├── InvalidIDError               → 400 bad path identifier
    ├── RecordNotFoundError          → 404 on GET, 400 otherwise
    ├── CupcakeNotFoundError         → 400 (delete of a missing cupcake)
    ├── DatabaseError                → 500
    ├── UnsupportedDialectError      → startup only, fatal
    └── DatabaseConnectionError      → startup only, fatal
"""

from typing import Any, Dict, Optional


class CupcakeStoreError(Exception):
    """
    Base exception for all Cupcake Store application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


# ══════════════════════════════════════════════════════════════════════════
# Validation: field-level invariant violations
# ══════════════════════════════════════════════════════════════════════════


class ValidationError(CupcakeStoreError):
    """
    Raised when a create or update request violates a field invariant.

    HTTP: 400 Bad Request. The message names the violated invariant, e.g.
    "price must be greater than zero".
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NameRequiredError(ValidationError):
    """Trimmed name is empty on create."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="name is required", field="name", context=context)


class NameTooShortError(ValidationError):
    """Trimmed name is shorter than two bytes of UTF-8."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="name must have at least 2 characters", field="name", context=context
        )


class FlavorRequiredError(ValidationError):
    """Trimmed flavor is empty on create."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="flavor is required", field="flavor", context=context)


class FieldTooLongError(ValidationError):
    """Trimmed name or flavor does not fit its 100-character column."""

    def __init__(self, field: str, limit: int, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"{field} must have at most {limit} characters",
            field=field,
            context=context,
        )
        self.limit = limit


class InvalidPriceError(ValidationError):
    """Price in cents is zero or negative."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="price must be greater than zero", field="price_cents", context=context
        )


# ══════════════════════════════════════════════════════════════════════════
# Transport: request decoding and path parameters
# ══════════════════════════════════════════════════════════════════════════


class DecodeError(CupcakeStoreError):
    """
    Raised when the request body cannot be decoded into the request model.

    When:  Malformed JSON, a non-object body, or a field of the wrong JSON
           type (e.g. `"price_cents": "1500"`).
    HTTP:  400 Bad Request
    """

    def __init__(
        self,
        message: str = "Error decoding request",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidIDError(CupcakeStoreError):
    """
    Raised when the `{id}` path segment is not a positive 32-bit integer.

    HTTP: 400 Bad Request, rejected before the service is called.
    """

    def __init__(self, raw_id: Optional[str] = None):
        ctx = {"raw_id": raw_id} if raw_id is not None else {}
        super().__init__(message="Invalid ID", context=ctx)


# ══════════════════════════════════════════════════════════════════════════
# Persistence: lookups and storage failures
# ══════════════════════════════════════════════════════════════════════════


class RecordNotFoundError(CupcakeStoreError):
    """
    Raised by the repository when no row matches the requested identifier.

    This is the persistence layer's own not-found. The service passes it
    through unchanged for get and update; delete checks existence first and
    raises CupcakeNotFoundError instead.

    HTTP:  404 on GET /api/v1/cupcakes/{id}, 400 on every other route.
    """

    def __init__(
        self,
        resource_id: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message="record not found", context=ctx)
        self.resource_id = resource_id


class CupcakeNotFoundError(CupcakeStoreError):
    """
    Raised by the service when deleting a cupcake that does not exist.

    HTTP: 400 Bad Request
    """

    def __init__(
        self,
        cupcake_id: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if cupcake_id is not None:
            ctx["cupcake_id"] = cupcake_id
        super().__init__(message="cupcake not found", context=ctx)
        self.cupcake_id = cupcake_id


class DatabaseError(CupcakeStoreError):
    """
    Raised when a database operation fails unexpectedly.

    HTTP: 500. The message returned to the client is generic; the
    underlying driver error is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


# ══════════════════════════════════════════════════════════════════════════
# Startup: fatal configuration and connection errors
# ══════════════════════════════════════════════════════════════════════════


class UnsupportedDialectError(CupcakeStoreError):
    """Raised when DB_DIALECT names an engine we have no driver for."""

    def __init__(self, dialect: str):
        super().__init__(
            message=f"unsupported database dialect: {dialect}",
            context={"dialect": dialect},
        )
        self.dialect = dialect


class DatabaseConnectionError(CupcakeStoreError):
    """
    Raised when the engine cannot be created, reached, or migrated at startup.

    The lifespan handler logs and re-raises it, which makes uvicorn abort
    startup and exit the process.
    """

    def __init__(
        self,
        reason: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=f"error connecting to database: {reason}",
            context=context,
        )
