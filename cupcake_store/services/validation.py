"""
Cupcake Store — Validation & Merge Rules
=========================================

What:  Field-level invariants for creating a cupcake and for merging a
       partial update onto an existing one.
How:   Plain functions, no I/O. They raise the ValidationError subclasses
       from cupcake_store.exceptions; the message of each is returned
       verbatim to the client.
Who:   CupcakeService.

Create rules (checked in this order):
    1. trimmed name empty                 → NameRequiredError
    2. trimmed name under 2 UTF-8 bytes   → NameTooShortError
    3. trimmed name over 100 characters   → FieldTooLongError
    4. trimmed flavor empty               → FlavorRequiredError
    5. trimmed flavor over 100 characters → FieldTooLongError
    6. price_cents <= 0                   → InvalidPriceError

Update rules (only for fields present in the request, in this order):
    name          trimmed; under 2 bytes (empty included) → NameTooShortError,
                  over 100 characters → FieldTooLongError
    flavor        trimmed; no emptiness check, over 100 characters → FieldTooLongError
    price_cents   <= 0 → InvalidPriceError
    is_available  set as given

    Every present field is checked before any attribute is assigned, so a
    rejected update leaves the entity exactly as it was fetched.

    The minimum counts encoded bytes, so a single multi-byte character such
    as "é" is an acceptable name. The maximum counts characters, matching
    the VARCHAR(100) columns.
"""

from typing import Any, Dict

from cupcake_store.exceptions import (
    FieldTooLongError,
    FlavorRequiredError,
    InvalidPriceError,
    NameRequiredError,
    NameTooShortError,
)
from cupcake_store.models.cupcake import Cupcake
from cupcake_store.schemas.cupcake import CupcakeCreate, CupcakeUpdate

MIN_NAME_BYTES = 2
MAX_TEXT_LENGTH = 100


def _check_name_length(name: str) -> None:
    encoded_length = len(name.encode("utf-8"))
    if encoded_length < MIN_NAME_BYTES:
        raise NameTooShortError(context={"bytes": encoded_length})
    if len(name) > MAX_TEXT_LENGTH:
        raise FieldTooLongError("name", MAX_TEXT_LENGTH, context={"length": len(name)})


def _check_flavor_length(flavor: str) -> None:
    if len(flavor) > MAX_TEXT_LENGTH:
        raise FieldTooLongError("flavor", MAX_TEXT_LENGTH, context={"length": len(flavor)})


def validate_create(name: str, flavor: str, price_cents: int) -> None:
    """Raise the first violated create invariant, or return None."""
    trimmed_name = name.strip()
    if not trimmed_name:
        raise NameRequiredError()
    _check_name_length(trimmed_name)
    trimmed_flavor = flavor.strip()
    if not trimmed_flavor:
        raise FlavorRequiredError()
    _check_flavor_length(trimmed_flavor)
    if price_cents <= 0:
        raise InvalidPriceError(context={"price_cents": price_cents})


def build_cupcake(request: CupcakeCreate) -> Cupcake:
    """
    Validate a create request and construct the (unsaved) entity.

    Name and flavor are stored trimmed; a new cupcake is always available.
    """
    validate_create(request.name, request.flavor, request.price_cents)
    return Cupcake(
        name=request.name.strip(),
        flavor=request.flavor.strip(),
        price_cents=request.price_cents,
        is_available=True,
    )


def validate_update(request: CupcakeUpdate) -> Dict[str, Any]:
    """
    Check the present fields of an update request.

    Returns:
        Mapping of attribute name → new value, containing only the fields
        the request supplied (with strings already trimmed).
    """
    changes: Dict[str, Any] = {}

    if request.name is not None:
        name = request.name.strip()
        _check_name_length(name)
        changes["name"] = name

    if request.flavor is not None:
        flavor = request.flavor.strip()
        _check_flavor_length(flavor)
        changes["flavor"] = flavor

    if request.price_cents is not None:
        if request.price_cents <= 0:
            raise InvalidPriceError(context={"price_cents": request.price_cents})
        changes["price_cents"] = request.price_cents

    if request.is_available is not None:
        changes["is_available"] = request.is_available

    return changes


def apply_update(cupcake: Cupcake, request: CupcakeUpdate) -> Cupcake:
    """Merge a validated partial update onto `cupcake` and return it."""
    changes = validate_update(request)
    for attr, value in changes.items():
        setattr(cupcake, attr, value)
    return cupcake
