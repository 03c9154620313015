"""
Cupcake Store — Validation & Merge Rule Tests
==============================================

What:  Create invariants, update invariants and partial-merge behaviour.
How:   Pure function calls; no database, no HTTP.
"""

import pytest

from cupcake_store.exceptions import (
    FieldTooLongError,
    FlavorRequiredError,
    InvalidPriceError,
    NameRequiredError,
    NameTooShortError,
    ValidationError,
)
from cupcake_store.schemas.cupcake import CupcakeCreate, CupcakeUpdate
from cupcake_store.services.validation import (
    apply_update,
    build_cupcake,
    validate_create,
    validate_update,
)


class TestValidateCreate:
    """Rules for POST bodies."""

    def test_valid_request_passes(self):
        validate_create("Chocolate Especial", "Chocolate Belga", 1500)

    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_blank_name_is_required(self, name):
        with pytest.raises(NameRequiredError, match="name is required"):
            validate_create(name, "Vanilla", 1000)

    def test_blank_name_wins_over_other_errors(self):
        """Empty name is reported even when flavor and price are also invalid."""
        with pytest.raises(NameRequiredError):
            validate_create("  ", "", 0)

    @pytest.mark.parametrize("name", ["A", " A ", "\tZ\n"])
    def test_single_character_name_is_too_short(self, name):
        with pytest.raises(NameTooShortError, match="at least 2 characters"):
            validate_create(name, "Vanilla", 1000)

    def test_two_character_name_is_enough(self):
        validate_create(" AB ", "Vanilla", 1000)

    @pytest.mark.parametrize("name", ["é", "日", "🧁", " ß "])
    def test_single_multibyte_character_is_long_enough(self, name):
        """The minimum counts UTF-8 bytes, not characters."""
        validate_create(name, "Vanilla", 1000)

    def test_name_at_column_width_passes(self):
        validate_create("n" * 100, "Vanilla", 1000)

    def test_name_over_column_width_is_too_long(self):
        with pytest.raises(FieldTooLongError, match="name must have at most 100 characters"):
            validate_create("n" * 101, "Vanilla", 1000)

    def test_width_counts_characters_after_trimming(self):
        validate_create("  " + "é" * 100 + "  ", "Vanilla", 1000)

    def test_flavor_over_column_width_is_too_long(self):
        with pytest.raises(FieldTooLongError) as exc_info:
            validate_create("Vanilla Dream", "f" * 101, 1000)
        assert exc_info.value.field == "flavor"
        assert exc_info.value.message == "flavor must have at most 100 characters"

    def test_blank_flavor_is_required(self):
        with pytest.raises(FlavorRequiredError, match="flavor is required"):
            validate_create("Vanilla Dream", "   ", 1000)

    @pytest.mark.parametrize("price", [0, -1, -1500])
    def test_non_positive_price_is_invalid(self, price):
        with pytest.raises(InvalidPriceError, match="price must be greater than zero"):
            validate_create("Vanilla Dream", "Vanilla", price)

    def test_errors_are_validation_errors_with_field(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_create("Vanilla Dream", "Vanilla", 0)
        assert exc_info.value.field == "price_cents"


class TestBuildCupcake:
    """Entity construction from a create request."""

    def test_trims_and_defaults_available(self):
        cupcake = build_cupcake(
            CupcakeCreate(name="  Red Velvet ", flavor=" Cream Cheese  ", price_cents=1200)
        )
        assert cupcake.name == "Red Velvet"
        assert cupcake.flavor == "Cream Cheese"
        assert cupcake.price_cents == 1200
        assert cupcake.is_available is True
        assert cupcake.id is None

    def test_invalid_request_builds_nothing(self):
        with pytest.raises(NameRequiredError):
            build_cupcake(CupcakeCreate(flavor="Vanilla", price_cents=100))


class TestApplyUpdate:
    """Partial updates merged onto an existing entity."""

    def test_only_name_present_keeps_other_fields(self, make_cupcake):
        cupcake = make_cupcake()
        apply_update(cupcake, CupcakeUpdate(name="Updated Name Only"))

        assert cupcake.name == "Updated Name Only"
        assert cupcake.flavor == "Original Flavor"
        assert cupcake.price_cents == 1000
        assert cupcake.is_available is True

    def test_all_fields_present(self, make_cupcake):
        cupcake = make_cupcake()
        apply_update(
            cupcake,
            CupcakeUpdate(name=" New ", flavor=" Lemon ", price_cents=250, is_available=False),
        )
        assert (cupcake.name, cupcake.flavor, cupcake.price_cents, cupcake.is_available) == (
            "New",
            "Lemon",
            250,
            False,
        )

    def test_empty_request_changes_nothing(self, make_cupcake):
        cupcake = make_cupcake()
        assert validate_update(CupcakeUpdate()) == {}
        apply_update(cupcake, CupcakeUpdate())
        assert cupcake.name == "Original Name"

    @pytest.mark.parametrize("name", ["", "  ", "X", " Y "])
    def test_short_or_empty_name_is_too_short(self, make_cupcake, name):
        """On update an empty name is 'too short', never 'required'."""
        cupcake = make_cupcake()
        with pytest.raises(NameTooShortError):
            apply_update(cupcake, CupcakeUpdate(name=name))
        assert cupcake.name == "Original Name"

    def test_multibyte_single_character_name_accepted(self, make_cupcake):
        cupcake = make_cupcake()
        apply_update(cupcake, CupcakeUpdate(name=" é "))
        assert cupcake.name == "é"

    def test_too_long_flavor_leaves_entity_untouched(self, make_cupcake):
        cupcake = make_cupcake()
        with pytest.raises(FieldTooLongError):
            apply_update(cupcake, CupcakeUpdate(name="Renamed", flavor="f" * 101))
        assert cupcake.name == "Original Name"
        assert cupcake.flavor == "Original Flavor"

    def test_whitespace_flavor_becomes_empty(self, make_cupcake):
        cupcake = make_cupcake()
        apply_update(cupcake, CupcakeUpdate(flavor="   "))
        assert cupcake.flavor == ""

    @pytest.mark.parametrize("price", [0, -5])
    def test_non_positive_price_rejected(self, make_cupcake, price):
        cupcake = make_cupcake()
        with pytest.raises(InvalidPriceError):
            apply_update(cupcake, CupcakeUpdate(price_cents=price))
        assert cupcake.price_cents == 1000

    def test_failed_update_leaves_earlier_fields_untouched(self, make_cupcake):
        """A valid name followed by an invalid price must not apply the name."""
        cupcake = make_cupcake()
        with pytest.raises(InvalidPriceError):
            apply_update(
                cupcake,
                CupcakeUpdate(name="Brand New", flavor="Mint", price_cents=0, is_available=False),
            )
        assert cupcake.name == "Original Name"
        assert cupcake.flavor == "Original Flavor"
        assert cupcake.is_available is True

    def test_name_checked_before_price(self, make_cupcake):
        with pytest.raises(NameTooShortError):
            apply_update(make_cupcake(), CupcakeUpdate(name="A", price_cents=-1))

    def test_availability_can_be_switched_off_and_on(self, make_cupcake):
        cupcake = make_cupcake()
        apply_update(cupcake, CupcakeUpdate(is_available=False))
        assert cupcake.is_available is False
        apply_update(cupcake, CupcakeUpdate(is_available=True))
        assert cupcake.is_available is True
