"""
Tests for wizard validation and developer email checks.
"""

import pytest

from propzing.schemas.wizard import WizardValidationError
from propzing.utils.validators import (
    is_blank,
    validate_form_data,
    format_validation_errors,
    is_valid_email,
)
from tests.conftest import WizardFactory


class TestValidateFormData:
    """Step-numbered wizard checks."""

    def test_valid_wizard_has_no_errors(self):
        assert validate_form_data(WizardFactory.create_wizard_form()) == []

    def test_missing_mandatory_fields(self):
        form = WizardFactory.create_wizard_form(
            external_id="",
            name=" ",
            developer="",
            area="",
            status="",
            permit_id="",
            price_currency="",
            area_unit="",
        )
        errors = validate_form_data(form)

        assert [(error.field, error.step) for error in errors] == [
            ("external_id", 1),
            ("name", 1),
            ("developer", 1),
            ("area", 2),
            ("status", 3),
            ("permit_id", 3),
            ("price_currency", 4),
            ("area_unit", 4),
        ]
        assert errors[1].message == "Property Name is required"
        assert errors[5].message == "RERA Number / Permit ID is required"

    def test_developer_id_satisfies_developer(self):
        form = WizardFactory.create_wizard_form(developer="", developer_id=7)
        assert validate_form_data(form) == []

    def test_unit_type_rows(self):
        form = WizardFactory.create_wizard_form(
            unitTypes=[
                {"id": "u-1", "unit_type": "Apartment", "unit_bedrooms": "2"},
                {"id": "", "unit_type": "", "unit_bedrooms": ""},
            ]
        )
        errors = validate_form_data(form)
        messages = [error.message for error in errors]

        assert messages == [
            "Unit Type is required for unit 2",
            "Bedrooms is required for unit 2",
            "ID is required for unit 2",
        ]
        assert all(error.step == 5 for error in errors)
        assert errors[0].field == "unitTypes[1].unit_type"

    def test_numeric_row_ids_are_accepted(self):
        form = WizardFactory.create_wizard_form(
            buildings=[{"id": 1717171717171, "building_name": "Tower B"}]
        )
        assert form.buildings[0].id == "1717171717171"
        assert validate_form_data(form) == []

    def test_step_six_rows(self):
        form = WizardFactory.create_wizard_form(
            buildings=[{"id": "", "building_name": ""}],
            facilities=[{"id": "f-1", "facility_name": ""}],
            mapPoints=[{"id": "m-1", "poi_name": "  "}],
        )
        errors = validate_form_data(form)

        assert [error.message for error in errors] == [
            "ID is required for building 1",
            "Name is required for building 1",
            "Name is required for facility 1",
            "Name is required for map point 1",
        ]
        assert {error.step for error in errors} == {6}

    def test_payment_plan_name_required(self):
        form = WizardFactory.create_wizard_form(paymentPlans=[{"id": "p-1", "payment_plan_name": ""}])
        errors = validate_form_data(form)

        assert len(errors) == 1
        assert errors[0].field == "paymentPlans[0].payment_plan_name"
        assert errors[0].step == 8

    def test_null_lists_are_empty(self):
        form = WizardFactory.create_wizard_form(unitTypes=None, buildings=None)
        assert form.unit_types == []
        assert validate_form_data(form) == []


class TestFormatValidationErrors:

    def test_empty_list(self):
        assert format_validation_errors([]) == ""

    def test_grouped_by_step(self):
        errors = [
            WizardValidationError(field="area", message="Area is required", step=2),
            WizardValidationError(field="name", message="Property Name is required", step=1),
            WizardValidationError(field="external_id", message="External ID is required", step=1),
        ]

        assert format_validation_errors(errors) == (
            "Please fix the following errors:\n\n"
            "Step 1:\n"
            "  • Property Name is required\n"
            "  • External ID is required\n"
            "\n"
            "Step 2:\n"
            "  • Area is required\n"
            "\n"
        )

    def test_errors_without_step_come_first_without_header(self):
        errors = [
            WizardValidationError(field="status", message="Status is required", step=3),
            WizardValidationError(field="form", message="Something is off"),
        ]
        message = format_validation_errors(errors)

        assert message.startswith("Please fix the following errors:\n\n  • Something is off\n\nStep 3:\n")


class TestHelpers:

    @pytest.mark.parametrize("value,expected", [
        (None, True),
        ("", True),
        ("   ", True),
        (0, True),
        ("x", False),
        (3, False),
    ])
    def test_is_blank(self, value, expected):
        assert is_blank(value) is expected

    @pytest.mark.parametrize("email", ["sales@emaar.ae", "  Sales@Emaar.AE ", None, "  "])
    def test_valid_email(self, email):
        assert is_valid_email(email) is True

    @pytest.mark.parametrize("email", ["not-an-email", "info@emaar", "a@@b.com"])
    def test_malformed_email(self, email):
        assert is_valid_email(email) is False
