"""
Validation utilities for the property entry wizard and developer records.
Wizard checks return step-numbered errors instead of raising, so the UI can list them all at once.
"""

from collections import defaultdict
from typing import Any, Dict, List, Optional
from email_validator import validate_email, EmailNotValidError
import logging

from propzing.schemas.wizard import WizardFormData, WizardValidationError

logger = logging.getLogger(__name__)


def is_blank(value: Any) -> bool:
    """True for None, non-strings that are falsy, and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return not value


def _error(field: str, message: str, step: int) -> WizardValidationError:
    return WizardValidationError(field=field, message=message, step=step)


def validate_form_data(form: WizardFormData) -> List[WizardValidationError]:
    """
    Check the mandatory wizard fields and every repeatable row.

    Args:
        form: Wizard state

    Returns:
        Errors in step order; empty when the form can be submitted
    """
    errors: List[WizardValidationError] = []

    # Step 1: project identity
    if is_blank(form.external_id):
        errors.append(_error("external_id", "External ID is required", 1))
    if is_blank(form.name):
        errors.append(_error("name", "Property Name is required", 1))
    if is_blank(form.developer) and not form.developer_id:
        errors.append(_error("developer", "Developer is required", 1))

    # Step 2: location
    if is_blank(form.area):
        errors.append(_error("area", "Area is required", 2))

    # Step 3: status
    if is_blank(form.status):
        errors.append(_error("status", "Status is required", 3))
    if is_blank(form.permit_id):
        errors.append(_error("permit_id", "RERA Number / Permit ID is required", 3))

    # Step 4: pricing
    if is_blank(form.price_currency):
        errors.append(_error("price_currency", "Price Currency is required", 4))
    if is_blank(form.area_unit):
        errors.append(_error("area_unit", "Area Unit is required", 4))

    # Step 5: unit types
    for index, unit in enumerate(form.unit_types):
        number = index + 1
        if is_blank(unit.unit_type):
            errors.append(_error(f"unitTypes[{index}].unit_type", f"Unit Type is required for unit {number}", 5))
        if is_blank(unit.unit_bedrooms):
            errors.append(_error(f"unitTypes[{index}].unit_bedrooms", f"Bedrooms is required for unit {number}", 5))
        if is_blank(unit.id):
            errors.append(_error(f"unitTypes[{index}].id", f"ID is required for unit {number}", 5))

    # Step 6: buildings, facilities, map points
    for index, building in enumerate(form.buildings):
        number = index + 1
        if is_blank(building.id):
            errors.append(_error(f"buildings[{index}].id", f"ID is required for building {number}", 6))
        if is_blank(building.building_name):
            errors.append(
                _error(f"buildings[{index}].building_name", f"Name is required for building {number}", 6)
            )

    for index, facility in enumerate(form.facilities):
        if is_blank(facility.facility_name):
            errors.append(
                _error(f"facilities[{index}].facility_name", f"Name is required for facility {index + 1}", 6)
            )

    for index, point in enumerate(form.map_points):
        if is_blank(point.poi_name):
            errors.append(_error(f"mapPoints[{index}].poi_name", f"Name is required for map point {index + 1}", 6))

    # Step 8: payment plans
    for index, plan in enumerate(form.payment_plans):
        if is_blank(plan.payment_plan_name):
            errors.append(
                _error(
                    f"paymentPlans[{index}].payment_plan_name",
                    f"Name is required for payment plan {index + 1}",
                    8,
                )
            )

    return errors


def format_validation_errors(errors: List[WizardValidationError]) -> str:
    """
    Render errors grouped by step for display.

    Errors without a step are listed first and without a header.
    """
    if not errors:
        return ""

    grouped: Dict[int, List[str]] = defaultdict(list)
    for error in errors:
        grouped[error.step or 0].append(error.message)

    message = "Please fix the following errors:\n\n"
    for step in sorted(grouped):
        if step != 0:
            message += f"Step {step}:\n"
        for text in grouped[step]:
            message += f"  • {text}\n"
        message += "\n"

    return message


def is_valid_email(email: Optional[str]) -> bool:
    """
    Check an email address without rewriting it.

    Blank input counts as valid since the field is optional.
    """
    if is_blank(email):
        return True
    try:
        validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        logger.debug(f"Email {email!r} is not well formed: {e}")
        return False
    return True
