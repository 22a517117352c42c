"""
Schemas describing the outcome of a wizard submission.
"""

from pydantic import BaseModel, Field
from typing import List, Optional

from propzing.schemas.wizard import WizardValidationError


class SectionReport(BaseModel):
    """Insert outcome for one kind of related row."""

    section: str = Field(..., examples=["facilities"])
    inserted: int = 0
    failed: int = 0
    errors: List[str] = Field(default_factory=list)

    def record_failure(self, message: str, count: int = 1) -> None:
        self.failed += count
        self.errors.append(message)


class SubmissionDetails(BaseModel):
    message: str = ""
    sections: List[SectionReport] = Field(default_factory=list)
    validation_errors: List[WizardValidationError] = Field(default_factory=list)

    @property
    def has_partial_failures(self) -> bool:
        return any(section.failed for section in self.sections)


class SubmissionResult(BaseModel):
    """
    Result of submit_property.

    success is False for validation problems and for fatal insert failures;
    non-fatal section failures keep success True and show up in details.sections.
    """

    success: bool
    property_id: Optional[int] = None
    error: Optional[str] = None
    details: Optional[SubmissionDetails] = None
