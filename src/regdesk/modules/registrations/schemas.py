"""
Registration Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from regdesk.modules.registrations.models import RegistrationStatus


class RegistrationCreate(BaseModel):
    """Applicant fields of an accepted submission, trimmed.

    Built by the workflow after validation; the consent flag is checked but
    not stored.
    """

    society_member: str
    membership_interest: str
    title: str
    first_name: str
    last_name: str
    company: str = ""
    po_box: str = ""
    city: str = ""
    telephone: str
    email: str
    practice_track: str
    payment_method: str


class RegistrationSubmitResponse(BaseModel):
    """Response after a successful submission."""

    registration_id: str = Field(..., description="Reference number for the applicant")
    status: RegistrationStatus = Field(..., description="Always 'Pending Verification'")
    message: str = "Registration received. A confirmation email is on its way."


# ============================================
# Admin Schemas
# ============================================


class RegistrationListItem(BaseModel):
    """Registration summary for the admin list view.

    Omits the file location and admin notes.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Registration id")
    created_at: datetime = Field(..., description="When the registration was submitted")
    status: RegistrationStatus = Field(..., description="Current verification status")
    first_name: str
    last_name: str
    email: str
    telephone: str
    practice_track: str
    payment_method: str


class RegistrationListResponse(BaseModel):
    """Registrations ordered newest first."""

    registrations: list[RegistrationListItem] = Field(
        ..., description="Registration summaries, newest first"
    )
    total: int = Field(..., ge=0, description="Number of registrations returned")


class RegistrationDetailResponse(BaseModel):
    """Complete registration record for admin review."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Registration id")
    created_at: datetime = Field(..., description="When the registration was submitted")
    status: RegistrationStatus = Field(..., description="Current verification status")

    # Membership
    society_member: str
    membership_interest: str

    # Applicant
    title: str
    first_name: str
    last_name: str
    company: str
    po_box: str
    city: str
    telephone: str
    email: str

    # Programme
    practice_track: str
    payment_method: str

    # Payment proof
    payment_file_name: str = Field(..., description="Original uploaded filename")
    payment_file_path: str = Field(..., description="Location of the stored file")

    admin_notes: str = Field("", description="Notes recorded with the last status change")


class StatusUpdateRequest(BaseModel):
    """Request body for changing a registration's status.

    `status` is a plain optional string so that unknown or missing values
    reach the workflow and get the "Invalid status" answer instead of a
    schema error.
    """

    status: str | None = Field(
        None,
        description="Target status",
        json_schema_extra={"example": RegistrationStatus.PAYMENT_VERIFIED.value},
    )
    admin_notes: str | None = Field(
        None,
        description="Note for the applicant; replaces the stored notes",
        json_schema_extra={"example": "Bank transfer reference confirmed."},
    )


class StatusUpdateResponse(BaseModel):
    """Response after a status change."""

    id: str = Field(..., description="Registration id")
    status: RegistrationStatus = Field(..., description="Status after the update")
    previous_status: RegistrationStatus = Field(..., description="Status before the update")
    notification_sent: bool = Field(
        ..., description="Whether an email was dispatched to the applicant"
    )
    message: str = "Status updated"
