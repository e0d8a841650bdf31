"""
Registration Email Templates

Plain-text subject/body pairs for each point in a registration's lifecycle.

Every function here is pure: it reads the registration, never modifies it,
and takes anything time-dependent (the submission date) as an argument.
Every body carries the registration id, which applicants quote as their
reference number. Optional fields that are empty drop their whole line.
"""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import NamedTuple, Protocol
from zoneinfo import ZoneInfo

from regdesk.core.config import Settings
from regdesk.modules.registrations.models import RegistrationStatus

RULE = "-" * 60


class EmailContent(NamedTuple):
    subject: str
    body: str


class RegistrationSnapshot(Protocol):
    """Fields the templates read; satisfied by the Registration model."""

    id: str
    status: RegistrationStatus
    title: str
    first_name: str
    last_name: str
    company: str
    po_box: str
    city: str
    telephone: str
    email: str
    practice_track: str
    payment_method: str
    society_member: str
    membership_interest: str


@dataclass(frozen=True)
class EventDetails:
    """Event text shared by all templates."""

    name: str
    programme: str
    dates: str
    venue: str
    location: str
    contact_email: str
    organiser: str
    committee: str
    timezone: str = "UTC"

    @classmethod
    def from_settings(cls, settings: Settings) -> "EventDetails":
        return cls(
            name=settings.event_name,
            programme=settings.event_programme,
            dates=settings.event_dates,
            venue=settings.event_venue,
            location=settings.event_location,
            contact_email=settings.event_contact_email,
            organiser=settings.event_organiser,
            committee=settings.event_committee,
            timezone=settings.event_timezone,
        )

    @property
    def full_title(self) -> str:
        return f"{self.name} - {self.programme}"

    def local_date(self, moment: datetime) -> date:
        """Calendar date of a moment in the event's timezone; naive values are UTC."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        return moment.astimezone(ZoneInfo(self.timezone)).date()


def _join(*lines: str | None) -> str:
    """Join lines with newlines, dropping the ones that are None."""
    return "\n".join(line for line in lines if line is not None)


def _optional(label: str, value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return f"{label}{value}"


def _section(heading: str) -> str:
    return f"{heading}\n{RULE}\n"


def _salutation(registration: RegistrationSnapshot) -> str:
    return f"Dear {registration.title} {registration.last_name},"


def _full_name(registration: RegistrationSnapshot) -> str:
    return f"{registration.title} {registration.first_name} {registration.last_name}"


def _signature(event: EventDetails) -> str:
    return _join(
        "Best regards,",
        "",
        event.organiser,
        event.committee,
        event.name,
    )


def _event_block(event: EventDetails) -> str:
    return _join(
        f"Event: {event.name}",
        f"Date: {event.dates}",
        f"Venue: {event.venue}",
        f"Location: {event.location}",
    )


def _note_block(heading: str, note: str | None) -> str | None:
    if note is None or not note.strip():
        return None
    return _join("", _section(heading), note)


def format_submission_date(submitted_on: date) -> str:
    """E.g. 'Monday, 19 January 2026'."""
    return f"{submitted_on:%A}, {submitted_on.day} {submitted_on:%B %Y}"


def registration_received(
    registration: RegistrationSnapshot,
    event: EventDetails,
    submitted_on: date,
) -> EmailContent:
    """Confirmation sent to the applicant right after intake."""
    body = _join(
        _salutation(registration),
        "",
        f"Thank you for registering for {event.full_title}.",
        "",
        "We have successfully received your registration and payment proof. "
        "Your submission is currently under review by our administrative team.",
        "",
        _section("REGISTRATION CONFIRMATION"),
        f"Registration ID: {registration.id}",
        f"Registration Date: {format_submission_date(submitted_on)}",
        f"Name: {_full_name(registration)}",
        f"Practice Track: {registration.practice_track}",
        f"Payment Method: {registration.payment_method}",
        _optional("Firm/Company: ", registration.company),
        "",
        _section("EVENT DETAILS"),
        _event_block(event),
        "",
        _section("NEXT STEPS"),
        "1. Payment Verification: Our team will review your payment proof "
        "within 2-3 business days.",
        "2. Confirmation Email: Once your payment is verified, you will receive "
        "a confirmation email with further instructions.",
        "3. Programme Materials: Additional programme details and materials will "
        "be sent closer to the event date.",
        "",
        f"Please retain this email and your Registration ID ({registration.id}) "
        "for your records.",
        "",
        "If you have any questions or need to update your registration, please "
        f"contact us at {event.contact_email}.",
        "",
        _signature(event),
        "",
        RULE,
        "This is an automated confirmation email. Please do not reply directly "
        "to this message.",
        f"For enquiries, contact: {event.contact_email}",
    )
    return EmailContent(f"Registration Received - {event.name}", body)


def new_registration_alert(
    registration: RegistrationSnapshot,
    event: EventDetails,
    admin_url: str | None = None,
) -> EmailContent:
    """Notice sent to the organisers when a registration arrives."""
    body = _join(
        "New Registration Received",
        "",
        f"A new registration has been submitted for {event.name}.",
        "",
        "Registration Details:",
        f"- Registration ID: {registration.id}",
        f"- Name: {_full_name(registration)}",
        f"- Email: {registration.email}",
        f"- Telephone: {registration.telephone}",
        f"- Practice Track: {registration.practice_track}",
        f"- Payment Method: {registration.payment_method}",
        f"- Society Member: {registration.society_member}",
        f"- Membership Interest: {registration.membership_interest}",
        _optional("- Company: ", registration.company),
        _optional("- P.O. Box: ", registration.po_box),
        _optional("- City: ", registration.city),
        "",
        f"Status: {registration.status.value}",
        "",
        "Please review this registration in the admin panel.",
        _optional("Admin Panel: ", admin_url),
    )
    subject = (
        f"New Registration: {registration.first_name} {registration.last_name} - {event.name}"
    )
    return EmailContent(subject, body)


def payment_verified(
    registration: RegistrationSnapshot,
    event: EventDetails,
    note: str | None = None,
) -> EmailContent:
    """Sent when the payment proof has been accepted."""
    body = _join(
        _salutation(registration),
        "",
        f"We are pleased to confirm that your registration for {event.full_title} "
        "has been successfully verified.",
        "",
        _section("REGISTRATION CONFIRMED"),
        f"Registration ID: {registration.id}",
        f"Name: {_full_name(registration)}",
        f"Practice Track: {registration.practice_track}",
        _note_block("NOTE FROM THE ORGANISERS", note),
        "",
        _section("EVENT INFORMATION"),
        _event_block(event),
        "",
        _section("WHAT'S NEXT"),
        "Your place has been secured. You will receive additional programme "
        "materials, detailed schedules, and venue information closer to the event date.",
        "",
        "Please ensure you have made arrangements for travel and accommodation. "
        "If you require assistance with accommodation recommendations, please do "
        "not hesitate to contact us.",
        "",
        f"We look forward to welcoming you to {event.name}.",
        "",
        _signature(event),
        "",
        RULE,
        f"For enquiries, contact: {event.contact_email}",
    )
    return EmailContent(f"Registration Confirmed - {event.name}", body)


def payment_rejected(
    registration: RegistrationSnapshot,
    event: EventDetails,
    note: str | None = None,
) -> EmailContent:
    """Sent when the payment proof could not be verified."""
    body = _join(
        _salutation(registration),
        "",
        f"Thank you for your interest in {event.full_title}.",
        "",
        _section("ACTION REQUIRED: PAYMENT VERIFICATION"),
        "We were unable to verify the payment proof document submitted with your "
        "registration. This may be due to:",
        "",
        "- The document being unclear or incomplete",
        "- Missing payment details or reference numbers",
        "- The document format not being readable",
        "- Payment details not matching our records",
        _note_block("REVIEWER NOTE", note),
        "",
        _section("REGISTRATION DETAILS"),
        f"Registration ID: {registration.id}",
        f"Name: {_full_name(registration)}",
        f"Practice Track: {registration.practice_track}",
        f"Payment Method: {registration.payment_method}",
        "",
        _section("WHAT TO DO NEXT"),
        f"Please contact us at {event.contact_email} with the following information:",
        "",
        f"1. Your Registration ID: {registration.id}",
        "2. A clear copy of your payment proof (bank transfer receipt or cheque copy)",
        "3. Any additional payment details or reference numbers",
        "",
        "Our team will review your payment proof and update your registration "
        "status accordingly.",
        "",
        _signature(event),
        "",
        RULE,
        f"For immediate assistance, contact: {event.contact_email}",
    )
    return EmailContent("Action Required - Registration Payment Verification", body)


def resubmission_required(
    registration: RegistrationSnapshot,
    event: EventDetails,
    note: str | None = None,
) -> EmailContent:
    """Sent when the applicant has to provide a new payment proof."""
    body = _join(
        _salutation(registration),
        "",
        f"Thank you for registering for {event.full_title}.",
        "",
        _section("RESUBMISSION REQUIRED"),
        "Our team has reviewed your registration and needs you to resubmit your "
        "payment proof before we can complete verification.",
        _note_block("WHAT WE NEED FROM YOU", note),
        "",
        _section("REGISTRATION DETAILS"),
        f"Registration ID: {registration.id}",
        f"Name: {_full_name(registration)}",
        f"Payment Method: {registration.payment_method}",
        "",
        f"Please reply to {event.contact_email} quoting your Registration ID "
        f"({registration.id}) and attach a clear copy of your payment proof. "
        "For bank transfers, include the transaction reference number. For "
        "cheques, provide a clear copy showing the cheque details.",
        "",
        "We appreciate your patience and look forward to resolving this promptly.",
        "",
        _signature(event),
        "",
        RULE,
        f"For immediate assistance, contact: {event.contact_email}",
    )
    return EmailContent(f"Resubmission Required - {event.name}", body)


def status_changed(
    registration: RegistrationSnapshot,
    event: EventDetails,
    previous_status: RegistrationStatus,
    note: str | None = None,
) -> EmailContent:
    """Generic notice for statuses without a dedicated template."""
    body = _join(
        _salutation(registration),
        "",
        f"The status of your registration for {event.full_title} has been updated.",
        "",
        _section("STATUS UPDATE"),
        f"Registration ID: {registration.id}",
        f"Name: {_full_name(registration)}",
        f"Previous Status: {previous_status.value}",
        f"New Status: {registration.status.value}",
        _note_block("NOTE FROM THE ORGANISERS", note),
        "",
        "If you have any questions about this change, please contact us at "
        f"{event.contact_email} quoting your Registration ID.",
        "",
        _signature(event),
    )
    return EmailContent(
        f"Registration Status Updated: {registration.status.value} - {event.name}", body
    )


def template_for_status(
    registration: RegistrationSnapshot,
    event: EventDetails,
    previous_status: RegistrationStatus,
    note: str | None = None,
) -> EmailContent:
    """
    Pick the template for the registration's current (new) status.

    Payment Verified, Payment Rejected and Awaiting Resubmission have their
    own templates; every other status gets the generic status-change notice.
    """
    if registration.status == RegistrationStatus.PAYMENT_VERIFIED:
        return payment_verified(registration, event, note)
    if registration.status == RegistrationStatus.PAYMENT_REJECTED:
        return payment_rejected(registration, event, note)
    if registration.status == RegistrationStatus.AWAITING_RESUBMISSION:
        return resubmission_required(registration, event, note)
    return status_changed(registration, event, previous_status, note)
