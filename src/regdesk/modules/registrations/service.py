"""
Registrations Service Layer

Business logic for event registrations. Orchestrates validation, payment
proof storage, repository operations and email notifications.

This module implements:
1. Intake:
   - Validate the submission (payment proof first, then required fields)
   - Generate the registration id and store the payment proof under it
   - Create the registration with status Pending Verification
   - Send the applicant confirmation and the organiser alert

2. Review:
   - List registrations, optionally filtered by status
   - Fetch one registration and its payment proof

3. Status transitions:
   - Any status may move to any other status in the closed set
   - Status and admin notes are written in a single UPDATE
   - The applicant is emailed only when the status actually changes

Email failures are logged and never undo a registration or a transition.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from pathlib import Path
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from regdesk.core.email import Notifier
from regdesk.modules.registrations import repository, templates
from regdesk.modules.registrations.errors import (
    InvalidStatusError,
    PaymentProofMissingError,
    RegistrationNotFoundError,
    RegistrationSubmissionError,
)
from regdesk.modules.registrations.models import (
    Registration,
    RegistrationStatus,
    parse_status,
)
from regdesk.modules.registrations.schemas import (
    RegistrationCreate,
    RegistrationSubmitResponse,
    StatusUpdateResponse,
)
from regdesk.modules.registrations.templates import EmailContent, EventDetails
from regdesk.modules.registrations.uploads import PaymentProofStore, PaymentProofUpload
from regdesk.modules.registrations.validation import (
    OPTIONAL_FIELDS,
    REQUIRED_FIELDS,
    storage_filename,
    validate_submission,
)

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(UTC)


def _clean_fields(fields: Mapping[str, object]) -> RegistrationCreate:
    """Trim the submitted values; optional fields that were left out become ""."""
    values = {}
    for name in (*REQUIRED_FIELDS, *OPTIONAL_FIELDS):
        if name == "consent":
            continue
        raw = fields.get(name)
        values[name] = "" if raw is None else str(raw).strip()
    return RegistrationCreate(**values)


class RegistrationService:
    """
    The registration workflow.

    Built once in the app factory with the configured notifier, payment
    proof store and event details; every method takes the request's
    database session.
    """

    def __init__(
        self,
        notifier: Notifier,
        file_store: PaymentProofStore,
        event: EventDetails,
        owner_email: str,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.notifier = notifier
        self.file_store = file_store
        self.event = event
        self.owner_email = owner_email
        self.clock = clock

    async def _notify(self, to_email: str, content: EmailContent, context: str) -> bool:
        """Send one email. Failures are logged and reported as False."""
        try:
            sent = await self.notifier.send(to_email, content.subject, content.body)
        except Exception as e:
            logger.error(f"Exception sending {context} email to {to_email}: {e}")
            return False

        if not sent:
            logger.error(f"Failed to send {context} email to {to_email}")
        return sent

    # ============================================
    # Intake
    # ============================================

    async def submit_registration(
        self,
        db: AsyncSession,
        fields: Mapping[str, object],
        upload: PaymentProofUpload | None,
        admin_url: str | None = None,
    ) -> RegistrationSubmitResponse:
        """
        Accept a registration and its payment proof.

        Nothing is written unless every check passes. The payment proof is
        stored before the row; if the row cannot be inserted the file is
        removed again.

        Args:
            db: Database session
            fields: Submitted form fields, keyed by field name
            upload: The payment proof, or None if no file was sent
            admin_url: Link to the admin panel for the organiser alert

        Returns:
            RegistrationSubmitResponse with the new registration id

        Raises:
            RegistrationValidationError: If the submission fails a check
            RegistrationSubmissionError: If the file or the row cannot be stored
        """
        validate_submission(fields, upload)
        data = _clean_fields(fields)

        registration_id = str(uuid4())
        filename = storage_filename(registration_id, upload.filename)

        try:
            stored_path = await self.file_store.save(filename, upload.content)
        except OSError as e:
            logger.error(f"Could not store payment proof for {registration_id}: {e}")
            raise RegistrationSubmissionError() from e

        registration = Registration(
            id=registration_id,
            created_at=self.clock(),
            status=RegistrationStatus.PENDING_VERIFICATION,
            payment_file_name=upload.filename,
            payment_file_path=str(stored_path),
            admin_notes="",
            **data.model_dump(),
        )

        try:
            registration = await repository.create(db, registration)
        except SQLAlchemyError as e:
            logger.error(f"Could not save registration {registration_id}: {e}", exc_info=True)
            await self.file_store.discard(stored_path)
            raise RegistrationSubmissionError() from e

        logger.info(f"Created registration {registration.id} for {registration.email}")

        await self._notify(
            registration.email,
            templates.registration_received(
                registration, self.event, self.event.local_date(registration.created_at)
            ),
            "registration received",
        )
        await self._notify(
            self.owner_email,
            templates.new_registration_alert(registration, self.event, admin_url),
            "new registration alert",
        )

        return RegistrationSubmitResponse(
            registration_id=registration.id,
            status=registration.status,
        )

    # ============================================
    # Review
    # ============================================

    async def list_registrations(
        self,
        db: AsyncSession,
        status: str | None = None,
    ) -> list[Registration]:
        """
        List registrations newest first.

        An empty filter lists everything. A filter that is not a known
        status matches nothing.
        """
        if status is None or status == "":
            return await repository.list_by_status(db)

        parsed = parse_status(status)
        if parsed is None:
            logger.info(f"Listing with unknown status filter '{status}'")
            return []

        return await repository.list_by_status(db, parsed)

    async def get_registration(self, db: AsyncSession, registration_id: str) -> Registration:
        """
        Raises:
            RegistrationNotFoundError: If no registration has this id
        """
        registration = await repository.get_by_id(db, registration_id)
        if registration is None:
            raise RegistrationNotFoundError(registration_id)
        return registration

    async def get_payment_proof(
        self,
        db: AsyncSession,
        registration_id: str,
    ) -> tuple[Path, str]:
        """
        Locate a registration's payment proof.

        Returns:
            The stored file path and the applicant's original filename

        Raises:
            RegistrationNotFoundError: If no registration has this id
            PaymentProofMissingError: If the stored file no longer exists
        """
        registration = await self.get_registration(db, registration_id)

        path = Path(registration.payment_file_path)
        if not self.file_store.exists(path):
            logger.warning(f"Payment proof for {registration_id} is missing at {path}")
            raise PaymentProofMissingError(registration_id)

        return path, registration.payment_file_name

    # ============================================
    # Status transitions
    # ============================================

    async def update_status(
        self,
        db: AsyncSession,
        registration_id: str,
        target_status: str | None,
        admin_notes: str | None = None,
    ) -> StatusUpdateResponse:
        """
        Move a registration to a new status and record the admin notes.

        The target is checked before the registration is looked up, so an
        invalid status is reported even for an unknown id. The notes always
        replace the stored notes; missing notes are stored as "".

        Raises:
            InvalidStatusError: If the target is not a known status
            RegistrationNotFoundError: If no registration has this id
        """
        new_status = parse_status(target_status)
        if new_status is None:
            logger.warning(f"Rejected invalid status '{target_status}' for {registration_id}")
            raise InvalidStatusError(target_status)

        registration = await repository.get_by_id(db, registration_id)
        if registration is None:
            raise RegistrationNotFoundError(registration_id)

        previous_status = registration.status
        notes = admin_notes or ""

        updated = await repository.update_status_and_notes(db, registration_id, new_status, notes)
        if not updated:
            raise RegistrationNotFoundError(registration_id)

        registration.status = new_status
        registration.admin_notes = notes

        logger.info(
            f"Registration {registration_id} moved from {previous_status.value} "
            f"to {new_status.value}"
        )

        notification_sent = False
        if new_status != previous_status:
            content = templates.template_for_status(
                registration, self.event, previous_status, notes
            )
            notification_sent = await self._notify(
                registration.email, content, f"status '{new_status.value}'"
            )

        return StatusUpdateResponse(
            id=registration_id,
            status=new_status,
            previous_status=previous_status,
            notification_sent=notification_sent,
        )
