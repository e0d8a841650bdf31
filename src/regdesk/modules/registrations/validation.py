"""
Registration Validation

Pure checks applied to a submission before anything is stored, plus the
derivation of the storage filename for an accepted payment proof.

Check order matches the intake form handling: the payment proof is checked
first (presence, type, size), then the required text fields.
"""

import os
from collections.abc import Mapping

import pathvalidate

from regdesk.modules.registrations.errors import RegistrationValidationError
from regdesk.modules.registrations.uploads import PaymentProofUpload

# Checked in this order; the first failure wins
REQUIRED_FIELDS: tuple[str, ...] = (
    "society_member",
    "membership_interest",
    "title",
    "first_name",
    "last_name",
    "telephone",
    "email",
    "practice_track",
    "payment_method",
    "consent",
)

OPTIONAL_FIELDS: tuple[str, ...] = ("company", "po_box", "city")

ALLOWED_CONTENT_TYPES = frozenset({"application/pdf", "image/jpeg", "image/png"})
ALLOWED_EXTENSIONS = (".pdf", ".jpg", ".jpeg", ".png")

MAX_PAYMENT_PROOF_BYTES = 10 * 1024 * 1024  # 10 MiB

MISSING_FIELDS_MESSAGE = "Please complete all required fields."
MISSING_FILE_MESSAGE = "Payment proof is required."
INVALID_FILE_TYPE_MESSAGE = "Invalid file type. Please upload PDF, JPG, JPEG, or PNG."
FILE_TOO_LARGE_MESSAGE = "File is too large. Maximum size is 10 MB."

DEFAULT_UPLOAD_NAME = "payment-proof"
DEFAULT_EXTENSION = ".bin"
MAX_FILENAME_BYTES = 255

def is_blank(value: object) -> bool:
    """True for None and for strings that are empty after trimming."""
    return value is None or str(value).strip() == ""


def validate_required_fields(fields: Mapping[str, object]) -> None:
    """
    Ensure every required field is present and non-blank.

    The failing field is not named in the message.

    Raises:
        RegistrationValidationError: If any required field is missing or blank
    """
    for name in REQUIRED_FIELDS:
        if is_blank(fields.get(name)):
            raise RegistrationValidationError(MISSING_FIELDS_MESSAGE)


def is_allowed_file(content_type: str | None, filename: str | None) -> bool:
    """Both the declared content type and the filename extension must be accepted."""
    if content_type not in ALLOWED_CONTENT_TYPES:
        return False
    return (filename or "").lower().endswith(ALLOWED_EXTENSIONS)


def validate_payment_proof(upload: PaymentProofUpload | None) -> None:
    """
    Check presence, type and size of the payment proof.

    Raises:
        RegistrationValidationError: With the message for the first failed check
    """
    if upload is None or not upload.filename:
        raise RegistrationValidationError(MISSING_FILE_MESSAGE)

    if not is_allowed_file(upload.content_type, upload.filename):
        raise RegistrationValidationError(INVALID_FILE_TYPE_MESSAGE)

    if upload.size > MAX_PAYMENT_PROOF_BYTES:
        raise RegistrationValidationError(FILE_TOO_LARGE_MESSAGE)


def validate_submission(
    fields: Mapping[str, object],
    upload: PaymentProofUpload | None,
) -> None:
    """Run every intake check; raises on the first failure."""
    validate_payment_proof(upload)
    validate_required_fields(fields)


def sanitize_filename(filename: str | None) -> str:
    """
    Make a client-supplied filename safe to use on disk.

    Path separators, reserved and control characters are removed and
    device names such as CON are made harmless, for every platform at once.
    Falls back to a fixed name when nothing usable remains.
    """
    name = pathvalidate.sanitize_filename(filename or "", max_len=MAX_FILENAME_BYTES)
    return name or DEFAULT_UPLOAD_NAME


def storage_filename(registration_id: str, original_filename: str | None) -> str:
    """
    Derive the on-disk name of a payment proof: <id><lowercased extension>.

    Uses the extension of the sanitized original name, or ".bin" if it has none.
    """
    _, extension = os.path.splitext(sanitize_filename(original_filename))
    return f"{registration_id}{(extension or DEFAULT_EXTENSION).lower()}"
