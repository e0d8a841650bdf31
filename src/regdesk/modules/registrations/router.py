"""
Registrations Router

Public endpoint for the registration form. No authentication: applicants
submit before any account exists.

Endpoints:
- POST /registrations - Submit a registration with its payment proof

Input:
- multipart/form-data with the applicant fields and a `payment_proof` file
- All checks run in the service layer so that every failure carries the
  same error body, whatever field or file caused it
"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from regdesk.core.database import get_db
from regdesk.modules.registrations.errors import RegistrationServiceError
from regdesk.modules.registrations.schemas import RegistrationSubmitResponse
from regdesk.modules.registrations.service import RegistrationService
from regdesk.modules.registrations.uploads import PaymentProofUpload
from regdesk.modules.registrations.validation import MAX_PAYMENT_PROOF_BYTES

logger = logging.getLogger(__name__)

router = APIRouter()


def get_registration_service(request: Request) -> RegistrationService:
    """FastAPI dependency returning the workflow built by the app factory."""
    return request.app.state.registration_service


def handle_service_error(e: RegistrationServiceError) -> None:
    """Convert a service error to an HTTPException."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    )


async def _read_upload(upload: UploadFile | None) -> PaymentProofUpload | None:
    """
    Read the uploaded file into memory.

    Reads at most one byte past the limit, which is enough for the size check
    to reject the file without buffering all of it.
    """
    if upload is None or not upload.filename:
        return None

    content = await upload.read(MAX_PAYMENT_PROOF_BYTES + 1)
    return PaymentProofUpload(
        filename=upload.filename,
        content_type=upload.content_type or "",
        content=content,
    )


@router.post(
    "",
    response_model=RegistrationSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Registration",
    description="""
Submit an event registration together with a payment proof.

**Form fields (required):** society_member, membership_interest, title,
first_name, last_name, telephone, email, practice_track, payment_method,
consent.

**Form fields (optional):** company, po_box, city.

**File:** `payment_proof`, a PDF, JPG, JPEG or PNG of at most 10 MB.

After submission:
1. A confirmation email with the registration id is sent to the applicant
2. The organisers are alerted
3. The registration waits in status "Pending Verification" for review
""",
    responses={
        201: {
            "description": "Registration received",
            "model": RegistrationSubmitResponse,
        },
        400: {
            "description": "Missing fields or unacceptable payment proof",
            "content": {
                "application/json": {
                    "example": {
                        "detail": {
                            "error": "VALIDATION_ERROR",
                            "message": "Please complete all required fields.",
                        }
                    }
                }
            },
        },
        500: {
            "description": "The registration could not be stored",
            "content": {
                "application/json": {
                    "example": {
                        "detail": {
                            "error": "SUBMISSION_FAILED",
                            "message": "Submission failed. Please try again.",
                        }
                    }
                }
            },
        },
    },
)
async def submit_registration(
    request: Request,
    society_member: str | None = Form(None),
    membership_interest: str | None = Form(None),
    title: str | None = Form(None),
    first_name: str | None = Form(None),
    last_name: str | None = Form(None),
    company: str | None = Form(None),
    po_box: str | None = Form(None),
    city: str | None = Form(None),
    telephone: str | None = Form(None),
    email: str | None = Form(None),
    practice_track: str | None = Form(None),
    payment_method: str | None = Form(None),
    consent: str | None = Form(None),
    payment_proof: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    registration_service: RegistrationService = Depends(get_registration_service),
) -> RegistrationSubmitResponse:
    """
    Submit a new registration.

    Returns the registration id the applicant quotes in later enquiries.
    """
    fields = {
        "society_member": society_member,
        "membership_interest": membership_interest,
        "title": title,
        "first_name": first_name,
        "last_name": last_name,
        "company": company,
        "po_box": po_box,
        "city": city,
        "telephone": telephone,
        "email": email,
        "practice_track": practice_track,
        "payment_method": payment_method,
        "consent": consent,
    }

    try:
        upload = await _read_upload(payment_proof)
        admin_url = f"{request.base_url}admin/"
        return await registration_service.submit_registration(db, fields, upload, admin_url)
    except RegistrationServiceError as e:
        logger.warning(f"Registration rejected: {e.error_code} - {e.message}")
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error submitting registration: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred. Please try again later.",
            },
        ) from e
