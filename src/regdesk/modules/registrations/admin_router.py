"""
Registrations Admin Router

API endpoints for the organisers reviewing registrations.
All endpoints require HTTP Basic admin credentials.

Endpoints:
- GET /admin/registrations - List registrations, optionally by status
- GET /admin/registrations/{id} - Get registration details
- POST /admin/registrations/{id}/status - Change status and notes
- GET /admin/registrations/{id}/payment-proof - Download the payment proof

Security:
- Missing or wrong credentials get 401 with a Basic challenge
- Status values are checked against the closed status set
- Admin actions are logged with the admin's username
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from regdesk.core.auth import AdminUser, require_admin
from regdesk.core.database import get_db
from regdesk.modules.registrations.errors import (
    PaymentProofMissingError,
    RegistrationNotFoundError,
    RegistrationServiceError,
)
from regdesk.modules.registrations.router import get_registration_service, handle_service_error
from regdesk.modules.registrations.schemas import (
    RegistrationDetailResponse,
    RegistrationListItem,
    RegistrationListResponse,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from regdesk.modules.registrations.service import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter()


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )


_NOT_FOUND_EXAMPLE = {
    "description": "Registration not found",
    "content": {
        "application/json": {
            "example": {"detail": {"error": "NOT_FOUND", "message": "Not found"}}
        }
    },
}


# ============================================
# List Registrations
# ============================================


@router.get(
    "",
    response_model=RegistrationListResponse,
    summary="List Registrations",
    description="""
List registrations for the admin dashboard, newest first.

**Filter:** `status` takes a status display value such as
"Pending Verification". A value that is not a known status returns an empty
list rather than an error.

List items leave out the stored file location and the admin notes; use the
detail endpoint for those.
""",
    responses={
        200: {"description": "Registrations", "model": RegistrationListResponse},
        401: {"description": "Admin credentials missing or wrong"},
    },
)
async def list_registrations(
    status_filter: str | None = Query(
        None,
        alias="status",
        description="Only registrations in this status",
    ),
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(require_admin),
    registration_service: RegistrationService = Depends(get_registration_service),
) -> RegistrationListResponse:
    """List registrations, newest first."""
    try:
        registrations = await registration_service.list_registrations(db, status_filter)

        logger.info(
            f"Admin {admin.username} listed registrations: "
            f"status={status_filter!r}, returned={len(registrations)}"
        )

        return RegistrationListResponse(
            registrations=[RegistrationListItem.model_validate(r) for r in registrations],
            total=len(registrations),
        )

    except RegistrationServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error listing registrations: {e}")
        raise _internal_error() from e


# ============================================
# Registration Detail
# ============================================


@router.get(
    "/{registration_id}",
    response_model=RegistrationDetailResponse,
    summary="Get Registration Details",
    description="Get the complete registration record, including admin notes.",
    responses={
        200: {"description": "Complete registration", "model": RegistrationDetailResponse},
        401: {"description": "Admin credentials missing or wrong"},
        404: _NOT_FOUND_EXAMPLE,
    },
)
async def get_registration_detail(
    registration_id: str,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(require_admin),
    registration_service: RegistrationService = Depends(get_registration_service),
) -> RegistrationDetailResponse:
    """Get complete details of a registration."""
    try:
        registration = await registration_service.get_registration(db, registration_id)

        logger.info(f"Admin {admin.username} viewed registration {registration_id}")

        return RegistrationDetailResponse.model_validate(registration)

    except RegistrationNotFoundError as e:
        logger.warning(f"Registration not found: {registration_id}")
        handle_service_error(e)
    except RegistrationServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error getting registration detail: {e}")
        raise _internal_error() from e


# ============================================
# Status Update
# ============================================


@router.post(
    "/{registration_id}/status",
    response_model=StatusUpdateResponse,
    summary="Update Registration Status",
    description="""
Move a registration to a new status and record admin notes.

**Allowed statuses:** Pending Verification, Payment Verified, Payment
Rejected, Awaiting Resubmission, Cancelled, Waitlisted, Confirmed. Any status
may follow any other.

**Notes:** `admin_notes` replaces the stored notes. Leaving it out clears
them.

**Emails:** the applicant is emailed only when the status changes.
Payment Verified, Payment Rejected and Awaiting Resubmission have dedicated
messages; other statuses get a generic status-change notice that includes
the notes.
""",
    responses={
        200: {"description": "Status updated", "model": StatusUpdateResponse},
        400: {
            "description": "Unknown status value",
            "content": {
                "application/json": {
                    "example": {"detail": {"error": "INVALID_STATUS", "message": "Invalid status"}}
                }
            },
        },
        401: {"description": "Admin credentials missing or wrong"},
        404: _NOT_FOUND_EXAMPLE,
    },
)
async def update_registration_status(
    registration_id: str,
    request: StatusUpdateRequest,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(require_admin),
    registration_service: RegistrationService = Depends(get_registration_service),
) -> StatusUpdateResponse:
    """Change a registration's status."""
    try:
        result = await registration_service.update_status(
            db,
            registration_id,
            request.status,
            request.admin_notes,
        )

        logger.info(
            f"Admin {admin.username} set registration {registration_id} "
            f"to {result.status.value} (notified={result.notification_sent})"
        )

        return result

    except RegistrationServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error updating registration status: {e}")
        raise _internal_error() from e


# ============================================
# Payment Proof Download
# ============================================


@router.get(
    "/{registration_id}/payment-proof",
    response_class=FileResponse,
    summary="Download Payment Proof",
    description="Download the payment proof under the applicant's original filename.",
    responses={
        200: {"description": "The stored file"},
        401: {"description": "Admin credentials missing or wrong"},
        404: {
            "description": "Registration or stored file not found",
            "content": {
                "application/json": {
                    "example": {"detail": {"error": "FILE_MISSING", "message": "File missing"}}
                }
            },
        },
    },
)
async def download_payment_proof(
    registration_id: str,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(require_admin),
    registration_service: RegistrationService = Depends(get_registration_service),
) -> FileResponse:
    """Download a registration's payment proof."""
    try:
        path, filename = await registration_service.get_payment_proof(db, registration_id)

        logger.info(f"Admin {admin.username} downloaded payment proof for {registration_id}")

        return FileResponse(path, filename=filename)

    except PaymentProofMissingError as e:
        logger.error(f"Payment proof file missing for registration {registration_id}")
        handle_service_error(e)
    except RegistrationServiceError as e:
        handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error downloading payment proof: {e}")
        raise _internal_error() from e
