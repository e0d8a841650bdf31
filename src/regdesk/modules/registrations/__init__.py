"""
Registrations Module

Handles the event registration workflow:
1. Intake of the registration form with a payment-proof upload
2. Admin review: listing, detail view and payment-proof download
3. Manual status transitions with applicant emails on each change

API Endpoints:
- POST /registrations - Submit a registration
- GET /admin/registrations - List registrations
- GET /admin/registrations/{id} - Registration details
- POST /admin/registrations/{id}/status - Change status and notes
- GET /admin/registrations/{id}/payment-proof - Download the payment proof

Statuses:
- Pending Verification (initial), Payment Verified, Payment Rejected,
  Awaiting Resubmission, Cancelled, Waitlisted, Confirmed
- Any status may move to any other; the applicant is emailed on a change
"""

from .admin_router import router as admin_router
from .router import router

__all__ = ["router", "admin_router"]
