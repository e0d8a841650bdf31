"""
Registration Models

Database model for event registrations and the verification status set.
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from regdesk.core.database import Base


class RegistrationStatus(str, enum.Enum):
    """Verification status of a registration, stored by its display value."""

    PENDING_VERIFICATION = "Pending Verification"
    PAYMENT_VERIFIED = "Payment Verified"
    PAYMENT_REJECTED = "Payment Rejected"
    AWAITING_RESUBMISSION = "Awaiting Resubmission"
    CANCELLED = "Cancelled"
    WAITLISTED = "Waitlisted"
    CONFIRMED = "Confirmed"


# Any status may move to any other; membership in this set is the only guard.
ALLOWED_STATUSES: frozenset[str] = frozenset(s.value for s in RegistrationStatus)


def parse_status(value: str | None) -> RegistrationStatus | None:
    """Return the status with this exact display value, or None."""
    if value is None or value not in ALLOWED_STATUSES:
        return None
    return RegistrationStatus(value)


class Registration(Base):
    """
    One applicant's submission.

    Only status and admin_notes change after creation.
    """

    __tablename__ = "registrations"

    # Primary key: UUID4 text, generated before the payment proof is stored
    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    status: Mapped[RegistrationStatus] = mapped_column(
        Enum(
            RegistrationStatus,
            name="registration_status",
            native_enum=False,
            length=50,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=RegistrationStatus.PENDING_VERIFICATION,
    )

    # Membership
    society_member: Mapped[str] = mapped_column(String(50), nullable=False)
    membership_interest: Mapped[str] = mapped_column(String(50), nullable=False)

    # Applicant
    title: Mapped[str] = mapped_column(String(50), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    company: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    po_box: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    telephone: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    # Programme
    practice_track: Mapped[str] = mapped_column(String(100), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(100), nullable=False)

    # Payment proof
    payment_file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    payment_file_path: Mapped[str] = mapped_column(String(500), nullable=False)

    # Admin-only
    admin_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        Index("ix_registrations_created_at", "created_at"),
        Index("ix_registrations_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Registration id={self.id} status={self.status.value if self.status else None}>"
