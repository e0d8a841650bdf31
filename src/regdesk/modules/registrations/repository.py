"""
Registrations Repository

Database operations for registration records. Only data access lives here;
validation, file handling and notifications belong to the service layer.

- All queries are parameterized
- Status and admin notes are the only columns ever updated
- Nothing is deleted
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Registration, RegistrationStatus


async def create(db: AsyncSession, registration: Registration) -> Registration:
    """
    Insert a new registration.

    Raises:
        sqlalchemy.exc.IntegrityError: If the id already exists
    """
    db.add(registration)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(registration)

    return registration


async def get_by_id(db: AsyncSession, id: str) -> Registration | None:
    """Get registration by ID."""
    return await db.get(Registration, id)


async def list_by_status(
    db: AsyncSession,
    status: RegistrationStatus | None = None,
) -> list[Registration]:
    """
    List registrations, newest first.

    Args:
        db: Database session
        status: Only return registrations in this status (optional)

    Returns:
        Registrations ordered by created_at descending
    """
    query = select(Registration)

    if status is not None:
        query = query.where(Registration.status == status)

    query = query.order_by(Registration.created_at.desc(), Registration.id.desc())

    result = await db.execute(query)
    return list(result.scalars().all())


async def update_status_and_notes(
    db: AsyncSession,
    id: str,
    status: RegistrationStatus,
    notes: str,
) -> bool:
    """
    Set status and admin notes in a single UPDATE statement.

    Returns:
        True if a registration with this id was updated
    """
    try:
        result = await db.execute(
            update(Registration)
            .where(Registration.id == id)
            .values(status=status, admin_notes=notes)
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    return result.rowcount > 0
