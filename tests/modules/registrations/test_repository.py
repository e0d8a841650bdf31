"""
Tests for the registrations repository against an in-memory SQLite database.
"""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import async_sessionmaker

from regdesk.modules.registrations import repository
from regdesk.modules.registrations.models import Registration, RegistrationStatus


def _registration(id: str, created_at: datetime, **overrides) -> Registration:
    values = {
        "id": id,
        "created_at": created_at,
        "status": RegistrationStatus.PENDING_VERIFICATION,
        "society_member": "Yes",
        "membership_interest": "No",
        "title": "Ms.",
        "first_name": "Ruth",
        "last_name": "Bain",
        "telephone": "555-0199",
        "email": "ruth@example.com",
        "practice_track": "Criminal",
        "payment_method": "Cheque",
        "payment_file_name": "cheque.png",
        "payment_file_path": f"/srv/uploads/{id}.png",
    }
    values.update(overrides)
    return Registration(**values)


BASE_TIME = datetime(2026, 1, 5, 12, 0, tzinfo=UTC)


class TestCreate:
    """Tests for repository.create."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, db_session):
        await repository.create(db_session, _registration("reg-1", BASE_TIME))

        stored = await repository.get_by_id(db_session, "reg-1")

        assert stored is not None
        assert stored.status == RegistrationStatus.PENDING_VERIFICATION
        assert stored.company == ""
        assert stored.po_box == ""
        assert stored.city == ""
        assert stored.admin_notes == ""
        assert stored.payment_file_name == "cheque.png"

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, db_engine):
        session_maker = async_sessionmaker(db_engine, expire_on_commit=False)

        async with session_maker() as session:
            await repository.create(session, _registration("dup", BASE_TIME))

        async with session_maker() as session:
            with pytest.raises(IntegrityError):
                await repository.create(session, _registration("dup", BASE_TIME))

    @pytest.mark.asyncio
    async def test_get_unknown_returns_none(self, db_session):
        assert await repository.get_by_id(db_session, "nope") is None


class TestListByStatus:
    """Tests for repository.list_by_status."""

    @pytest.mark.asyncio
    async def test_newest_first(self, db_session):
        await repository.create(db_session, _registration("old", BASE_TIME))
        await repository.create(db_session, _registration("new", BASE_TIME + timedelta(hours=2)))
        await repository.create(db_session, _registration("mid", BASE_TIME + timedelta(hours=1)))

        result = await repository.list_by_status(db_session)

        assert [r.id for r in result] == ["new", "mid", "old"]

    @pytest.mark.asyncio
    async def test_filter_by_status(self, db_session):
        await repository.create(db_session, _registration("a", BASE_TIME))
        await repository.create(
            db_session,
            _registration(
                "b",
                BASE_TIME + timedelta(minutes=5),
                status=RegistrationStatus.PAYMENT_VERIFIED,
            ),
        )

        verified = await repository.list_by_status(db_session, RegistrationStatus.PAYMENT_VERIFIED)
        pending = await repository.list_by_status(
            db_session, RegistrationStatus.PENDING_VERIFICATION
        )

        assert [r.id for r in verified] == ["b"]
        assert [r.id for r in pending] == ["a"]

    @pytest.mark.asyncio
    async def test_no_matches_is_empty_list(self, db_session):
        await repository.create(db_session, _registration("a", BASE_TIME))

        result = await repository.list_by_status(db_session, RegistrationStatus.PAYMENT_VERIFIED)

        assert result == []


class TestUpdateStatusAndNotes:
    """Tests for repository.update_status_and_notes."""

    @pytest.mark.asyncio
    async def test_updates_both_columns(self, db_session):
        await repository.create(db_session, _registration("reg-1", BASE_TIME))

        updated = await repository.update_status_and_notes(
            db_session, "reg-1", RegistrationStatus.PAYMENT_REJECTED, "Blurry scan"
        )
        stored = await repository.get_by_id(db_session, "reg-1")

        assert updated is True
        assert stored.status == RegistrationStatus.PAYMENT_REJECTED
        assert stored.admin_notes == "Blurry scan"

    @pytest.mark.asyncio
    async def test_other_columns_untouched(self, db_session):
        await repository.create(db_session, _registration("reg-1", BASE_TIME))

        await repository.update_status_and_notes(
            db_session, "reg-1", RegistrationStatus.CONFIRMED, ""
        )
        stored = await repository.get_by_id(db_session, "reg-1")

        assert stored.first_name == "Ruth"
        assert stored.payment_file_path == "/srv/uploads/reg-1.png"

    @pytest.mark.asyncio
    async def test_unknown_id_returns_false(self, db_session):
        updated = await repository.update_status_and_notes(
            db_session, "nope", RegistrationStatus.CONFIRMED, ""
        )
        assert updated is False

    @pytest.mark.asyncio
    async def test_failed_commit_rolls_back(self, mock_db):
        mock_db.commit.side_effect = OperationalError("UPDATE", {}, Exception("database is locked"))

        with pytest.raises(OperationalError):
            await repository.update_status_and_notes(
                mock_db, "reg-1", RegistrationStatus.CONFIRMED, ""
            )

        mock_db.rollback.assert_awaited_once()
