"""
Unit tests for the in-memory BOM session store.
"""

from datetime import datetime, timedelta, timezone

from services import bom_session_service
from models.bom import BOMSource, CreateRow


def _rows():
    return [CreateRow(name="Blue Jeans", quantity=2)]


class TestSessionStore:
    """Tests for create/retrieve/delete."""

    def test_create_and_retrieve(self):
        session = bom_session_service.create_session("bom.csv", BOMSource.SPREADSHEET, _rows())

        found = bom_session_service.retrieve_session(session.id)

        assert found is session
        assert found.filename == "bom.csv"
        assert found.rows[0].name == "Blue Jeans"

    def test_unknown_session_is_none(self):
        assert bom_session_service.retrieve_session("missing") is None

    def test_delete(self):
        session = bom_session_service.create_session("bom.csv", BOMSource.SPREADSHEET, _rows())

        bom_session_service.delete_session(session.id)

        assert bom_session_service.retrieve_session(session.id) is None

    def test_delete_unknown_is_noop(self):
        bom_session_service.delete_session("missing")

    def test_expired_session_is_dropped(self):
        session = bom_session_service.create_session("bom.csv", BOMSource.OCR, _rows())
        # Push expiry into the past
        _, stored = bom_session_service._sessions[session.id]
        bom_session_service._sessions[session.id] = (
            datetime.now(timezone.utc) - timedelta(seconds=1),
            stored,
        )

        assert bom_session_service.retrieve_session(session.id) is None
        assert session.id not in bom_session_service._sessions

    def test_expired_entries_pruned_on_create(self):
        old = bom_session_service.create_session("a.csv", BOMSource.SPREADSHEET, _rows(), ttl_minutes=-1)

        bom_session_service.create_session("b.csv", BOMSource.SPREADSHEET, _rows())

        assert old.id not in bom_session_service._sessions
