"""Tests for editor sessions stored in Redis"""

from booking_fields.services.editor_state_manager import (
    GLOBAL_SCOPE,
    calendar_scope,
    scope_calendar_id,
)
from booking_fields.services.field_list_editor import FieldListEditor


def test_scope_helpers():
    """Calendar scopes carry their calendar id"""
    assert calendar_scope(12) == "calendar:12"
    assert scope_calendar_id("calendar:12") == 12
    assert scope_calendar_id(GLOBAL_SCOPE) is None


def test_create_and_get_session(editor_state_manager):
    """A created session can be loaded back with its scope and items"""
    editor = FieldListEditor()
    editor.add()
    editor.edit_label(0, "Phone")

    session_id = editor_state_manager.create_session(GLOBAL_SCOPE, editor)
    state = editor_state_manager.get_session(session_id)

    assert state["scope"] == GLOBAL_SCOPE
    assert state["items"][0]["name"] == "phone"


def test_session_ttl(editor_state_manager, redis_client):
    """Sessions expire after the configured TTL"""
    session_id = editor_state_manager.create_session(GLOBAL_SCOPE, FieldListEditor())

    ttl = redis_client.ttl(f"field_editor:{session_id}")
    assert 0 < ttl <= 1800


def test_unknown_session(editor_state_manager):
    """Unknown sessions load as None"""
    assert editor_state_manager.get_session("missing") is None


def test_corrupted_session(editor_state_manager, redis_client):
    """Corrupted session data is discarded"""
    redis_client.setex("field_editor:bad", 60, "{not json")
    assert editor_state_manager.get_session("bad") is None


def test_clear_session(editor_state_manager):
    """Cleared sessions are gone"""
    session_id = editor_state_manager.create_session(
        calendar_scope(3), FieldListEditor()
    )
    editor_state_manager.clear_session(session_id)

    assert editor_state_manager.get_session(session_id) is None
