"""Tests for capturing and storing booking user field values"""

import pytest

from booking_fields.models.booking_field_data import BookingFieldData
from booking_fields.services.booking_field_service import (
    USER_FIELDS_DATA_KEY,
    coerce_calendar_id,
)
from booking_fields.services.submission_parser import RequiredFieldError

FIELDS = [
    {"label": "Phone", "required": True},
    {"label": "Newsletter", "type": "checkbox"},
]


@pytest.fixture
def global_fields(settings_service):
    return settings_service.save_global_fields(FIELDS)


class TestCaptureUserFields:
    """Pre-insert capture"""

    @pytest.mark.parametrize("calendar_id", [None, 0, "abc", True])
    def test_without_calendar_unchanged(
        self, booking_field_service, global_fields, calendar_id
    ):
        booking_data = {"calendar_id": calendar_id}
        result = booking_field_service.capture_user_fields(booking_data, {})

        assert USER_FIELDS_DATA_KEY not in result

    def test_calendar_without_fields_unchanged(
        self, booking_field_service, settings_service, global_fields
    ):
        settings_service.save_calendar_settings(4, mode="none")

        result = booking_field_service.capture_user_fields({"calendar_id": 4}, {})

        assert USER_FIELDS_DATA_KEY not in result

    def test_required_field_blocks_booking(self, booking_field_service, global_fields):
        with pytest.raises(RequiredFieldError) as exc_info:
            booking_field_service.capture_user_fields(
                {"calendar_id": 4}, {"codobuf_phone": ""}
            )
        assert exc_info.value.message == "Phone is required."

    def test_captures_record(self, booking_field_service, global_fields):
        booking_data = {"calendar_id": "4"}
        result = booking_field_service.capture_user_fields(
            booking_data, {"codobuf_phone": "555-1234"}
        )

        assert result is booking_data
        assert result[USER_FIELDS_DATA_KEY] == {"phone": "555-1234", "newsletter": 0}

    def test_query_string_fallback(self, booking_field_service, global_fields):
        result = booking_field_service.capture_user_fields(
            {"calendar_id": 4},
            form_data={"codobuf_newsletter": "on"},
            query_params={"codobuf_phone": "555-9999", "codobuf_newsletter": "0"},
        )
        assert result[USER_FIELDS_DATA_KEY] == {"phone": "555-9999", "newsletter": 1}

    def test_negative_calendar_id_uses_absolute_value(self):
        assert coerce_calendar_id("-3") == 3
        assert coerce_calendar_id(None) == 0


class TestStoreUserFields:
    """Post-creation storage"""

    def test_empty_record_not_stored(self, booking_field_service, _db_session):
        assert booking_field_service.store_user_fields(10, {}) is None
        assert booking_field_service.store_user_fields(10, {USER_FIELDS_DATA_KEY: {}}) is None
        assert _db_session.get(BookingFieldData, 10) is None

    def test_store_and_read_back(self, booking_field_service):
        record = booking_field_service.store_user_fields(
            10, {USER_FIELDS_DATA_KEY: {"phone": "555-1234", "newsletter": 1}}
        )

        assert record is not None
        assert booking_field_service.get_user_fields(10) == {
            "phone": "555-1234",
            "newsletter": 1,
        }

    def test_existing_record_never_replaced(self, booking_field_service):
        booking_field_service.store_user_fields(10, {USER_FIELDS_DATA_KEY: {"phone": "1"}})
        booking_field_service.store_user_fields(10, {USER_FIELDS_DATA_KEY: {"phone": "2"}})

        assert booking_field_service.get_user_fields(10) == {"phone": "1"}

    def test_unknown_booking(self, booking_field_service):
        assert booking_field_service.get_user_fields(999) == {}

    def test_unreadable_record(self, booking_field_service, _db_session):
        _db_session.add(BookingFieldData(booking_id=11, data="{not json"))
        _db_session.commit()

        assert booking_field_service.get_user_fields(11) == {}
