"""BookingField service - captures and stores user field values for bookings"""

import json
import logging
from typing import Any, Dict, Mapping, MutableMapping, Optional

from sqlmodel import Session

from booking_fields.models.booking_field_data import BookingFieldData
from booking_fields.services.field_resolver import FieldResolver
from booking_fields.services.submission_parser import SubmissionParser

logger = logging.getLogger(__name__)

USER_FIELDS_DATA_KEY = "user_fields_data"


def coerce_calendar_id(value: Any) -> int:
    """Absolute integer id; anything unparseable becomes 0"""
    if isinstance(value, bool):
        return 0
    try:
        return abs(int(value))
    except (TypeError, ValueError):
        return 0


class BookingFieldService:
    """Hooks run by the host around booking creation"""

    def __init__(
        self,
        db_session: Session,
        resolver: FieldResolver,
        parser: Optional[SubmissionParser] = None,
    ):
        self.db = db_session
        self.resolver = resolver
        self.parser = parser or SubmissionParser()

    def capture_user_fields(
        self,
        booking_data: MutableMapping[str, Any],
        form_data: Optional[Mapping] = None,
        query_params: Optional[Mapping] = None,
    ) -> MutableMapping[str, Any]:
        """
        Pre-insert hook: validate and attach submitted user field values.

        Values are looked up in ``booking_data`` first, then the request
        form, then the query string.

        Args:
            booking_data: Mutable booking payload; must carry ``calendar_id``
            form_data: Primary request field map
            query_params: Secondary fallback map

        Returns:
            The same booking_data with ``user_fields_data`` set

        Raises:
            RequiredFieldError: If a required field is unmet
        """
        calendar_id = coerce_calendar_id(booking_data.get("calendar_id"))
        if not calendar_id:
            return booking_data

        fields = self.resolver.resolve_for_calendar(calendar_id)
        if not fields:
            return booking_data

        sources = (booking_data, form_data, query_params)
        self.parser.validate_required(fields, *sources)

        booking_data[USER_FIELDS_DATA_KEY] = self.parser.parse_submission(
            fields, *sources
        )
        logger.info(
            f"Captured {len(booking_data[USER_FIELDS_DATA_KEY])} user field values "
            f"for calendar {calendar_id}"
        )
        return booking_data

    def store_user_fields(
        self, booking_id: int, booking_data: Mapping[str, Any]
    ) -> Optional[BookingFieldData]:
        """
        Post-creation hook: persist the captured record for a booking.

        Nothing is written when the record is empty, and an existing record
        for the booking is never replaced.
        """
        saved = booking_data.get(USER_FIELDS_DATA_KEY) or {}
        if not saved:
            return None

        existing = self.db.get(BookingFieldData, booking_id)
        if existing is not None:
            # Submission records are written once per booking
            logger.warning(f"User fields already stored for booking {booking_id}")
            return existing

        record = BookingFieldData(booking_id=booking_id, data=json.dumps(saved))
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error storing user fields for booking {booking_id}: {e}")
            raise

        logger.info(f"Stored user fields for booking {booking_id}")
        return record

    def get_user_fields(self, booking_id: int) -> Dict[str, Any]:
        """Stored record for a booking; {} when none or unreadable"""
        record = self.db.get(BookingFieldData, booking_id)
        if record is None:
            return {}
        try:
            data = json.loads(record.data)
        except json.JSONDecodeError:
            logger.warning(f"Unreadable user field data for booking {booking_id}")
            return {}
        return data if isinstance(data, dict) else {}
