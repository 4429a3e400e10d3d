"""Database models for Booking User Fields"""

from booking_fields.models.booking_field_data import BookingFieldData
from booking_fields.models.calendar_field_settings import CalendarFieldSettings
from booking_fields.models.option import Option

__all__ = [
    "Option",
    "CalendarFieldSettings",
    "BookingFieldData",
]
