"""Resolution policy - which field list and position apply to a calendar"""

import logging
from typing import List

from booking_fields.models.field_descriptor import FieldDescriptor
from booking_fields.models.field_type import FieldsMode, FieldsPosition
from booking_fields.services.field_settings_service import (
    FieldSettingsService,
    coerce_position,
)

logger = logging.getLogger(__name__)


class FieldResolver:
    """Resolves the effective field list and render position per calendar"""

    def __init__(self, settings_service: FieldSettingsService):
        self.settings_service = settings_service

    def resolve_for_calendar(self, calendar_id: int) -> List[FieldDescriptor]:
        """
        Return the fields a calendar's booking form should show.

        - no override record, or mode ``global``: the global list
        - mode ``none``: no fields
        - mode ``custom``: the calendar's own list (malformed -> empty)
        """
        settings = self.settings_service.get_calendar_settings(calendar_id)
        if settings is None or settings.mode == FieldsMode.GLOBAL:
            return self.settings_service.get_global_fields()
        if settings.mode == FieldsMode.NONE:
            return []
        return self.settings_service.load_field_list(settings.custom_fields)

    def position_for_calendar(self, calendar_id: int) -> FieldsPosition:
        settings = self.settings_service.get_calendar_settings(calendar_id)
        if settings is None:
            return FieldsPosition.BEFORE
        return coerce_position(settings.position)

    def should_render_at(self, calendar_id: int, slot) -> bool:
        """
        True when ``slot`` ("before"/"after") is the calendar's position.

        Exactly one of the two slots answers True for a given calendar.
        """
        try:
            slot = FieldsPosition(slot)
        except ValueError:
            logger.warning(f"Unknown render slot {slot!r} for calendar {calendar_id}")
            return False
        return self.position_for_calendar(calendar_id) == slot
