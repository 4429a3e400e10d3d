"""Renders a calendar's user fields at the host's injection points"""

import logging
from typing import Any, Mapping, Optional

from booking_fields.models.field_type import FieldsPosition
from booking_fields.services.field_renderer import FieldRenderer
from booking_fields.services.field_resolver import FieldResolver

logger = logging.getLogger(__name__)


class FieldInjectionService:
    """Subscribes field rendering to the "render-before"/"render-after" slots"""

    def __init__(self, resolver: FieldResolver, renderer: FieldRenderer):
        self.resolver = resolver
        self.renderer = renderer

    def render_for_calendar(
        self, calendar_id: int, values: Optional[Mapping[str, Any]] = None
    ) -> str:
        fields = self.resolver.resolve_for_calendar(calendar_id)
        return self.renderer.render_field_list(fields, values)

    def render_at(self, calendar_id: int, slot) -> str:
        """Markup for one slot; empty unless it is the calendar's position"""
        if not self.resolver.should_render_at(calendar_id, slot):
            return ""
        return self.render_for_calendar(calendar_id)

    def render_before(self, calendar_id: int) -> str:
        return self.render_at(calendar_id, FieldsPosition.BEFORE)

    def render_after(self, calendar_id: int) -> str:
        return self.render_at(calendar_id, FieldsPosition.AFTER)
