"""FieldSettings service - global field list and per-calendar overrides"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlmodel import Session

from booking_fields.hooks import FieldHooks
from booking_fields.models.calendar_field_settings import CalendarFieldSettings
from booking_fields.models.field_descriptor import FieldDescriptor
from booking_fields.models.field_type import FieldsMode, FieldsPosition
from booking_fields.services.field_sanitizer import FieldSanitizer, fields_to_json
from booking_fields.services.option_service import OptionService

logger = logging.getLogger(__name__)

DEFAULT_OPTION_NAME = "codobookings_user_fields"


def coerce_mode(value: Any) -> FieldsMode:
    try:
        return FieldsMode(value)
    except ValueError:
        return FieldsMode.GLOBAL


def coerce_position(value: Any) -> FieldsPosition:
    try:
        return FieldsPosition(value)
    except ValueError:
        return FieldsPosition.BEFORE


class FieldSettingsService:
    """Loads and saves field lists; every write goes through the sanitizer"""

    def __init__(
        self,
        db_session: Session,
        app_config: dict,
        hooks: Optional[FieldHooks] = None,
    ):
        self.db = db_session
        self.config = app_config
        self.sanitizer = FieldSanitizer(hooks)
        self.options = OptionService(db_session)

    @property
    def option_name(self) -> str:
        return self.config.get("user_fields_option_name") or DEFAULT_OPTION_NAME

    def load_field_list(self, blob: Optional[str]) -> List[FieldDescriptor]:
        """Parse a stored JSON blob; malformed or missing data yields []"""
        if not blob:
            return []
        try:
            data = json.loads(blob)
        except (json.JSONDecodeError, TypeError, RecursionError):
            logger.warning("Stored field list is not valid JSON, treating as empty")
            return []
        if not isinstance(data, list):
            return []
        return self.sanitizer.clean_list(data)

    def get_global_fields(self) -> List[FieldDescriptor]:
        stored = self.options.get_option(self.option_name)
        if stored is None:
            return self.sanitizer.default_fields()
        return self.load_field_list(stored)

    def save_global_fields(self, raw: Any) -> List[FieldDescriptor]:
        """
        Sanitize and persist the global field list.

        Args:
            raw: List of records or JSON text from the editor transport value

        Returns:
            The list now stored (the previous list if ``raw`` was malformed)
        """
        previous = self.get_global_fields()
        clean = self.sanitizer.normalize(raw, previous=previous)
        self.options.update_option(self.option_name, fields_to_json(clean))
        logger.info(f"Saved {len(clean)} global user fields")
        return clean

    def get_calendar_settings(self, calendar_id: int) -> Optional[CalendarFieldSettings]:
        return self.db.get(CalendarFieldSettings, calendar_id)

    def get_custom_fields(self, calendar_id: int) -> List[FieldDescriptor]:
        settings = self.get_calendar_settings(calendar_id)
        if settings is None:
            return []
        return self.load_field_list(settings.custom_fields)

    def save_calendar_settings(
        self,
        calendar_id: int,
        mode: Any = None,
        position: Any = None,
        custom_fields: Any = None,
    ) -> CalendarFieldSettings:
        """
        Persist a calendar's override record.

        A None argument keeps the stored value (defaults for a new record).
        Invalid modes fall back to ``global`` and invalid positions to
        ``before``. ``custom_fields`` goes through the sanitizer.
        """
        settings = self.get_calendar_settings(calendar_id)
        previous = self.get_custom_fields(calendar_id)

        if custom_fields is None:
            clean = previous
        else:
            clean = self.sanitizer.normalize(custom_fields, previous=previous)

        if settings is None:
            settings = CalendarFieldSettings(calendar_id=calendar_id)

        if mode is not None:
            settings.mode = coerce_mode(mode)
        if position is not None:
            settings.position = coerce_position(position)
        settings.custom_fields = fields_to_json(clean)
        settings.updated_at = datetime.now(timezone.utc)

        try:
            self.db.add(settings)
            self.db.commit()
            self.db.refresh(settings)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error saving user field settings for calendar {calendar_id}: {e}")
            raise

        logger.info(
            f"Saved user field settings for calendar {calendar_id}: "
            f"mode={settings.mode.value}, position={settings.position.value}, "
            f"{len(clean)} custom fields"
        )
        return settings
