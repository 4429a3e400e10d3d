"""Submission parser - turns submitted form values into a typed record"""

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional

from booking_fields.models.field_descriptor import FieldDescriptor
from booking_fields.models.field_type import FieldType
from booking_fields.services.field_sanitizer import sanitize_text

logger = logging.getLogger(__name__)

_CHECKED_STRINGS = {"1", "on", "true", "yes"}
_MISSING = object()


class RequiredFieldError(ValueError):
    """Raised when a required field has no usable value"""

    def __init__(self, field: FieldDescriptor):
        self.field = field
        label = field.label.strip() or "A required field"
        super().__init__(f"{label} is required.")

    @property
    def message(self) -> str:
        return str(self)


def parse_number(raw: Any) -> float:
    """Parse a float; invalid or non-finite input yields 0.0"""
    if isinstance(raw, bool):
        return 1.0 if raw else 0.0
    try:
        number = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def parse_checkbox(raw: Any) -> int:
    if isinstance(raw, bool):
        return 1 if raw else 0
    if isinstance(raw, (int, float)):
        return 1 if raw else 0
    if isinstance(raw, str):
        return 1 if raw.strip().lower() in _CHECKED_STRINGS else 0
    return 0


class SubmissionParser:
    """Collects user field values from one or more submission sources"""

    def lookup(self, field: FieldDescriptor, sources: Iterable[Optional[Mapping]]) -> Any:
        """
        Find a field's raw value under ``codobuf_<name>``.

        Sources are checked in the given order; the first that contains the
        key wins. Returns a sentinel when no source has it.
        """
        key = field.form_key
        for source in sources:
            if source is not None and key in source:
                return source[key]
        return _MISSING

    def parse_submission(
        self, fields: List[FieldDescriptor], *sources: Optional[Mapping]
    ) -> Dict[str, Any]:
        """
        Build the submission record for a list of fields.

        Args:
            fields: Resolved fields for the calendar
            sources: Mappings in precedence order, e.g. the booking payload,
                the request form, the query string

        Returns:
            Dict keyed by field name. Absent checkboxes record 0; other
            absent fields are omitted.
        """
        record: Dict[str, Any] = {}
        for field in fields:
            raw = self.lookup(field, sources)

            if raw is _MISSING:
                if field.type == FieldType.CHECKBOX:
                    record[field.name] = 0
                continue

            if field.type == FieldType.NUMBER:
                record[field.name] = parse_number(raw)
            elif field.type == FieldType.CHECKBOX:
                record[field.name] = parse_checkbox(raw)
            else:
                record[field.name] = sanitize_text(raw)

        return record

    def find_missing_required(
        self, fields: List[FieldDescriptor], *sources: Optional[Mapping]
    ) -> Optional[FieldDescriptor]:
        """Return the first required field without a usable value, if any"""
        for field in fields:
            if not field.required:
                continue
            raw = self.lookup(field, sources)
            if raw is _MISSING:
                return field
            if field.type == FieldType.CHECKBOX:
                if not parse_checkbox(raw):
                    return field
            elif not sanitize_text(raw):
                return field
        return None

    def validate_required(
        self, fields: List[FieldDescriptor], *sources: Optional[Mapping]
    ) -> None:
        missing = self.find_missing_required(fields, *sources)
        if missing is not None:
            logger.info(f"Blocked submission: required field '{missing.name}' is empty")
            raise RequiredFieldError(missing)
