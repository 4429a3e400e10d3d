"""Sanitizer that turns untrusted field payloads into clean field lists"""

import json
import logging
import re
from typing import Any, List, Optional

from booking_fields.hooks import FieldHooks
from booking_fields.models.field_descriptor import (
    FieldDescriptor,
    clean_name,
    derive_name,
)
from booking_fields.models.field_type import FieldType, is_option_bearing

logger = logging.getLogger(__name__)

_TAG = re.compile(r"<[^>]*>")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_WHITESPACE_RUN = re.compile(r"\s+")
_OPTION_SEPARATORS = re.compile(r"[\r\n,]+")
_INVALID_KEY_CHARS = re.compile(r"[^a-z0-9_\-]")
_FALSE_STRINGS = {"", "0", "false", "no", "off"}


def sanitize_text(value: Any) -> str:
    """
    Reduce a value to a single line of plain text.

    Strips markup tags and control characters, collapses whitespace
    (including newlines and tabs) and trims the result. Non-text values
    other than numbers become an empty string.
    """
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return ""
    text = _TAG.sub("", value)
    text = _CONTROL_CHARS.sub("", text)
    return _WHITESPACE_RUN.sub(" ", text).strip()


def sanitize_key(value: Any) -> str:
    """Lower-case and keep only ``[a-z0-9_-]``"""
    if not isinstance(value, str):
        return ""
    return _INVALID_KEY_CHARS.sub("", value.lower())


def coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def split_options(raw: Any) -> str:
    """
    Normalize an options payload to a comma-joined string.

    Accepts text separated by commas and/or newlines, or a list of entries.
    Entries are trimmed and sanitized; empty entries are dropped.

    Example:
        "a, b ,,c\\nd" -> "a,b,c,d"
    """
    if isinstance(raw, (list, tuple)):
        pieces = []
        for entry in raw:
            pieces.extend(_OPTION_SEPARATORS.split(sanitize_text(entry)))
    elif isinstance(raw, str):
        pieces = _OPTION_SEPARATORS.split(raw)
    else:
        return ""
    parts = [sanitize_text(piece) for piece in pieces]
    return ",".join(part for part in parts if part)


def _name_exists(name: str, fields: List[FieldDescriptor]) -> bool:
    return any(field.name == name for field in fields)


class FieldSanitizer:
    """Normalizes field lists and notifies observers of clean results"""

    def __init__(self, hooks: Optional[FieldHooks] = None):
        self.hooks = hooks or FieldHooks()

    def parse(self, raw: Any) -> Optional[list]:
        """
        Turn raw input into a list of items.

        Returns None when text input does not decode to a JSON array, or
        when the input is neither text nor a list.
        """
        if isinstance(raw, (list, tuple)):
            return list(raw)
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        if not isinstance(raw, str):
            return None
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, ValueError, RecursionError):
            # Malformed or pathologically nested payloads
            return None
        if not isinstance(data, list):
            return None
        return data

    def clean_item(self, item: Any) -> Optional[FieldDescriptor]:
        """Clean a single item; returns None for items that are not records"""
        if isinstance(item, FieldDescriptor):
            item = item.model_dump(mode="json")
        if not isinstance(item, dict):
            return None

        label = sanitize_text(item.get("label"))

        raw_name = sanitize_text(item.get("name"))
        if raw_name:
            name = clean_name(raw_name)
        else:
            name = derive_name(label)

        field_type = sanitize_key(item.get("type")) or FieldType.TEXT.value
        try:
            field_type = FieldType(field_type)
        except ValueError:
            # Unknown and legacy types such as "file" fall back to text
            field_type = FieldType.TEXT

        options = ""
        if is_option_bearing(field_type):
            options = split_options(item.get("options"))

        return FieldDescriptor(
            label=label,
            name=name,
            type=field_type,
            required=coerce_bool(item.get("required", False)),
            hint=sanitize_text(item.get("hint")),
            options=options,
        )

    def clean_list(self, items: list) -> List[FieldDescriptor]:
        """
        Clean every item in order, then make names unique.

        A later duplicate of an earlier name is suffixed ``_1``, ``_2``, ...
        until it no longer collides with any name already accepted.
        """
        clean: List[FieldDescriptor] = []
        for item in items:
            field = self.clean_item(item)
            if field is None:
                continue

            original_name = field.name
            counter = 1
            while _name_exists(field.name, clean):
                field.name = f"{original_name}_{counter}"
                counter += 1

            clean.append(field)
        return clean

    def default_fields(self) -> List[FieldDescriptor]:
        return self.clean_list(self.hooks.get_default_fields())

    def normalize(
        self, raw: Any, previous: Optional[List[FieldDescriptor]] = None
    ) -> List[FieldDescriptor]:
        """
        Produce a clean field list from untrusted input.

        Args:
            raw: A list of records or JSON text encoding one
            previous: The currently stored list, returned unchanged when the
                input cannot be parsed (defaults are used if not given)

        Returns:
            Clean list of FieldDescriptor. Never raises for bad input.
        """
        data = self.parse(raw)
        if data is None:
            logger.warning("Discarding malformed field list payload, keeping stored value")
            if previous is not None:
                return list(previous)
            return self.default_fields()

        clean = self.clean_list(data)
        logger.info(f"Normalized {len(clean)} user fields from {len(data)} items")

        self.hooks.notify_fields_saved(clean)
        return clean


def fields_to_json(fields: List[FieldDescriptor]) -> str:
    """Serialize a field list to the stored JSON array shape"""
    return json.dumps([field.model_dump(mode="json") for field in fields])
