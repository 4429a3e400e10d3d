"""Enums for user field definitions and calendar overrides"""

from enum import Enum


class FieldType(str, Enum):
    """Enum for user field types"""

    TEXT = "text"
    NUMBER = "number"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"


# Types whose ``options`` are stored, rendered and collected
OPTION_BEARING_TYPES = frozenset({FieldType.SELECT, FieldType.RADIO})


def is_option_bearing(field_type) -> bool:
    """Return True if the given type (enum or raw string) carries options"""
    try:
        return FieldType(field_type) in OPTION_BEARING_TYPES
    except ValueError:
        return False


class FieldsMode(str, Enum):
    """Which field list a calendar uses"""

    GLOBAL = "global"
    NONE = "none"
    CUSTOM = "custom"


class FieldsPosition(str, Enum):
    """Where fields render relative to the calendar widget"""

    BEFORE = "before"
    AFTER = "after"
