"""Field descriptor model shared by the sanitizer, renderer, parser and editor"""

import re
import string

from sqlmodel import SQLModel

from booking_fields.models.field_type import FieldType

# Prefix of the submitted form key for a field, e.g. ``codobuf_phone``
FIELD_KEY_PREFIX = "codobuf_"

UNTITLED_LABEL = "Untitled"

_INVALID_NAME_RUN = re.compile(r"[^a-z0-9_]+")
_STARTS_WITH_LETTER = re.compile(r"^[a-z]")
NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")


class FieldDescriptor(SQLModel):
    """One user-authored form field definition"""

    label: str = ""  # Display label; empty renders as "Untitled" in the editor
    name: str = ""  # Machine name, unique within its list
    type: FieldType = FieldType.TEXT
    required: bool = False
    hint: str = ""  # Placeholder, or caption for checkboxes
    options: str = ""  # Comma-joined choices for select/radio

    @property
    def form_key(self) -> str:
        """Key under which the field's value is submitted"""
        return FIELD_KEY_PREFIX + self.name

    @property
    def option_list(self) -> list[str]:
        """Options as a list, empty entries dropped"""
        return [opt.strip() for opt in self.options.split(",") if opt.strip()]

    @property
    def display_label(self) -> str:
        return self.label or UNTITLED_LABEL


def default_descriptor() -> FieldDescriptor:
    """Return a descriptor with every attribute at its default"""
    return FieldDescriptor()


def _ensure_leading_letter(name: str) -> str:
    if not _STARTS_WITH_LETTER.match(name):
        return "f_" + name
    return name


def derive_name(label: str) -> str:
    """
    Build a machine name from a display label.

    Lower-cases, replaces runs of characters outside ``[a-z0-9_]`` with ``_``,
    strips leading/trailing underscores and prefixes ``f_`` when the result
    does not start with a letter.

    Examples:
        "Phone Number" -> "phone_number"
        "2nd guest"    -> "f_2nd_guest"
        ""             -> "f_"
    """
    slug = _INVALID_NAME_RUN.sub("_", (label or "").lower()).strip("_")
    return _ensure_leading_letter(slug)


def clean_name(raw_name: str) -> str:
    """
    Coerce an explicitly entered name into a valid machine name.

    Unlike derive_name, underscores at the edges are kept so an already
    valid name (including ``f_``) is returned unchanged.
    """
    name = _INVALID_NAME_RUN.sub("_", (raw_name or "").strip().lower())
    return _ensure_leading_letter(name)


def humanize_name(name: str) -> str:
    """``guest_count`` -> ``Guest Count``"""
    return string.capwords(name.replace("_", " "))
