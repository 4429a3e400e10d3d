"""Interactive list editor for field lists.

The editor holds one ordered list of items for an administrator's editing
session. Every mutating handler finishes by re-serializing the whole list
into ``transport_value``, the JSON text submitted to the sanitizer on save,
so the transport value always matches the visible items.
"""

import json
import logging
from typing import Callable, List, Optional

from sqlmodel import SQLModel

from booking_fields.models.field_descriptor import (
    UNTITLED_LABEL,
    FieldDescriptor,
    default_descriptor,
    derive_name,
)
from booking_fields.models.field_type import FieldType, is_option_bearing
from booking_fields.services.field_sanitizer import split_options

logger = logging.getLogger(__name__)

EDITOR_TYPES = [
    (FieldType.TEXT.value, "Text"),
    (FieldType.NUMBER.value, "Number"),
    (FieldType.TEXTAREA.value, "Textarea"),
    (FieldType.SELECT.value, "Select"),
    (FieldType.RADIO.value, "Radio"),
    (FieldType.CHECKBOX.value, "Checkbox"),
]


class EditorItem(SQLModel):
    """One list entry as shown in the editor"""

    label: str = ""
    name: str = ""
    type: str = FieldType.TEXT.value
    required: bool = False
    hint: str = ""
    options_text: str = ""  # One option per line while editing
    name_touched: bool = False  # Name edited by hand this session
    is_open: bool = False  # Settings panel expanded

    @property
    def preview_label(self) -> str:
        return self.label or UNTITLED_LABEL

    @property
    def options_visible(self) -> bool:
        return is_option_bearing(self.type)

    def serialize(self) -> dict:
        return {
            "label": self.label,
            "name": self.name,
            "type": self.type or FieldType.TEXT.value,
            "required": 1 if self.required else 0,
            "hint": self.hint,
            "options": split_options(self.options_text),
        }


class FieldListEditor:
    """Event handlers over an in-memory field list"""

    def __init__(
        self,
        items: Optional[List[EditorItem]] = None,
        confirm: Optional[Callable[[EditorItem], bool]] = None,
    ):
        self.items: List[EditorItem] = list(items or [])
        # Asked before an item is removed; removal is skipped on False
        self.confirm = confirm or (lambda item: False)
        self.transport_value = ""
        self._sync()

    @classmethod
    def from_fields(cls, fields: List[FieldDescriptor], **kwargs) -> "FieldListEditor":
        """Open an editor over stored fields, every item collapsed"""
        items = [
            EditorItem(
                label=field.label,
                name=field.name,
                type=field.type.value,
                required=field.required,
                hint=field.hint,
                options_text=field.options.replace(",", "\n"),
            )
            for field in fields
        ]
        return cls(items, **kwargs)

    @classmethod
    def from_state(cls, state: dict, **kwargs) -> "FieldListEditor":
        items = [EditorItem.model_validate(item) for item in state.get("items", [])]
        return cls(items, **kwargs)

    def to_state(self) -> dict:
        return {"items": [item.model_dump() for item in self.items]}

    def serialize(self) -> List[dict]:
        return [item.serialize() for item in self.items]

    def _sync(self) -> None:
        self.transport_value = json.dumps(self.serialize(), separators=(",", ":"))

    def _item(self, index: int) -> EditorItem:
        if not 0 <= index < len(self.items):
            raise IndexError(f"No field at position {index}")
        return self.items[index]

    def _sibling_names(self, index: int) -> set:
        return {item.name for i, item in enumerate(self.items) if i != index}

    def add(self) -> int:
        """Append a default item, opened for editing; returns its index"""
        default = default_descriptor()
        self.items.append(
            EditorItem(
                label=default.label,
                name=default.name,
                type=default.type.value,
                required=default.required,
                hint=default.hint,
                is_open=True,
            )
        )
        self._sync()
        return len(self.items) - 1

    def remove(self, index: int) -> bool:
        item = self._item(index)
        if not self.confirm(item):
            return False
        del self.items[index]
        self._sync()
        return True

    def move(self, from_index: int, to_index: int) -> None:
        """Drop the item at ``from_index`` into position ``to_index``"""
        item = self._item(from_index)
        self._item(to_index)
        del self.items[from_index]
        self.items.insert(to_index, item)
        self._sync()

    def toggle(self, index: int) -> bool:
        item = self._item(index)
        item.is_open = not item.is_open
        return item.is_open

    def edit_label(self, index: int, label: str) -> None:
        """
        Update the label; while the name is untouched, regenerate it.

        The derived name is suffixed ``_1``, ``_2``, ... until it differs
        from every other item's current name.
        """
        item = self._item(index)
        item.label = label or ""

        if not item.name_touched:
            candidate = derive_name(item.label)
            taken = self._sibling_names(index)
            unique = candidate
            counter = 1
            while unique in taken:
                unique = f"{candidate}_{counter}"
                counter += 1
            item.name = unique

        self._sync()

    def edit_name(self, index: int, name: str) -> None:
        item = self._item(index)
        item.name = name or ""
        item.name_touched = True
        self._sync()

    def change_type(self, index: int, field_type: str) -> None:
        item = self._item(index)
        try:
            item.type = FieldType(field_type).value
        except ValueError:
            logger.warning(f"Ignoring unknown field type {field_type!r} in editor")
            item.type = FieldType.TEXT.value
        self._sync()

    def edit_required(self, index: int, required: bool) -> None:
        self._item(index).required = bool(required)
        self._sync()

    def edit_hint(self, index: int, hint: str) -> None:
        self._item(index).hint = hint or ""
        self._sync()

    def edit_options(self, index: int, options_text: str) -> None:
        self._item(index).options_text = options_text or ""
        self._sync()
