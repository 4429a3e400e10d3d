"""Server-side renderer for end-user field markup"""

import logging
import re
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from booking_fields.hooks import FieldHooks
from booking_fields.models.field_descriptor import FieldDescriptor
from booking_fields.services.field_sanitizer import FieldSanitizer

logger = logging.getLogger(__name__)

template_dir = Path(__file__).parent.parent / "templates"

_SLUG_RUN = re.compile(r"[^a-z0-9]+")


def create_template_env() -> Environment:
    """Jinja environment over the package templates, autoescaping HTML"""
    return Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html"]),
    )


def slugify(text: str) -> str:
    return _SLUG_RUN.sub("-", text.lower()).strip("-")


def _value_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class FieldRenderer:
    """Renders field descriptors as HTML form fragments"""

    def __init__(
        self,
        template_env: Optional[Environment] = None,
        hooks: Optional[FieldHooks] = None,
    ):
        self.env = template_env or create_template_env()
        self.hooks = hooks or FieldHooks()

    def render_field(
        self, field: Union[FieldDescriptor, Mapping], value: Any = ""
    ) -> str:
        """
        Render one field with its current value.

        A registered render override that returns non-None markup replaces
        the built-in output for this field.
        """
        if not isinstance(field, FieldDescriptor):
            # Unknown types such as a legacy "file" render as text
            field = FieldSanitizer(self.hooks).clean_item(dict(field))

        overridden = self.hooks.override_render(field, value)
        if overridden is not None:
            return str(overridden)

        current = _value_text(value)
        key = field.form_key
        choices = [
            {
                "value": option,
                "id": f"{key}_{slugify(option)}",
                "selected": option == current,
            }
            for option in field.option_list
        ]

        template = self.env.get_template("fields/field.html")
        return template.render(
            field=field,
            key=key,
            value=current,
            choices=choices,
            checked=current == "1",
        )

    def render_field_list(
        self,
        fields: Iterable[FieldDescriptor],
        values: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """
        Render a list of fields inside one wrapper.

        Args:
            fields: Fields in display order
            values: Optional current values keyed by field name

        Returns:
            Markup, or an empty string when there are no fields
        """
        fields = list(fields)
        if not fields:
            return ""

        values = values or {}
        fragments = [
            Markup(self.render_field(field, values.get(field.name, "")))
            for field in fields
        ]
        template = self.env.get_template("fields/field_list.html")
        return template.render(fragments=fragments)
