"""Tests for the field descriptor model and machine-name helpers"""

import pytest

from booking_fields.models.field_descriptor import (
    NAME_PATTERN,
    FieldDescriptor,
    clean_name,
    default_descriptor,
    derive_name,
    humanize_name,
)
from booking_fields.models.field_type import FieldType, is_option_bearing


class TestDeriveName:
    """Machine names derived from display labels"""

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("Phone", "phone"),
            ("Phone Number", "phone_number"),
            ("  Guest  Count!! ", "guest_count"),
            ("2nd Guest", "f_2nd_guest"),
            ("__x__", "x"),
            ("Émail", "mail"),
            ("", "f_"),
            ("!!!", "f_"),
        ],
    )
    def test_derive_name(self, label, expected):
        assert derive_name(label) == expected

    @pytest.mark.parametrize(
        "label", ["Phone", "2nd Guest", "", "!!!", "Dietary needs (optional)", "日本"]
    )
    def test_derived_names_are_valid(self, label):
        """Every derived name starts with a letter and uses [a-z0-9_]"""
        assert NAME_PATTERN.match(derive_name(label))


class TestCleanName:
    """Explicitly entered names"""

    def test_valid_name_unchanged(self):
        assert clean_name("phone") == "phone"
        assert clean_name("f_") == "f_"
        assert clean_name("guest_count_2") == "guest_count_2"

    def test_invalid_characters_replaced(self):
        assert clean_name("a-b c") == "a_b_c"
        assert clean_name("Phone") == "phone"

    def test_leading_digit_prefixed(self):
        assert clean_name("1abc") == "f_1abc"

    def test_idempotent(self):
        once = clean_name("9 Lives!")
        assert clean_name(once) == once


class TestFieldDescriptor:
    """FieldDescriptor defaults and derived properties"""

    def test_default_descriptor(self):
        field = default_descriptor()
        assert field.label == ""
        assert field.name == ""
        assert field.type == FieldType.TEXT
        assert field.required is False
        assert field.hint == ""
        assert field.options == ""

    def test_form_key(self):
        assert FieldDescriptor(name="phone").form_key == "codobuf_phone"

    def test_option_list_drops_empty_entries(self):
        field = FieldDescriptor(type=FieldType.SELECT, options="Beef, ,Chicken,")
        assert field.option_list == ["Beef", "Chicken"]

    def test_display_label_falls_back_to_untitled(self):
        assert FieldDescriptor().display_label == "Untitled"
        assert FieldDescriptor(label="Phone").display_label == "Phone"

    def test_option_bearing_types(self):
        assert is_option_bearing(FieldType.SELECT)
        assert is_option_bearing("radio")
        assert not is_option_bearing(FieldType.CHECKBOX)
        assert not is_option_bearing("text")
        assert not is_option_bearing("file")

    def test_humanize_name(self):
        assert humanize_name("guest_count") == "Guest Count"
        assert humanize_name("f_2nd_guest") == "F 2nd Guest"
