# tests/application/services/test_field_injector.py
import pytest

from application.services.field_injector import first_index_of_kind, inject
from domain.fields import FieldKind, FormField


def _fields():
    return [
        FormField("authenticity_token", FieldKind.OTHER, "tok"),
        FormField("identifier", FieldKind.TEXT, ""),
        FormField("nickname", FieldKind.TEXT, "keep"),
        FormField("password", FieldKind.PASSWORD, ""),
        FormField("password_confirm", FieldKind.PASSWORD, ""),
    ]


class TestInject:
    def test_fills_first_text_and_first_password(self):
        out = inject(_fields(), "u1", "pw")

        assert [f.value for f in out] == ["tok", "u1", "keep", "pw", ""]

    def test_preserves_length_and_order(self):
        fields = _fields()
        out = inject(fields, "u1", "pw")

        assert len(out) == len(fields)
        assert [(f.name, f.kind) for f in out] == [(f.name, f.kind) for f in fields]

    def test_input_is_not_modified(self):
        fields = _fields()
        inject(fields, "u1", "pw")

        assert fields == _fields()

    def test_no_password_field_leaves_that_slot(self):
        fields = [FormField("otp", FieldKind.TEXT, ""), FormField("method", FieldKind.OTHER, "totp")]

        out = inject(fields, "123456", "ignored")

        assert out == [FormField("otp", FieldKind.TEXT, "123456"), FormField("method", FieldKind.OTHER, "totp")]

    def test_no_text_field_leaves_that_slot(self):
        fields = [FormField("password", FieldKind.PASSWORD, "")]

        assert inject(fields, "u1", "") == fields

    @pytest.mark.parametrize(
        "fields",
        [
            [],
            [FormField("a", FieldKind.OTHER, "1")],
            [FormField("a", FieldKind.TEXT, "1"), FormField("b", FieldKind.TEXT, "2")],
            [FormField("a", FieldKind.OTHER, "1"), FormField("b", FieldKind.TEXT, "2"), FormField("c", FieldKind.PASSWORD, "3")],
        ],
    )
    def test_username_only_changes_at_most_first_text_field(self, fields):
        out = inject(fields, "v", "")
        changed = [i for i, (a, b) in enumerate(zip(fields, out)) if a != b]

        assert len(out) == len(fields)
        text_idx = first_index_of_kind(fields, FieldKind.TEXT)
        pw_idx = first_index_of_kind(fields, FieldKind.PASSWORD)
        assert set(changed) <= {text_idx, pw_idx}

    def test_duplicate_equal_fields_only_first_is_filled(self):
        dup = FormField("identifier", FieldKind.TEXT, "")
        out = inject([dup, dup], "u1", "")

        assert [f.value for f in out] == ["u1", ""]
