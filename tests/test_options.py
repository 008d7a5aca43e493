"""Tests for the formatting options model."""

from __future__ import annotations

import dataclasses

import pytest

from tidier.options import PRESETS, CustomTags, FormatOptions, Indent, LineEnding


class TestDefaults:

    def test_format_options_defaults(self):
        o = FormatOptions()
        assert o.indent == Indent(size=4, tabs=False, attributes=False, cdata=False)
        assert o.line_ending is LineEnding.LF
        assert o.line_width == 80
        assert o.custom_tags is CustomTags.BLOCKLEVEL
        assert o.join_styles is True
        for name in ("ascii_symbols", "strip_comments", "join_classes",
                     "br_newline", "merge_divs", "merge_spans"):
            assert getattr(o, name) is False, name

    def test_indent_defaults(self):
        assert Indent() == Indent(4, False, False, False)


class TestWithChange:

    def test_returns_new_value(self):
        base = FormatOptions()
        changed = base.with_line_width(0)
        assert changed.line_width == 0
        assert base.line_width == 80
        assert changed is not base

    @pytest.mark.parametrize(
        "method, value, attr",
        [
            ("with_line_ending", LineEnding.CRLF, "line_ending"),
            ("with_custom_tags", CustomTags.INLINE, "custom_tags"),
            ("with_ascii_symbols", True, "ascii_symbols"),
            ("with_strip_comments", True, "strip_comments"),
            ("with_join_classes", True, "join_classes"),
            ("with_join_styles", False, "join_styles"),
            ("with_br_newline", True, "br_newline"),
            ("with_merge_divs", True, "merge_divs"),
            ("with_merge_spans", True, "merge_spans"),
        ],
    )
    def test_single_field_changes(self, method, value, attr):
        base = FormatOptions()
        changed = getattr(base, method)(value)
        assert getattr(changed, attr) == value
        assert getattr(base, attr) != value
        # every other field untouched
        for f in dataclasses.fields(FormatOptions):
            if f.name != attr:
                assert getattr(changed, f.name) == getattr(base, f.name)

    def test_indent_shortcuts(self):
        o = (
            FormatOptions()
            .with_indent_size(2)
            .with_tabs(True)
            .with_indent_attributes(True)
            .with_indent_cdata(True)
        )
        assert o.indent == Indent(size=2, tabs=True, attributes=True, cdata=True)
        assert FormatOptions().indent == Indent()

    def test_with_indent_replaces_whole_value(self):
        o = FormatOptions().with_indent(Indent(size=0))
        assert o.indent.size == 0

    def test_indent_methods(self):
        i = Indent()
        assert i.with_size(8).size == 8
        assert i.with_tabs(True).tabs is True
        assert i.with_attributes(True).attributes is True
        assert i.with_cdata(True).cdata is True
        assert i == Indent()

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            FormatOptions().line_width = 10  # type: ignore[misc]


class TestValueSemantics:

    def test_equal_values_hash_equal(self):
        a = FormatOptions().with_merge_divs(True)
        b = FormatOptions(merge_divs=True)
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b, FormatOptions()}) == 2

    def test_usable_as_dict_key(self):
        cache = {FormatOptions(): "default", FormatOptions.preset("tabbed"): "tabbed"}
        assert cache[FormatOptions()] == "default"

    def test_indent_is_ordered(self):
        assert Indent(size=2) < Indent(size=4)


class TestValidation:

    def test_negative_width_rejected(self):
        with pytest.raises(ValueError):
            FormatOptions(line_width=-1)

    def test_indent_size_upper_bound(self):
        Indent(size=0xFFFF)
        with pytest.raises(ValueError):
            Indent(size=0x10000)

    def test_bool_is_not_a_width(self):
        with pytest.raises(TypeError):
            FormatOptions(line_width=True)

    def test_flag_must_be_bool(self):
        with pytest.raises(TypeError):
            FormatOptions(strip_comments=1)  # type: ignore[arg-type]

    def test_enum_fields_type_checked(self):
        with pytest.raises(TypeError):
            FormatOptions(line_ending="lf")  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            FormatOptions(custom_tags="pre")  # type: ignore[arg-type]


class TestEnums:

    def test_line_ending_ordinals(self):
        assert LineEnding.LF.ordinal == 0
        assert LineEnding.CRLF.ordinal == 1
        assert LineEnding.CR.ordinal == 2

    def test_custom_tags_ordinals(self):
        assert [t.ordinal for t in CustomTags] == [0, 1, 2, 3, 4]
        assert CustomTags.NO.ordinal == 0
        assert CustomTags.PRE.ordinal == 4


class TestPresets:

    def test_preset_names(self):
        assert PRESETS == ["default", "tabbed"]

    def test_default_preset(self):
        assert FormatOptions.preset("default") == FormatOptions()

    def test_tabbed_preset(self):
        o = FormatOptions.preset("tabbed")
        assert o.line_width == 68
        assert o.indent.tabs is True
        assert o.indent.size == 4

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown preset"):
            FormatOptions.preset("nonexistent")

    def test_to_dict(self):
        d = FormatOptions.preset("tabbed").to_dict()
        assert d["line_width"] == 68
        assert d["line_ending"] == "lf"
        assert d["custom_tags"] == "blocklevel"
        assert d["indent"] == {"size": 4, "tabs": True, "attributes": False, "cdata": False}
