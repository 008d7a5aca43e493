"""Formatting options.

Plain immutable values describing every formatting knob tidier exposes.
A value is never changed in place: every ``with_*`` method returns a new
value with one field replaced, so one instance can be shared by any number
of documents and threads.

Two presets are provided: ``default`` (80 columns, four spaces) and
``tabbed`` (68 columns, tab indentation), the profile used by the command
line.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any

_MAX_INDENT = 0xFFFF
_MAX_WIDTH = 0xFFFFFFFF


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class LineEnding(Enum):
    """Line terminator written by the engine."""

    LF = "lf"
    CR = "cr"      # you probably don't want this one
    CRLF = "crlf"

    @property
    def ordinal(self) -> int:
        """libtidy's ``TidyLineEnding`` value."""
        return {LineEnding.LF: 0, LineEnding.CRLF: 1, LineEnding.CR: 2}[self]


class CustomTags(Enum):
    """What libtidy does with autonomous custom tags (names containing ``-``).

    ``NO`` turns such tags into hard errors.
    """

    NO = "no"
    BLOCKLEVEL = "blocklevel"
    EMPTY = "empty"
    INLINE = "inline"
    PRE = "pre"

    @property
    def ordinal(self) -> int:
        """libtidy's ``TidyUseCustomTagsState`` value."""
        return list(CustomTags).index(self)


def _check_uint(name: str, value: int, upper: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if not 0 <= value <= upper:
        raise ValueError(f"{name} must be between 0 and {upper}, got {value}")


def _check_flags(obj: object, names: tuple[str, ...]) -> None:
    for name in names:
        value = getattr(obj, name)
        if not isinstance(value, bool):
            raise TypeError(f"{name} must be a bool, got {type(value).__name__}")


# ---------------------------------------------------------------------------
# Indent
# ---------------------------------------------------------------------------

@dataclass(frozen=True, order=True)
class Indent:
    """Indentation settings.

    ``size`` is the number of spaces per level. With ``tabs`` it controls
    how eagerly indentation is applied instead (4 to 8 is reasonable).
    A size of 0 turns indentation off.
    """

    size: int = 4
    tabs: bool = False
    # newline + indent before each attribute
    attributes: bool = False
    # indent inside <![CDATA[...]]> sections
    cdata: bool = False

    def __post_init__(self) -> None:
        _check_uint("indent.size", self.size, _MAX_INDENT)
        _check_flags(self, ("tabs", "attributes", "cdata"))

    def with_size(self, size: int) -> Indent:
        return replace(self, size=size)

    def with_tabs(self, tabs: bool) -> Indent:
        return replace(self, tabs=tabs)

    def with_attributes(self, attributes: bool) -> Indent:
        return replace(self, attributes=attributes)

    def with_cdata(self, cdata: bool) -> Indent:
        return replace(self, cdata=cdata)


# ---------------------------------------------------------------------------
# FormatOptions
# ---------------------------------------------------------------------------

_FLAG_FIELDS = (
    "ascii_symbols",
    "strip_comments",
    "join_classes",
    "join_styles",
    "br_newline",
    "merge_divs",
    "merge_spans",
)


@dataclass(frozen=True)
class FormatOptions:
    """Complete set of formatting options for one render.

    ``line_width`` of 0 disables wrapping whatever the other fields say.
    """

    indent: Indent = field(default_factory=Indent)
    line_ending: LineEnding = LineEnding.LF
    line_width: int = 80
    custom_tags: CustomTags = CustomTags.BLOCKLEVEL
    # smart quotes, em dashes etc. become ASCII
    ascii_symbols: bool = False
    strip_comments: bool = False
    join_classes: bool = False
    join_styles: bool = True
    # newline after <br>
    br_newline: bool = False
    merge_divs: bool = False
    merge_spans: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.indent, Indent):
            raise TypeError(f"indent must be an Indent, got {type(self.indent).__name__}")
        if not isinstance(self.line_ending, LineEnding):
            raise TypeError(f"line_ending must be a LineEnding, got {self.line_ending!r}")
        if not isinstance(self.custom_tags, CustomTags):
            raise TypeError(f"custom_tags must be a CustomTags, got {self.custom_tags!r}")
        _check_uint("line_width", self.line_width, _MAX_WIDTH)
        _check_flags(self, _FLAG_FIELDS)

    # -- presets ------------------------------------------------------------

    @classmethod
    def preset(cls, name: str) -> FormatOptions:
        """Return the options of preset *name*."""
        if name not in _PRESET_BUILDERS:
            raise ValueError(
                f"Unknown preset {name!r}. Choose from: {', '.join(_PRESET_BUILDERS)}"
            )
        return _PRESET_BUILDERS[name]()

    # -- with-change operations ---------------------------------------------

    def with_line_ending(self, line_ending: LineEnding) -> FormatOptions:
        return replace(self, line_ending=line_ending)

    def with_line_width(self, width: int) -> FormatOptions:
        return replace(self, line_width=width)

    def with_custom_tags(self, behavior: CustomTags) -> FormatOptions:
        return replace(self, custom_tags=behavior)

    def with_ascii_symbols(self, convert: bool) -> FormatOptions:
        return replace(self, ascii_symbols=convert)

    def with_strip_comments(self, yes: bool) -> FormatOptions:
        return replace(self, strip_comments=yes)

    def with_join_classes(self, yes: bool) -> FormatOptions:
        return replace(self, join_classes=yes)

    def with_join_styles(self, yes: bool) -> FormatOptions:
        return replace(self, join_styles=yes)

    def with_br_newline(self, yes: bool) -> FormatOptions:
        return replace(self, br_newline=yes)

    def with_merge_divs(self, yes: bool) -> FormatOptions:
        return replace(self, merge_divs=yes)

    def with_merge_spans(self, yes: bool) -> FormatOptions:
        return replace(self, merge_spans=yes)

    def with_indent(self, indent: Indent) -> FormatOptions:
        return replace(self, indent=indent)

    def with_indent_size(self, size: int) -> FormatOptions:
        return replace(self, indent=self.indent.with_size(size))

    def with_tabs(self, use_tabs: bool) -> FormatOptions:
        return replace(self, indent=self.indent.with_tabs(use_tabs))

    def with_indent_attributes(self, yes: bool) -> FormatOptions:
        return replace(self, indent=self.indent.with_attributes(yes))

    def with_indent_cdata(self, yes: bool) -> FormatOptions:
        return replace(self, indent=self.indent.with_cdata(yes))

    # -- serialisation ------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly mapping of every field."""
        data = asdict(self)
        data["line_ending"] = self.line_ending.value
        data["custom_tags"] = self.custom_tags.value
        return data


# ---------------------------------------------------------------------------
# Preset registry
# ---------------------------------------------------------------------------

def _build_default() -> FormatOptions:
    return FormatOptions()


def _build_tabbed() -> FormatOptions:
    return FormatOptions(indent=Indent(tabs=True), line_width=68)


_PRESET_BUILDERS = {
    "default": _build_default,
    "tabbed": _build_tabbed,
}

PRESETS = list(_PRESET_BUILDERS.keys())
