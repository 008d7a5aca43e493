"""Translation of :class:`FormatOptions` into libtidy configuration calls.

:func:`plan` is a pure function producing the ordered list of primitive
calls for an (options, mode) pair; :func:`configure` replays that list
against an engine handle. The order is always

1. reset every option to libtidy's factory defaults,
2. a fixed baseline that keeps output and diagnostics stable across
   libtidy versions,
3. the XML/HTML mode,
4. UTF-8 in and out,
5. the caller's options, from :data:`USER_OPTION_TABLE`.

A primitive that reports failure means tidier and libtidy disagree about
the API; :class:`EngineContractError` is raised at once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Protocol, Union

from tidier.errors import EngineContractError

if TYPE_CHECKING:
    from tidier.options import FormatOptions

logger = logging.getLogger(__name__)

ENCODING = "utf8"

# TidyTriState
AUTO_STATE = 2

# libtidy only maps wrap=0 to "no wrap" when it is set before parsing
NO_WRAP = 0x7FFFFFFF


class EngineHandle(Protocol):
    """Configuration primitives a handle must offer."""

    def reset_options(self) -> bool: ...

    def set_int(self, name: str, value: int) -> bool: ...

    def set_bool(self, name: str, value: bool) -> bool: ...

    def set_encoding(self, name: str) -> bool: ...


class Action(Enum):
    RESET = "reset"
    BOOL = "bool"
    INT = "int"
    ENCODING = "encoding"


@dataclass(frozen=True)
class Step:
    """One primitive configuration call."""

    action: Action
    option: str = ""
    value: Union[int, bool, str, None] = None

    def describe(self) -> str:
        if self.action is Action.RESET:
            return "reset of all options"
        if self.action is Action.ENCODING:
            return f"encoding {self.value!r}"
        return f"{self.action.value} option {self.option}={self.value!r}"


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

BASELINE: tuple[tuple[str, bool], ...] = (
    ("show-filename", False),
    ("show-info", False),
    ("show-meta-change", False),
    ("coerce-endtags", False),
    ("drop-empty-paras", True),
    ("lower-literals", True),
    ("tidy-mark", False),
    ("add-meta-charset", False),
    ("quiet", True),
)


@dataclass(frozen=True)
class OptionMapping:
    """Row of :data:`USER_OPTION_TABLE`."""

    field: str
    option: str
    action: Action
    value: Callable[[FormatOptions], Union[int, bool]]


USER_OPTION_TABLE: tuple[OptionMapping, ...] = (
    OptionMapping("line_ending", "newline", Action.INT, lambda o: o.line_ending.ordinal),
    OptionMapping("line_width", "wrap", Action.INT, lambda o: o.line_width or NO_WRAP),
    OptionMapping("custom_tags", "custom-tags", Action.INT, lambda o: o.custom_tags.ordinal),
    OptionMapping("indent.size", "indent-spaces", Action.INT, lambda o: o.indent.size),
    OptionMapping("merge_divs", "merge-divs", Action.INT, lambda o: int(o.merge_divs)),
    OptionMapping("merge_spans", "merge-spans", Action.INT, lambda o: int(o.merge_spans)),
    OptionMapping("indent.size", "indent", Action.INT, lambda o: int(o.indent.size > 0)),
    OptionMapping("indent.attributes", "indent-attributes", Action.BOOL, lambda o: o.indent.attributes),
    OptionMapping("indent.cdata", "indent-cdata", Action.BOOL, lambda o: o.indent.cdata),
    OptionMapping("indent.tabs", "indent-with-tabs", Action.BOOL, lambda o: o.indent.tabs),
    OptionMapping("join_styles", "join-styles", Action.BOOL, lambda o: o.join_styles),
    OptionMapping("strip_comments", "hide-comments", Action.BOOL, lambda o: o.strip_comments),
    OptionMapping("join_classes", "join-classes", Action.BOOL, lambda o: o.join_classes),
    OptionMapping("ascii_symbols", "bare", Action.BOOL, lambda o: o.ascii_symbols),
    OptionMapping("br_newline", "break-before-br", Action.BOOL, lambda o: o.br_newline),
)


# ---------------------------------------------------------------------------
# Planning
# ---------------------------------------------------------------------------

def mode_steps(xml: bool) -> tuple[Step, ...]:
    return (
        Step(Action.BOOL, "input-xml", xml),
        Step(Action.BOOL, "output-xml", xml),
        Step(Action.BOOL, "add-xml-decl", xml),
        Step(Action.INT, "show-body-only", AUTO_STATE),
    )


def plan(options: FormatOptions, xml: bool) -> tuple[Step, ...]:
    """Return the primitive calls that program libtidy for *options*."""
    steps: list[Step] = [Step(Action.RESET)]
    steps.extend(Step(Action.BOOL, name, value) for name, value in BASELINE)
    steps.extend(mode_steps(xml))
    steps.append(Step(Action.ENCODING, value=ENCODING))
    steps.extend(Step(row.action, row.option, row.value(options)) for row in USER_OPTION_TABLE)
    return tuple(steps)


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

def _apply(handle: EngineHandle, step: Step) -> bool:
    if step.action is Action.RESET:
        return handle.reset_options()
    if step.action is Action.BOOL:
        return handle.set_bool(step.option, bool(step.value))
    if step.action is Action.INT:
        return handle.set_int(step.option, int(step.value))  # type: ignore[arg-type]
    return handle.set_encoding(str(step.value))


def configure(handle: EngineHandle, options: FormatOptions, xml: bool) -> None:
    """Program *handle* for *options* in XML or HTML mode."""
    for step in plan(options, xml):
        logger.debug("tidy config: %s", step.describe())
        if not _apply(handle, step):
            raise EngineContractError(f"libtidy rejected {step.describe()}")
