"""tidier: format HTML and XML with libtidy."""

from __future__ import annotations

__version__ = "0.1.0"

from tidier.diagnostics import Diagnostic, Severity
from tidier.document import Doc, format_bytes, format_text
from tidier.errors import (
    ContentError,
    EngineContractError,
    EngineLoadError,
    FormatError,
    ParseError,
    TidierError,
)
from tidier.options import PRESETS, CustomTags, FormatOptions, Indent, LineEnding

__all__ = [
    "PRESETS",
    "ContentError",
    "CustomTags",
    "Diagnostic",
    "Doc",
    "EngineContractError",
    "EngineLoadError",
    "FormatError",
    "FormatOptions",
    "Indent",
    "LineEnding",
    "ParseError",
    "Severity",
    "TidierError",
    "__version__",
    "format_bytes",
    "format_text",
]
