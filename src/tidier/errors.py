"""Exception types raised by tidier.

Content failures (markup libtidy refuses to parse or render) derive from
:class:`TidierError` and carry the diagnostics captured so far.
:class:`EngineContractError` sits outside that hierarchy: it signals a
broken invariant between tidier and libtidy and is not meant to be handled
like a user error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tidier.diagnostics import Diagnostic


class TidierError(Exception):
    """Base class for recoverable tidier failures."""


class EngineLoadError(TidierError):
    """libtidy could not be located or loaded."""


class ContentError(TidierError):
    """libtidy could not process the markup."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        diagnostics: tuple[Diagnostic, ...] = (),
    ) -> None:
        super().__init__(message)
        self.status = status
        self.diagnostics = diagnostics


class ParseError(ContentError):
    """The source could not be parsed."""


class FormatError(ContentError):
    """A parsed document could not be rendered."""


class EngineContractError(RuntimeError):
    """A libtidy primitive failed although it was called correctly."""
