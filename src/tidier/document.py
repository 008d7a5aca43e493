"""High-level document API.

A :class:`Doc` parses its source once and can then be formatted any number
of times with different :class:`FormatOptions`. The parsed tree is never
modified: each render repairs and prints a private scratch tree, so one
call's options never leak into the next. All four output methods share one
render path, so for the same options they produce exactly the same bytes.

Usage::

    doc = Doc("<p>hello</p>")
    html = doc.format_to_text(FormatOptions().with_line_width(0))
    if doc.has_issues():
        for d in doc.diagnostics():
            print(d)

    # or in one go
    html = format_text("<p>hello</p>")
"""

from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING, Optional

from tidier.config import configure
from tidier.diagnostics import Diagnostic, DiagnosticLog
from tidier.engine import STATUS_ERRORS, default_engine
from tidier.errors import EngineContractError, FormatError, ParseError
from tidier.options import FormatOptions

if TYPE_CHECKING:
    from tidier.engine import LibTidy, TidyHandle

logger = logging.getLogger(__name__)


class Doc:
    """A parsed HTML or XML document owned by libtidy.

    The mode (``xml``) is fixed at construction. The document holds one
    libtidy handle, released by :meth:`close`, by leaving a ``with`` block,
    or when the object is garbage collected, whichever comes first.
    """

    def __init__(
        self,
        source: str,
        xml: bool = False,
        *,
        engine: Optional[LibTidy] = None,
    ) -> None:
        self._source = source
        self._xml = bool(xml)
        self._engine = engine if engine is not None else default_engine()
        self._log = DiagnosticLog()

        handle = self._engine.create()
        try:
            configure(handle, FormatOptions(), self._xml)
            status = handle.parse(source)
            self._log.collect(handle.drain_diagnostics())
            if status < 0 or status >= STATUS_ERRORS:
                raise ParseError(
                    f"libtidy could not parse the document (status {status})",
                    status=status,
                    diagnostics=self._log.items,
                )
        except BaseException:
            handle.release()
            raise

        self._handle: TidyHandle = handle
        self._finalizer = weakref.finalize(self, handle.release)
        logger.debug(
            "Parsed %d characters as %s (status %d, %d diagnostics)",
            len(source), "XML" if self._xml else "HTML", status, len(self._log),
        )

    # -- properties ---------------------------------------------------------

    @property
    def xml(self) -> bool:
        return self._xml

    @property
    def closed(self) -> bool:
        return self._handle.released

    # -- formatting ---------------------------------------------------------

    def format_to_text(self, options: Optional[FormatOptions] = None) -> str:
        """Format the document and return it as a string."""
        return self._render(options).decode("utf-8")

    def format_to_bytes(self, options: Optional[FormatOptions] = None) -> bytes:
        """Format the document and return its UTF-8 encoding."""
        return self._render(options)

    def format_append_to_text(
        self, existing: str, options: Optional[FormatOptions] = None
    ) -> str:
        """Return *existing* followed by the formatted document."""
        return existing + self.format_to_text(options)

    def format_append_to_bytes(
        self, buf: bytearray, options: Optional[FormatOptions] = None
    ) -> bytearray:
        """Append the formatted document to *buf* in place and return *buf*.

        Nothing is appended if rendering fails.
        """
        buf.extend(self._render(options))
        return buf

    def _render(self, options: Optional[FormatOptions]) -> bytes:
        # Renders repair and print a scratch tree; the owned tree is never repaired.
        if self.closed:
            raise EngineContractError("Doc used after close()")
        if options is None:
            options = FormatOptions()

        scratch = self._engine.create()
        try:
            configure(scratch, options, self._xml)
            status = scratch.parse(self._source)
            replayed = scratch.drain_diagnostics()
            if status < 0 or status >= STATUS_ERRORS:
                # options such as custom_tags=NO can reject a source the
                # default parse accepted
                self._log.collect(replayed)
                output = b""
            else:
                logger.debug("Dropped %d replayed parse diagnostics", len(replayed.splitlines()))
                status = scratch.clean_and_repair()
                if status >= 0:
                    status, output = scratch.save()
                else:
                    output = b""
                self._log.collect(scratch.drain_diagnostics())
        finally:
            scratch.release()

        if status < 0 or (status >= STATUS_ERRORS and not output):
            raise FormatError(
                f"libtidy could not render the document (status {status})",
                status=status,
                diagnostics=self._log.items,
            )
        logger.debug("Rendered %d bytes (status %d)", len(output), status)
        return output

    # -- diagnostics --------------------------------------------------------

    def has_issues(self) -> bool:
        """True if libtidy has reported anything for this document.

        Which warnings appear depends on the libtidy release. Recent ones warn
        about a missing DOCTYPE, implicit <body> and missing <title> even for
        a well-formed fragment such as ``<p>foo</p>``, so a clean fragment
        does not guarantee False here.
        """
        return bool(self._log)

    def diagnostics(self) -> tuple[Diagnostic, ...]:
        """Every diagnostic reported so far, in emission order."""
        return self._log.items

    # -- lifecycle ----------------------------------------------------------

    def clone(self) -> Doc:
        """Return an independent document parsed from the same source."""
        return Doc(self._source, self._xml, engine=self._engine)

    def close(self) -> None:
        """Release the libtidy handle. Safe to call more than once."""
        self._finalizer()

    def __enter__(self) -> Doc:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __copy__(self) -> Doc:
        raise TypeError("Doc owns a libtidy handle and cannot be copied; use clone()")

    def __deepcopy__(self, memo: dict) -> Doc:
        raise TypeError("Doc owns a libtidy handle and cannot be copied; use clone()")

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<Doc {'xml' if self._xml else 'html'} {state} diagnostics={len(self._log)}>"


# ---------------------------------------------------------------------------
# One-shot helpers
# ---------------------------------------------------------------------------

def format_text(
    source: str,
    xml: bool = False,
    options: Optional[FormatOptions] = None,
    *,
    engine: Optional[LibTidy] = None,
) -> str:
    """Parse and format *source* in one call."""
    with Doc(source, xml, engine=engine) as doc:
        return doc.format_to_text(options)


def format_bytes(
    source: str,
    xml: bool = False,
    options: Optional[FormatOptions] = None,
    *,
    engine: Optional[LibTidy] = None,
) -> bytes:
    """Parse and format *source* in one call, returning UTF-8 bytes."""
    with Doc(source, xml, engine=engine) as doc:
        return doc.format_to_bytes(options)
