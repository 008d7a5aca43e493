"""FastAPI web service for formatting HTML and XML.

Endpoints::

    GET  /health        Health check.
    GET  /presets       List option presets with their values.
    POST /format        Upload a document and receive it formatted.
    POST /format/text   Send raw markup, receive it formatted.

Run::

    uvicorn tidier.server:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse, Response

from tidier import __version__
from tidier.document import Doc
from tidier.errors import ContentError
from tidier.options import PRESETS, FormatOptions

logger = logging.getLogger(__name__)

app = FastAPI(
    title="tidier",
    description="HTML and XML formatting service",
    version=__version__,
)

HTML_MEDIA_TYPE = "text/html"
XML_MEDIA_TYPE = "application/xml"
DIAGNOSTICS_HEADER = "X-Tidier-Diagnostics"


def _options(preset: str, spaces: Optional[int], wrap: Optional[int]) -> FormatOptions:
    try:
        options = FormatOptions.preset(preset)
        if spaces is not None:
            options = options.with_tabs(False).with_indent_size(spaces)
        if wrap is not None:
            options = options.with_line_width(wrap)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return options


def _format(markup: str, xml: bool, options: FormatOptions) -> Response:
    try:
        with Doc(markup, xml) as doc:
            body = doc.format_to_bytes(options)
            count = len(doc.diagnostics())
    except ContentError as exc:
        logger.info("Rejected document: %s", exc)
        return JSONResponse(
            status_code=422,
            content={
                "detail": str(exc),
                "status": exc.status,
                "diagnostics": [d.raw for d in exc.diagnostics],
            },
        )

    return Response(
        content=body,
        media_type=XML_MEDIA_TYPE if xml else HTML_MEDIA_TYPE,
        headers={DIAGNOSTICS_HEADER: str(count)},
    )


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


@app.get("/presets")
async def list_presets() -> dict[str, dict]:
    """List available presets and their option values."""
    return {"presets": {name: FormatOptions.preset(name).to_dict() for name in PRESETS}}


@app.post("/format")
async def format_file(
    file: UploadFile = File(...),
    xml: Optional[bool] = Form(None),
    preset: str = Form("default"),
    spaces: Optional[int] = Form(None),
    wrap: Optional[int] = Form(None),
) -> Response:
    """Upload a document and receive it formatted.

    - **file**: HTML or XML document (UTF-8)
    - **xml**: force XML mode; inferred from a ``.xml`` filename when omitted
    - **preset**: option preset name (default, tabbed)
    - **spaces** / **wrap**: override indentation and line width
    """
    raw = await file.read()
    try:
        markup = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="document is not valid UTF-8") from exc

    if xml is None:
        xml = (file.filename or "").lower().endswith(".xml")

    return _format(markup, xml, _options(preset, spaces, wrap))


@app.post("/format/text")
async def format_text(
    markup: str = Form(...),
    xml: bool = Form(False),
    preset: str = Form("default"),
    spaces: Optional[int] = Form(None),
    wrap: Optional[int] = Form(None),
) -> Response:
    """Send raw markup and receive it formatted.

    - **markup**: HTML or XML source text
    - **xml**: parse as XML
    """
    return _format(markup, xml, _options(preset, spaces, wrap))
