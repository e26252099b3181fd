"""FastAPI web service for Word template population.

Endpoints::

    GET  /health      Health check.
    POST /validate    Upload a .docx and learn whether it can be populated.
    POST /populate    Upload a .docx template plus JSON data, receive the
                      filled .docx back.

Run::

    uvicorn json2docx.server:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from urllib.parse import quote

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from json2docx import __version__
from json2docx.config import PopulateOptions
from json2docx.document import can_process_document
from json2docx.exceptions import DataError, InvalidDocumentError
from json2docx.populator import TemplatePopulator

app = FastAPI(
    title="json2docx",
    description="Word template population service",
    version=__version__,
)

DOCX_MEDIA_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)
ERROR_COUNT_HEADER = "X-Template-Errors"


def _content_disposition(filename: str) -> str:
    """Build Content-Disposition header, RFC 5987 for non-ASCII names."""
    try:
        filename.encode("ascii")
        return f'attachment; filename="{filename}"'
    except UnicodeEncodeError:
        encoded = quote(filename)
        return f"attachment; filename*=UTF-8''{encoded}"


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


@app.post("/validate")
async def validate(file: UploadFile = File(...)) -> dict[str, bool]:
    """Check whether the uploaded file opens as a Word document."""
    raw = await file.read()
    return {"valid": can_process_document(raw)}


@app.post("/populate")
async def populate(
    file: UploadFile = File(...),
    data: str = Form(...),
    show_errors: bool = Form(False),
    replace_line_breaks: bool = Form(False),
) -> Response:
    """Upload a template and JSON data, receive the populated document.

    - **file**: Word template (.docx)
    - **data**: JSON object with the values
    - **show_errors**: Prepend the template errors to the document
    - **replace_line_breaks**: Write line breaks as Word line breaks
    """
    raw = await file.read()
    options = PopulateOptions(
        replace_line_breaks=replace_line_breaks,
        show_errors_in_document=show_errors,
    )

    try:
        result = TemplatePopulator(options).populate(raw, data)
    except (InvalidDocumentError, DataError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    filename = (file.filename or "document.docx").rsplit(".", 1)[0] + ".filled.docx"

    return Response(
        content=result.document,
        media_type=DOCX_MEDIA_TYPE,
        headers={
            "Content-Disposition": _content_disposition(filename),
            ERROR_COUNT_HEADER: str(len(result.errors)),
        },
    )
